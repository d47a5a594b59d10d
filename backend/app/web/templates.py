"""HTML templates for the server-rendered pages.

Plain string templates with html.escape on every interpolated value and
inline CSS. Forms talk to the JSON API through one small inline script and
show the envelope's error message in an inline banner.
"""

from __future__ import annotations

import html
from typing import Literal

from app.models.schemas import (
    CATEGORY_NAME_MAX,
    DESCRIPTION_MAX,
    PASSWORD_MIN,
    TITLE_MAX,
    CategoryOut,
    TaskOut,
    TaskQuery,
)

STATUS_LABELS = {"todo": "To do", "in_progress": "In progress", "done": "Done"}
PRIORITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}
PRIORITY_COLORS = {"low": "#64748b", "medium": "#d97706", "high": "#dc2626"}
SORT_LABELS = {"created_at": "Created", "due_date": "Due date", "priority": "Priority"}
ORDER_LABELS = {"desc": "Descending", "asc": "Ascending"}

_STYLE = """
body { font-family: system-ui, sans-serif; background: #f8fafc; color: #0f172a; margin: 0; }
main { max-width: 760px; margin: 40px auto; padding: 0 16px; }
.card { background: #fff; border: 1px solid #e2e8f0; border-radius: 8px; padding: 20px; margin-bottom: 16px; }
.banner { padding: 10px 12px; border-radius: 6px; font-size: 14px; margin-bottom: 12px; display: none; }
.banner.error { background: #fef2f2; color: #dc2626; }
.banner.success { background: #f0fdf4; color: #16a34a; }
label { display: block; font-size: 14px; margin: 10px 0 4px; }
input, select, textarea { width: 100%; box-sizing: border-box; padding: 8px; border: 1px solid #cbd5e1; border-radius: 6px; }
button { padding: 8px 14px; border: 0; border-radius: 6px; background: #0f172a; color: #fff; cursor: pointer; }
button.secondary { background: #e2e8f0; color: #0f172a; }
.row { display: flex; gap: 8px; align-items: center; }
.task { display: flex; justify-content: space-between; gap: 12px; border-top: 1px solid #e2e8f0; padding: 12px 0; }
.task.done .title { text-decoration: line-through; color: #94a3b8; }
.chip { display: inline-block; font-size: 12px; padding: 2px 8px; border-radius: 999px; background: #f1f5f9; margin-right: 4px; }
.muted { color: #64748b; font-size: 13px; }
"""

_SCRIPT = """
async function api(method, url, body) {
  const resp = await fetch(url, {
    method: method,
    headers: body === undefined ? {} : {"Content-Type": "application/json"},
    body: body === undefined ? undefined : JSON.stringify(body),
  });
  if (resp.status === 204) return {};
  const result = await resp.json();
  if (!resp.ok) throw new Error((result.error && result.error.message) || "An error occurred");
  return result.data;
}
function banner(id, kind, text) {
  const el = document.getElementById(id);
  el.className = "banner " + kind;
  el.textContent = text;
  el.style.display = text ? "block" : "none";
}
function formData(form) {
  const data = {};
  for (const [key, value] of new FormData(form).entries()) {
    if (value !== "") data[key] = value;
  }
  return data;
}
"""


def _e(value: object) -> str:
    return html.escape("" if value is None else str(value))


def layout(title: str, body: str, script: str = "") -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{_e(title)} · Task Planner</title>
<style>{_STYLE}</style>
</head>
<body>
<main>
{body}
</main>
<script>{_SCRIPT}{script}</script>
</body>
</html>"""


def render_auth_page(mode: Literal["login", "register"]) -> str:
    is_login = mode == "login"
    title = "Sign In" if is_login else "Create Account"
    intro = "Enter your credentials to access your tasks" if is_login else "Sign up to start managing your tasks"
    alternate = (
        'Don\'t have an account? <a href="/register">Sign up</a>'
        if is_login
        else 'Already have an account? <a href="/login">Sign in</a>'
    )
    forgot = '<p><a href="/forgot-password">Forgot password?</a></p>' if is_login else ""
    min_length = 1 if is_login else PASSWORD_MIN
    body = f"""
<div class="card">
  <h1>{title}</h1>
  <p class="muted">{intro}</p>
  <form id="auth-form">
    <div id="auth-banner" class="banner"></div>
    <label for="email">Email</label>
    <input id="email" name="email" type="email" placeholder="you@example.com" required>
    <label for="password">Password</label>
    <input id="password" name="password" type="password" minlength="{min_length}" required>
    {forgot}
    <p><button type="submit">{title}</button></p>
  </form>
  <p class="muted">{alternate}</p>
</div>"""
    script = f"""
document.getElementById("auth-form").addEventListener("submit", async (event) => {{
  event.preventDefault();
  banner("auth-banner", "error", "");
  try {{
    const data = await api("POST", "/api/auth/{mode}", formData(event.target));
    if ({str(is_login).lower()}) {{ window.location.href = "/"; return; }}
    banner("auth-banner", "success", data.message || "Registration successful! Please check your email.");
    event.target.reset();
  }} catch (err) {{
    banner("auth-banner", "error", err.message);
  }}
}});"""
    return layout(title, body, script)


def render_forgot_password_page() -> str:
    body = """
<div class="card">
  <h1>Forgot Password</h1>
  <p class="muted">Enter your email and we'll send you a reset link.</p>
  <form id="forgot-form">
    <div id="forgot-banner" class="banner"></div>
    <label for="email">Email</label>
    <input id="email" name="email" type="email" required>
    <p><button type="submit">Send reset link</button></p>
  </form>
  <p class="muted"><a href="/login">Back to sign in</a></p>
</div>"""
    script = """
document.getElementById("forgot-form").addEventListener("submit", async (event) => {
  event.preventDefault();
  try {
    const data = await api("POST", "/api/auth/forgot-password", formData(event.target));
    banner("forgot-banner", "success", data.message);
  } catch (err) {
    banner("forgot-banner", "error", err.message);
  }
});"""
    return layout("Forgot Password", body, script)


def render_reset_password_page() -> str:
    body = f"""
<div class="card">
  <h1>Reset Password</h1>
  <form id="reset-form">
    <div id="reset-banner" class="banner"></div>
    <label for="password">New password</label>
    <input id="password" name="password" type="password" minlength="{PASSWORD_MIN}" required>
    <label for="confirm">Confirm password</label>
    <input id="confirm" type="password" minlength="{PASSWORD_MIN}" required>
    <p><button type="submit">Update password</button></p>
  </form>
</div>"""
    script = """
const recovery = new URLSearchParams(window.location.hash.slice(1)).get("access_token");
document.getElementById("reset-form").addEventListener("submit", async (event) => {
  event.preventDefault();
  const password = document.getElementById("password").value;
  if (password !== document.getElementById("confirm").value) {
    banner("reset-banner", "error", "Passwords do not match");
    return;
  }
  const body = {password: password};
  if (recovery) body.access_token = recovery;
  try {
    const data = await api("POST", "/api/auth/reset-password", body);
    banner("reset-banner", "success", data.message);
    setTimeout(() => { window.location.href = "/"; }, 1500);
  } catch (err) {
    banner("reset-banner", "error", err.message);
  }
});"""
    return layout("Reset Password", body, script)


def _options(choices: dict[str, str], selected: str | None, placeholder: str) -> str:
    items = [f'<option value="">{_e(placeholder)}</option>']
    for value, label in choices.items():
        mark = " selected" if value == selected else ""
        items.append(f'<option value="{_e(value)}"{mark}>{_e(label)}</option>')
    return "".join(items)


def _task_row(task: TaskOut, categories: dict[str, CategoryOut]) -> str:
    category = categories.get(task.category_id or "")
    chips = [
        f'<span class="chip">{_e(STATUS_LABELS[task.status])}</span>',
        f'<span class="chip" style="color:{PRIORITY_COLORS[task.priority]}">{_e(PRIORITY_LABELS[task.priority])}</span>',
    ]
    if category is not None:
        color = _e(category.color or "#64748b")
        chips.append(f'<span class="chip" style="border:1px solid {color}">{_e(category.name)}</span>')
    if task.due_date:
        chips.append(f'<span class="chip">Due {_e(task.due_date.isoformat())}</span>')
    description = f'<div class="muted">{_e(task.description)}</div>' if task.description else ""
    toggle = "todo" if task.status == "done" else "done"
    toggle_label = "Reopen" if task.status == "done" else "Complete"
    done_class = " done" if task.status == "done" else ""
    # Current values, read back by the edit form
    fields = {
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "due-date": task.due_date.isoformat() if task.due_date else None,
        "category-id": task.category_id,
    }
    data = " ".join(f'data-{key}="{_e(value)}"' for key, value in fields.items())
    return f"""
<div class="task{done_class}" data-id="{_e(task.id)}" {data}>
  <div>
    <div class="title">{_e(task.title)}</div>
    {description}
    <div>{"".join(chips)}</div>
  </div>
  <div class="row">
    <button class="secondary" data-action="status" data-status="{toggle}">{toggle_label}</button>
    <button class="secondary" data-action="edit">Edit</button>
    <button class="secondary" data-action="delete">Delete</button>
  </div>
</div>"""


def _category_row(category: CategoryOut) -> str:
    color = _e(category.color or "#64748b")
    # <input type="color"> only takes the six-digit form
    picker = color if len(color) == 7 else "#" + "".join(c * 2 for c in color[1:])
    return f"""
<div class="category row" data-id="{_e(category.id)}" data-name="{_e(category.name)}" data-color="{picker}">
  <span class="chip" style="flex:1;border:1px solid {color}">{_e(category.name)}</span>
  <button class="secondary" data-action="edit-category">Edit</button>
  <button class="secondary" data-action="delete-category">Delete</button>
</div>"""


def render_home_page(
    email: str | None,
    tasks: list[TaskOut],
    categories: list[CategoryOut],
    query: TaskQuery,
    ai_enabled: bool,
) -> str:
    by_id = {c.id: c for c in categories}
    category_choices = {c.id: c.name for c in categories}
    rows = "".join(_task_row(t, by_id) for t in tasks) or '<p class="muted">No tasks yet. Create your first one above.</p>'
    category_rows = "".join(_category_row(c) for c in categories)
    order_options = "".join(
        f'<option value="{value}"{" selected" if value == query.order else ""}>{label}</option>'
        for value, label in ORDER_LABELS.items()
    )
    summary = ""
    suggest = ""
    if ai_enabled:
        suggest = """
    <div class="row" style="margin-top:6px">
      <button type="button" class="secondary" data-suggest="description">Suggest description</button>
      <button type="button" class="secondary" data-suggest="improve">Improve</button>
      <button type="button" class="secondary" data-suggest="priority">Suggest priority</button>
    </div>"""
        summary = """
<div class="card">
  <div class="row"><h2 style="flex:1">Weekly summary</h2><button id="summary-button" class="secondary">Generate</button></div>
  <div id="summary-banner" class="banner"></div>
  <div id="summary-text" style="white-space: pre-wrap"></div>
</div>"""

    body = f"""
<div class="row"><h1 style="flex:1">My Tasks</h1><span class="muted">{_e(email)}</span>
  <button id="logout-button" class="secondary">Sign out</button></div>
<div id="page-banner" class="banner"></div>
<div class="card">
  <h2 id="task-form-title">Create Task</h2>
  <form id="task-form">
    <label for="title">Title</label>
    <input id="title" name="title" maxlength="{TITLE_MAX}" required>
    <label for="description">Description</label>
    <textarea id="description" name="description" maxlength="{DESCRIPTION_MAX}"></textarea>{suggest}
    <div class="row">
      <div style="flex:1"><label for="status">Status</label>
        <select id="status" name="status">{_options(STATUS_LABELS, "todo", "Status")}</select></div>
      <div style="flex:1"><label for="priority">Priority</label>
        <select id="priority" name="priority">{_options(PRIORITY_LABELS, "medium", "Priority")}</select></div>
    </div>
    <div class="row">
      <div style="flex:1"><label for="due_date">Due date</label><input id="due_date" name="due_date" type="date"></div>
      <div style="flex:1"><label for="category_id">Category</label>
        <select id="category_id" name="category_id">{_options(category_choices, None, "No category")}</select></div>
    </div>
    <p class="row">
      <button type="submit" id="task-submit">Create Task</button>
      <button type="button" class="secondary" id="task-cancel" style="display:none">Cancel</button>
    </p>
  </form>
</div>
<div class="card">
  <h2>Categories</h2>
  <div>{category_rows or '<span class="muted">No categories yet.</span>'}</div>
  <form id="category-form" class="row" style="margin-top:12px">
    <input name="name" maxlength="{CATEGORY_NAME_MAX}" placeholder="New category" required>
    <input name="color" type="color" value="#3b82f6" style="width:60px">
    <button type="submit" id="category-submit">Add</button>
    <button type="button" class="secondary" id="category-cancel" style="display:none">Cancel</button>
  </form>
</div>
<div class="card">
  <form method="get" class="row">
    <select name="status">{_options(STATUS_LABELS, query.status, "All statuses")}</select>
    <select name="priority">{_options(PRIORITY_LABELS, query.priority, "All priorities")}</select>
    <select name="category_id">{_options(category_choices, query.category_id, "All categories")}</select>
    <select name="sort">{_options(SORT_LABELS, query.sort, "Sort by")}</select>
    <select name="order">{order_options}</select>
    <button type="submit" class="secondary">Filter</button>
  </form>
  {rows}
</div>
{summary}"""
    script = """
const reload = () => window.location.reload();
const taskForm = document.getElementById("task-form");
const categoryForm = document.getElementById("category-form");
let editingTask = null;
let editingCategory = null;

function editTask(row) {
  editingTask = row.dataset.id;
  const f = taskForm.elements;
  f.title.value = row.dataset.title;
  f.description.value = row.dataset.description;
  f.status.value = row.dataset.status;
  f.priority.value = row.dataset.priority;
  f.due_date.value = row.dataset.dueDate;
  f.category_id.value = row.dataset.categoryId;
  document.getElementById("task-form-title").textContent = "Edit Task";
  document.getElementById("task-submit").textContent = "Save Changes";
  document.getElementById("task-cancel").style.display = "";
  taskForm.scrollIntoView();
}
taskForm.addEventListener("submit", async (event) => {
  event.preventDefault();
  try {
    if (editingTask) {
      // Blank optional fields are sent as null so the update clears them
      const f = taskForm.elements;
      await api("PUT", "/api/tasks/" + editingTask, {
        title: f.title.value,
        description: f.description.value || null,
        status: f.status.value,
        priority: f.priority.value,
        due_date: f.due_date.value || null,
        category_id: f.category_id.value || null,
      });
    } else {
      await api("POST", "/api/tasks", formData(taskForm));
    }
    reload();
  } catch (err) { banner("page-banner", "error", err.message); }
});
document.getElementById("task-cancel").addEventListener("click", reload);

categoryForm.addEventListener("submit", async (event) => {
  event.preventDefault();
  try {
    if (editingCategory) await api("PUT", "/api/categories/" + editingCategory, formData(categoryForm));
    else await api("POST", "/api/categories", formData(categoryForm));
    reload();
  } catch (err) { banner("page-banner", "error", err.message); }
});
document.getElementById("category-cancel").addEventListener("click", reload);
document.querySelectorAll(".category button").forEach((button) => {
  button.addEventListener("click", async () => {
    const row = button.closest(".category");
    if (button.dataset.action === "edit-category") {
      editingCategory = row.dataset.id;
      categoryForm.elements.name.value = row.dataset.name;
      categoryForm.elements.color.value = row.dataset.color;
      document.getElementById("category-submit").textContent = "Save";
      document.getElementById("category-cancel").style.display = "";
      return;
    }
    if (!confirm('Delete category "' + row.dataset.name + '"?')) return;
    try { await api("DELETE", "/api/categories/" + row.dataset.id); reload(); }
    catch (err) { banner("page-banner", "error", err.message); }
  });
});

document.querySelectorAll(".task button").forEach((button) => {
  button.addEventListener("click", async () => {
    const row = button.closest(".task");
    if (button.dataset.action === "edit") { editTask(row); return; }
    try {
      if (button.dataset.action === "delete") {
        if (!confirm("Are you sure you want to delete this task?")) return;
        await api("DELETE", "/api/tasks/" + row.dataset.id);
      } else {
        await api("PUT", "/api/tasks/" + row.dataset.id, {status: button.dataset.status});
      }
      reload();
    } catch (err) { banner("page-banner", "error", err.message); }
  });
});
document.getElementById("logout-button").addEventListener("click", async () => {
  try { await api("POST", "/api/auth/logout"); } finally { window.location.href = "/login"; }
});
document.querySelectorAll("[data-suggest]").forEach((button) => {
  button.addEventListener("click", async () => {
    const form = taskForm.elements;
    const body = {type: button.dataset.suggest, title: form.title.value};
    if (form.description.value) body.description = form.description.value;
    if (form.due_date.value) body.due_date = form.due_date.value;
    button.disabled = true;
    try {
      const data = await api("POST", "/api/ai/suggest", body);
      if (data.type === "priority") form.priority.value = data.suggestion;
      else form.description.value = data.suggestion;
    } catch (err) { banner("page-banner", "error", err.message); }
    finally { button.disabled = false; }
  });
});
const summaryButton = document.getElementById("summary-button");
if (summaryButton) {
  summaryButton.addEventListener("click", async () => {
    summaryButton.disabled = true;
    try {
      const data = await api("GET", "/api/ai/summarize-week");
      document.getElementById("summary-text").textContent = data.summary;
    } catch (err) { banner("summary-banner", "error", err.message); }
    finally { summaryButton.disabled = false; }
  });
}"""
    return layout("My Tasks", body, script)
