"""Server-rendered HTML pages.

Plain string templates. Anything that came from the database or the client goes
through `html.escape`.
"""

from __future__ import annotations

from html import escape
from typing import Any, Dict, List, Optional


SITE_TITLE = "Model Website"

_STYLE = """
body { font-family: Arial, sans-serif; margin: 0; }
header { background:#111; color:#fff; padding:16px; }
main { padding: 24px; max-width: 960px; }
.card { border:1px solid #ddd; border-radius:8px; padding:16px; margin-bottom:16px; }
label { display:block; margin:8px 0 4px; }
input, textarea, select { width:100%; max-width:420px; padding:6px; }
table { border-collapse: collapse; width: 100%; }
td, th { border-bottom:1px solid #eee; padding:6px; text-align:left; vertical-align:top; }
.muted { color:#777; }
"""

# Posts a form as JSON and prints the response into the form's <output>.
_FORM_SCRIPT = """
<script>
document.querySelectorAll("form[data-json]").forEach(function (form) {
  form.addEventListener("submit", async function (ev) {
    ev.preventDefault();
    var body = {};
    new FormData(form).forEach(function (v, k) { if (v !== "") body[k] = v; });
    if (body.talent_id) body.talent_id = Number(body.talent_id);
    // datetime-local is wall time without an offset; send it as UTC.
    if (body.meeting_time) body.meeting_time = new Date(body.meeting_time).toISOString();
    var res = await fetch(form.action, {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(body),
      credentials: "same-origin"
    });
    var data = await res.json().catch(function () { return {}; });
    if (form.dataset.reload && res.ok) { window.location.reload(); return; }
    form.querySelector("output").textContent = res.ok ? "Thanks! We'll be in touch." : (data.error || "Something went wrong");
  });
});
</script>
"""


def _layout(title: str, body: str) -> str:
    return f"""<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{escape(title)}</title>
    <style>{_STYLE}</style>
  </head>
  <body>
    <header>
      <h1>{escape(SITE_TITLE)}</h1>
      <p>Talent directory, bookings and enquiries.</p>
    </header>
    <main>
{body}
    </main>
{_FORM_SCRIPT}
  </body>
</html>"""


def _text(value: Any) -> str:
    if value is None or value == "":
        return '<span class="muted">-</span>'
    return escape(str(value))


def _talent_cards(talents: Optional[List[Dict[str, Any]]]) -> str:
    if talents is None:
        return (
            '<div class="card"><h2>Talent Directory</h2>'
            "<p>The directory is not connected to a database yet.</p></div>"
        )
    if not talents:
        return '<div class="card"><h2>Talent Directory</h2><p>No talent listed yet.</p></div>'

    items = []
    for t in talents:
        link = ""
        if t.get("portfolio_url"):
            link = f' <a href="{escape(str(t["portfolio_url"]), quote=True)}" rel="noopener">Portfolio</a>'
        items.append(f"<li><strong>{escape(str(t['name']))}</strong>{link}<br/>{_text(t.get('bio'))}</li>")
    return '<div class="card"><h2>Talent Directory</h2><ul>' + "".join(items) + "</ul></div>"


def _talent_options(talents: Optional[List[Dict[str, Any]]]) -> str:
    opts = ['<option value="">No preference</option>']
    for t in talents or []:
        opts.append(f'<option value="{int(t["id"])}">{escape(str(t["name"]))}</option>')
    return "".join(opts)


def render_index(talents: Optional[List[Dict[str, Any]]]) -> str:
    """Public landing page. `talents` is None when storage is not configured."""
    body = f"""
      {_talent_cards(talents)}
      <div class="card">
        <h2>Request a booking</h2>
        <form action="/api/bookings" method="post" data-json="1">
          <label>Talent</label><select name="talent_id">{_talent_options(talents)}</select>
          <label>Your name</label><input name="client_name" required />
          <label>Your email</label><input name="client_email" type="email" required />
          <label>Preferred meeting time</label><input name="meeting_time" type="datetime-local" />
          <p><button type="submit">Send request</button> <output></output></p>
        </form>
      </div>
      <div class="card">
        <h2>Ask a question</h2>
        <form action="/api/questions" method="post" data-json="1">
          <label>Name</label><input name="name" />
          <label>Email</label><input name="email" type="email" />
          <label>Message</label><textarea name="message" rows="4" required></textarea>
          <p><button type="submit">Send</button> <output></output></p>
        </form>
      </div>
"""
    return _layout(SITE_TITLE, body)


def render_login() -> str:
    body = """
      <div class="card">
        <h2>Admin login</h2>
        <form action="/admin/login" method="post" data-json="1" data-reload="1">
          <label>Username</label><input name="username" autocomplete="username" required />
          <label>Password</label><input name="password" type="password" autocomplete="current-password" required />
          <p><button type="submit">Log in</button> <output></output></p>
        </form>
      </div>
"""
    return _layout(f"{SITE_TITLE} - Admin", body)


def _table(headers: List[str], keys: List[str], rows: List[Dict[str, Any]]) -> str:
    if not rows:
        return '<p class="muted">Nothing yet.</p>'
    head = "".join(f"<th>{escape(h)}</th>" for h in headers)
    body = "".join("<tr>" + "".join(f"<td>{_text(r.get(k))}</td>" for k in keys) + "</tr>" for r in rows)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def render_admin_panel(
    session: Dict[str, Any],
    *,
    bookings: Optional[List[Dict[str, Any]]],
    questions: Optional[List[Dict[str, Any]]],
) -> str:
    """Admin panel. `bookings`/`questions` are None when storage is not configured."""
    if bookings is None or questions is None:
        data = '<div class="card"><p>Storage is not configured; no data to show.</p></div>'
    else:
        data = f"""
      <div class="card">
        <h2>Recent bookings</h2>
        {_table(["When", "Client", "Email", "Talent", "Meeting", "Status"],
                ["created_at", "client_name", "client_email", "talent_name", "meeting_time", "status"],
                bookings)}
      </div>
      <div class="card">
        <h2>Recent questions</h2>
        {_table(["When", "Name", "Email", "Message"], ["created_at", "name", "email", "message"], questions)}
      </div>
"""
    body = f"""
      <div class="card">
        <h2>Admin panel</h2>
        <p>Signed in as <strong>{escape(str(session.get("sub", "")))}</strong>.</p>
        <form action="/admin/logout" method="post" data-json="1" data-reload="1">
          <button type="submit">Log out</button> <output></output>
        </form>
      </div>
{data}"""
    return _layout(f"{SITE_TITLE} - Admin", body)
