"""Admin menu CRUD endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import HTMLResponse

from mcnutrition.api.models import MenuRecordPayload  # noqa: TC001
from mcnutrition.services.errors import AuthenticationRequiredError

if TYPE_CHECKING:
    from mcnutrition.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise AuthenticationRequiredError("Admin token required")


@router.post(
    "/data",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_record(
    payload: MenuRecordPayload, request: Request
) -> dict[str, object]:
    """Create a menu record; the server assigns the id."""
    container: AppContainer = request.app.state.container
    return container.menu_service.create_item(payload.to_record()).to_record()


@router.put("/data/{item_id}", dependencies=[Depends(require_admin)])
async def update_record(
    item_id: str, payload: MenuRecordPayload, request: Request
) -> dict[str, object]:
    """Update a menu record by id."""
    container: AppContainer = request.app.state.container
    return container.menu_service.update_item(item_id, payload.to_record()).to_record()


@router.delete("/data/{item_id}", dependencies=[Depends(require_admin)])
async def delete_record(item_id: str, request: Request) -> dict[str, object]:
    """Delete a menu record by id."""
    container: AppContainer = request.app.state.container
    return container.menu_service.delete_item(item_id).to_record()


@router.get("/ui", response_class=HTMLResponse)
async def admin_ui() -> HTMLResponse:
    """Minimal admin page that consumes the menu endpoints."""
    return HTMLResponse(_ADMIN_UI_HTML)


_ADMIN_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>McNutrition Menu Admin</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .row { margin-bottom: 1rem; }
      input, textarea { padding: 0.4rem 0.6rem; width: 420px; }
      textarea { height: 12rem; font-family: ui-monospace, monospace; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      pre { background: #f6f6f6; padding: 1rem; overflow: auto; }
    </style>
  </head>
  <body>
    <h1>Menu Admin</h1>
    <div class="row">
      <label>Admin token</label><br />
      <input id="token" type="password" placeholder="X-Admin-Token" />
    </div>
    <div class="row">
      <label>Search</label><br />
      <input id="terms" placeholder="Big Mac" />
      <button onclick="search()">Search</button>
    </div>
    <div class="row">
      <label>Record id (update/delete)</label><br />
      <input id="record-id" />
    </div>
    <div class="row">
      <label>Record JSON</label><br />
      <textarea id="record">{"ITEM": "", "CATEGORY": "BURGERSANDWICH", "CAL": "0"}</textarea>
    </div>
    <div class="row">
      <button onclick="send('POST', '/admin/data')">Create</button>
      <button onclick="send('PUT', '/admin/data/' + recordId())">Update</button>
      <button onclick="send('DELETE', '/admin/data/' + recordId())">Delete</button>
    </div>
    <pre id="output">Ready.</pre>
    <script>
      function recordId() {
        return encodeURIComponent(document.getElementById('record-id').value);
      }
      async function show(res) {
        const output = document.getElementById('output');
        const data = await res.json().catch(() => null);
        if (!res.ok) {
          output.textContent = 'Error: ' + ((data && data.error) || res.status);
          return;
        }
        output.textContent = JSON.stringify(data, null, 2);
      }
      async function search() {
        const terms = encodeURIComponent(document.getElementById('terms').value);
        await show(await fetch('/search?terms=' + terms));
      }
      async function send(method, path) {
        const token = document.getElementById('token').value;
        const options = { method, headers: { 'X-Admin-Token': token } };
        if (method !== 'DELETE') {
          options.headers['Content-Type'] = 'application/json';
          options.body = document.getElementById('record').value;
        }
        await show(await fetch(path, options));
      }
    </script>
  </body>
</html>
"""
