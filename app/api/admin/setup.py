"""초기 설정 HTML 페이지 — 첫 매장과 슈퍼 관리자 생성 폼.

Setup HTML page — Serves a simple form that creates the first store and
its super admin account. The form only works while no store exists.
"""

from html import escape
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.super_admin_service import super_admin_service

router: APIRouter = APIRouter()

SETUP_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>ShiftBoard Setup</title>
<style>
body{font-family:system-ui,sans-serif;background:#111;color:#eee;display:flex;justify-content:center;align-items:center;min-height:100vh;margin:0}
.card{background:#1a1a2e;border:1px solid #333;border-radius:12px;padding:40px;width:360px}
h2{text-align:center;margin:0 0 24px}
label{display:block;font-size:13px;color:#aaa;margin-bottom:4px}
input{width:100%;padding:10px;border:1px solid #333;border-radius:6px;background:#111;color:#eee;font-size:14px;box-sizing:border-box;margin-bottom:16px}
input:focus{outline:none;border-color:#4285f4}
button{width:100%;padding:12px;border:none;border-radius:6px;background:#4285f4;color:#fff;font-size:14px;font-weight:bold;cursor:pointer}
button:hover{background:#5a95f5}
.msg{padding:10px;border-radius:6px;font-size:13px;margin-bottom:16px;text-align:center}
.err{background:#ff525222;color:#ff5252}
.ok{background:#00b89422;color:#00b894}
</style>
</head>
<body>
<div class="card">
<h2>ShiftBoard Setup</h2>
{{MESSAGE}}
{{FORM}}
</div>
</body>
</html>"""

SETUP_FORM = """<form method="post" action="/setup">
<label>Store Name</label>
<input name="store_name" required placeholder="My Store">
<label>Admin Name</label>
<input name="admin_name" required placeholder="Store Manager">
<label>Admin Email</label>
<input name="email" type="email" required placeholder="admin@example.com">
<label>Admin Password</label>
<input name="password" type="password" required minlength="8" placeholder="password">
<button type="submit">Create</button>
</form>"""

DONE_MESSAGE = '<div class="msg ok">Setup already completed. Use /docs or the admin app to log in.</div>'


def _render(message: str = "", show_form: bool = True, status_code: int = 200) -> HTMLResponse:
    html: str = SETUP_HTML.replace("{{MESSAGE}}", message).replace(
        "{{FORM}}", SETUP_FORM if show_form else ""
    )
    return HTMLResponse(html, status_code=status_code)


@router.get("/setup", response_class=HTMLResponse)
async def setup_page(db: Annotated[AsyncSession, Depends(get_db)]) -> HTMLResponse:
    """초기 설정 페이지를 반환합니다."""
    if not await super_admin_service.needs_setup(db):
        return _render(DONE_MESSAGE, show_form=False)
    return _render()


@router.post("/setup", response_class=HTMLResponse)
async def submit_setup(
    db: Annotated[AsyncSession, Depends(get_db)],
    store_name: Annotated[str, Form()],
    admin_name: Annotated[str, Form()],
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
) -> HTMLResponse:
    """초기 설정 폼을 처리합니다 — 첫 매장과 슈퍼 관리자를 생성."""
    if not await super_admin_service.needs_setup(db):
        return _render(DONE_MESSAGE, show_form=False, status_code=400)
    try:
        admin = await super_admin_service.setup_first_store(db, store_name, admin_name, email, password)
    except HTTPException as exc:
        await db.rollback()
        return _render(
            f'<div class="msg err">{escape(str(exc.detail))}</div>',
            status_code=exc.status_code,
        )
    await db.commit()
    return _render(
        f'<div class="msg ok">Created store and super admin {escape(admin.email)}. '
        "Log in via /api/v1/auth/login.</div>",
        show_form=False,
        status_code=201,
    )
