"""Login / logout."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from admin_console.web.deps import Console, get_console
from admin_console.web.rendering import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

LOGIN_FAILED = "Invalid credentials or not an administrator account."


@router.get("/login")
async def login_page(request: Request, console: Console = Depends(get_console)):
    """Login form; an already authenticated admin goes straight to the dashboard."""
    await console.store.check_auth()
    if console.store.is_authenticated:
        return RedirectResponse("/", status_code=303)
    console.registry.discard(console.token)
    response = render(request, "login.html", {"email": ""})
    return console.storage.apply(response)


@router.post("/login")
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    console: Console = Depends(get_console),
):
    email = email.strip()
    if not email or not password:
        return render(request, "login.html", {"email": email, "error": "Email and password are required."})

    if await console.store.login(email, password):
        console.begin_session()
        response = RedirectResponse("/", status_code=303)
        return console.storage.apply(response)

    response = render(request, "login.html", {"email": email, "error": LOGIN_FAILED})
    return console.storage.apply(response)


@router.post("/logout")
async def logout(request: Request, console: Console = Depends(get_console)):
    console.end_session()
    response = RedirectResponse("/login", status_code=303)
    return console.storage.apply(response)
