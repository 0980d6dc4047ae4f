"""Dashboard page and its stats fragment."""
from fastapi import APIRouter, Depends, Request

from admin_console.controllers import DashboardController
from admin_console.web.deps import Console, require_admin
from admin_console.web.rendering import render, render_page

router = APIRouter(tags=["dashboard"])


@router.get("/")
async def dashboard_page(request: Request, console: Console = Depends(require_admin)):
    return render_page(request, console, "dashboard.html")


@router.get("/stats")
async def dashboard_stats(request: Request, console: Console = Depends(require_admin)):
    result = await DashboardController(console.api, console.queries).load()
    return render(request, "partials/stats.html", {
        "cards": DashboardController.cards(result.data),
        "error": result.error,
        "loaded": result.data is not None,
    })
