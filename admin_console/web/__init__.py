"""Server-rendered console shell (FastAPI + Jinja2 + HTMX)."""
from .app import create_app

__all__ = ["create_app"]
