from html import escape
from typing import Any, Dict, Iterable, Optional

from fastapi.responses import HTMLResponse


def render_page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    html = (
        "<!DOCTYPE html>"
        f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head>"
        f"<body><h1>{escape(title)}</h1>{body}</body></html>"
    )
    return HTMLResponse(html, status_code=status_code)


def user_bar(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return '<p><a href="/login">Login</a></p>'
    return (
        f"<p>Hi {escape(user['username'])} "
        '<form action="/logout" method="post" style="display:inline">'
        '<button type="submit">Logout</button></form></p>'
    )


def joke_list(jokes: Iterable[Dict[str, Any]]) -> str:
    items = "".join(
        f'<li><a href="/jokes/{escape(j["id"])}">{escape(j["name"])}</a></li>' for j in jokes
    )
    return f"<ul>{items}</ul>"


def login_form(error: Optional[str] = None, redirect_to: str = "/jokes") -> str:
    error_html = f'<p role="alert">{escape(error)}</p>' if error else ""
    fields = (
        f'<input type="hidden" name="redirectTo" value="{escape(redirect_to)}">'
        '<label>Username <input name="username"></label>'
        '<label>Password <input name="password" type="password"></label>'
    )
    return (
        error_html
        + f'<form action="/login" method="post">{fields}<button type="submit">Login</button></form>'
        + f'<form action="/register" method="post">{fields}<button type="submit">Register</button></form>'
    )
