from html import escape

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from jokes_web.api_client import JokesApiClient
from jokes_web.dependencies import get_api_client, get_relay
from jokes_web.exceptions import ApiRequestError
from jokes_web.pages import joke_list, render_page, user_bar
from jokes_web.relay import SessionRelay

router = APIRouter(tags=["Joke Pages"])


@router.get("/")
async def index(
    request: Request,
    relay: SessionRelay = Depends(get_relay),
    api: JokesApiClient = Depends(get_api_client),
):
    """
    첫 화면: 액세스 토큰이 만료되었으면 미리 재발급하여 쿠키 갱신
    """
    cookie = await relay.refresh_access_token_session(request)
    user = await api.get_user(request)
    response = render_page(
        "Remix Jokes",
        user_bar(user) + '<p><a href="/jokes">Read Jokes</a></p>',
    )
    if cookie:
        response.headers.append("set-cookie", cookie)
    return response


@router.get("/jokes")
async def jokes_index(api: JokesApiClient = Depends(get_api_client)):
    jokes = await api.get_all_jokes()
    body = joke_list(jokes) + '<p><a href="/jokes/mine">My jokes</a></p>'
    return render_page("Jokes", body)


@router.get("/jokes/mine")
async def my_jokes(request: Request, api: JokesApiClient = Depends(get_api_client)):
    jokes = await api.get_users_jokes(request)
    form = (
        '<form action="/jokes/new" method="post">'
        '<label>Name <input name="name"></label>'
        '<label>Content <textarea name="content"></textarea></label>'
        '<button type="submit">Add</button></form>'
    )
    return render_page("My Jokes", joke_list(jokes) + form)


@router.post("/jokes/new")
async def create_joke(
    request: Request,
    name: str = Form(""),
    content: str = Form(""),
    api: JokesApiClient = Depends(get_api_client),
):
    try:
        joke = await api.create_joke(request, name, content)
    except ApiRequestError as e:
        return render_page("My Jokes", f'<p role="alert">{escape(e.message)}</p>', e.status_code)
    return RedirectResponse(f"/jokes/{joke['id']}", status_code=303)


@router.get("/jokes/{joke_id}")
async def joke_detail(joke_id: str, api: JokesApiClient = Depends(get_api_client)):
    joke = await api.get_joke(joke_id)
    if joke is None:
        return render_page("Not found", "<p>What a joke! Not found.</p>", 404)
    body = (
        f"<p>{escape(joke['content'])}</p>"
        f'<form action="/jokes/{escape(joke["id"])}/delete" method="post">'
        '<button type="submit">Delete</button></form>'
    )
    return render_page(joke["name"], body)


@router.post("/jokes/{joke_id}/delete")
async def delete_joke(
    request: Request,
    joke_id: str,
    api: JokesApiClient = Depends(get_api_client),
):
    try:
        await api.delete_joke(request, joke_id)
    except ApiRequestError as e:
        return render_page("Jokes", f'<p role="alert">{escape(e.message)}</p>', e.status_code)
    return RedirectResponse("/jokes", status_code=303)
