from fastapi import Request

from jokes_web.api_client import JokesApiClient
from jokes_web.relay import SessionRelay


def get_relay(request: Request) -> SessionRelay:
    return request.app.state.relay


def get_api_client(request: Request) -> JokesApiClient:
    return request.app.state.api_client
