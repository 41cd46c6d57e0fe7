"""Tests for the encrypted cookie session store."""

import pytest

from jokes_web.session import Session, SessionStorage

from conftest import SESSION_SECRET


def _cookie_value(set_cookie: str) -> str:
    return set_cookie.split(";", 1)[0].split("=", 1)[1]


@pytest.fixture
def storage() -> SessionStorage:
    return SessionStorage(SESSION_SECRET, max_age=3600)


def test_commit_and_read_back(storage):
    session = Session()
    session.set("accessToken", "a")
    session.set("refreshToken", "r")

    header = storage.commit_session(session)
    assert header.startswith("RJ_auth_session=")
    assert session.modified is False

    restored = storage.get_session(_cookie_value(header))
    assert restored.to_dict() == {"accessToken": "a", "refreshToken": "r"}
    assert restored.modified is False


def test_cookie_attributes(storage):
    header = storage.commit_session(Session({"k": "v"})).lower()
    assert "httponly" in header
    assert "samesite=lax" in header
    assert "max-age=3600" in header
    assert "path=/" in header
    assert "secure" not in header

    secure = SessionStorage(SESSION_SECRET, secure=True)
    assert "secure" in secure.commit_session(Session()).lower()


def test_tampered_cookie_gives_empty_session(storage):
    value = _cookie_value(storage.commit_session(Session({"k": "v"})))
    tampered = value[:-4] + ("AAAA" if not value.endswith("AAAA") else "BBBB")
    assert storage.get_session(tampered).to_dict() == {}
    assert storage.get_session("not even base64 !!").to_dict() == {}
    assert storage.get_session(None).to_dict() == {}


def test_other_secret_cannot_read(storage):
    value = _cookie_value(storage.commit_session(Session({"k": "v"})))
    other = SessionStorage("another-secret")
    assert other.get_session(value).to_dict() == {}


def test_expired_cookie_gives_empty_session():
    writer = SessionStorage(SESSION_SECRET, max_age=3600)
    value = _cookie_value(writer.commit_session(Session({"k": "v"})))
    reader = SessionStorage(SESSION_SECRET, max_age=-1)
    assert reader.get_session(value).to_dict() == {}


def test_destroy_session(storage):
    session = Session({"accessToken": "a"})
    header = storage.destroy_session(session)
    assert header.startswith("RJ_auth_session=")
    assert "max-age=0" in header.lower()
    assert session.destroyed is True
    assert session.to_dict() == {}


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        SessionStorage("")
