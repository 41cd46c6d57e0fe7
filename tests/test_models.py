"""Schema-level checks for the user table."""

from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from jokes_api.models.joke import Joke  # noqa: F401
from jokes_api.models.user import User


def _username_ddl(dialect) -> str:
    ddl = str(CreateTable(User.__table__).compile(dialect=dialect))
    return next(line for line in ddl.splitlines() if "username" in line)


def test_mysql_username_is_case_sensitive():
    assert "utf8mb4_bin" in _username_ddl(mysql.dialect())


def test_sqlite_username_has_no_mysql_collation():
    assert "COLLATE" not in _username_ddl(sqlite.dialect())
