"""Connection URL handling, including the JDBC-style URLs used by the game servers."""

from typing import Optional

from sqlalchemy.engine import URL, make_url


JDBC_PREFIX = "jdbc:"

# DBAPI used for jdbc:mysql / jdbc:mariadb URLs
MYSQL_DRIVER = "pymysql"


def _from_jdbc(url: str) -> URL:
    """
    Translate a JDBC URL (without the jdbc: prefix) to a SQLAlchemy URL.

    Connector/J options in the query string have no meaning to the Python
    driver and are dropped, except user and password.
    """
    scheme, _, rest = url.partition(":")

    if scheme == "sqlite":
        if rest in ("", ":memory:"):
            return URL.create("sqlite")
        return URL.create("sqlite", database=rest)

    if scheme in ("mysql", "mariadb"):
        parsed = make_url(f"{scheme}+{MYSQL_DRIVER}:{rest}")
        query = parsed.query
        parsed = parsed.set(query={})
        if "user" in query and parsed.username is None:
            parsed = parsed.set(username=query["user"])
        if "password" in query and parsed.password is None:
            parsed = parsed.set(password=query["password"])
        return parsed

    raise ValueError(f"Unsupported JDBC URL scheme: {scheme!r}")


def resolve_url(
    url: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> URL:
    """
    Build the SQLAlchemy URL for a store.

    Accepts SQLAlchemy URLs as-is and translates jdbc: URLs. Explicit
    credentials override any found in the URL.

    Raises ValueError or sqlalchemy.exc.ArgumentError for a malformed URL.
    """
    if url.startswith(JDBC_PREFIX):
        resolved = _from_jdbc(url[len(JDBC_PREFIX):])
    else:
        resolved = make_url(url)

    if username is not None:
        resolved = resolved.set(username=username)
    if password is not None:
        resolved = resolved.set(password=password)
    return resolved
