"""Helpers for building and inspecting database URLs."""


def get_database_url(
    driver: str,
    host: str,
    port: int,
    user: str,
    password: str,
    name: str,
) -> str:
    """
    Construct a server database URL from its components.

    Example:
        >>> get_database_url("postgresql+asyncpg", "db", 5432, "it", "secret", "assets")
        'postgresql+asyncpg://it:secret@db:5432/assets'
    """
    return f"{driver}://{user}:{password}@{host}:{port}/{name}"


def is_sqlite_url(url: str) -> bool:
    """True for file or in-memory SQLite URLs (any driver suffix)."""
    return url.startswith("sqlite")


def engine_options(url: str, debug: bool = False) -> dict:
    """Keyword arguments for `create_async_engine` suited to the backend."""
    options: dict = {"echo": debug, "future": True}
    if is_sqlite_url(url):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_pre_ping"] = True
    return options
