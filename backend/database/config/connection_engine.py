"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database pool initialization for the application:
- Validates that the four required credentials are present in the settings.
- Builds a SQLAlchemy connection URL from those settings.
- Creates the Engine (bounded connection pool + SQL execution entry point).
- Registers the pool error observer.

Notes
-----
- Uses `URL.create(...)` to avoid hardcoding credentials and to keep configuration
  environment-driven (e.g., via `.env`, container secrets, or deployment vars).
- Pool sizing and timeouts are fixed operational constants, not settings.
- The Engine is not a module global: `init_database` returns it and the caller
  (the application lifespan or the process entrypoint) owns it until exit.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from backend.database.config.config import Settings
from backend.database.helpers.pool_events import register_pool_error_observer

REQUIRED_DB_ENV_VARS = ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME")
"""Environment variables that must be non-blank before the pool is created."""


class DatabaseConfigError(RuntimeError):
    """
    Fatal startup error raised when database credentials are missing.

    Attributes
    ----------
    missing : list[str]
        Every required variable that was absent or blank, in declaration order.
    """

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"DB credentials missing in environment variables: {', '.join(self.missing)}"
        )


class PoolConfig(BaseModel):
    """
    Connection parameters plus the fixed operational constants of the pool.

    Attributes
    ----------
    host, user, password, database : str
        Required credentials, already validated as non-blank.
    pool_size : int
        Maximum number of concurrent connections.
    max_overflow : int
        Connections allowed beyond `pool_size` (none: the pool is bounded).
    pool_timeout : float | None
        Wait for a free connection; `None` queues checkout requests without limit.
    connect_timeout : int
        Seconds allowed for establishing a new connection.
    idle_timeout : int
        Seconds after which a pooled connection is recycled.
    keep_alive : bool
        Ping connections on checkout so dead ones are replaced transparently.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    user: str
    password: str
    database: str
    port: Optional[int] = None
    driver: str = "mysql+pymysql"

    pool_size: int = 10
    max_overflow: int = 0
    pool_timeout: Optional[float] = None
    connect_timeout: int = 60
    idle_timeout: int = 60
    keep_alive: bool = True


def missing_database_credentials(settings: Settings) -> List[str]:
    """Return every required DB variable that is unset or blank after trimming."""
    missing = []
    for name in REQUIRED_DB_ENV_VARS:
        value = getattr(settings, name, None)
        if value is None or str(value).strip() == "":
            missing.append(name)
    return missing


def load_pool_config(settings: Settings) -> PoolConfig:
    """
    Validate the database settings and freeze them into a `PoolConfig`.

    Raises
    ------
    DatabaseConfigError
        If any of DB_HOST, DB_USER, DB_PASSWORD or DB_NAME is missing. The error
        names all of them, not just the first.
    """
    missing = missing_database_credentials(settings)
    if missing:
        raise DatabaseConfigError(missing)
    return PoolConfig(
        host=settings.DB_HOST.strip(),
        user=str(settings.DB_USER),
        password=str(settings.DB_PASSWORD),
        database=settings.DB_NAME.strip(),
        port=settings.DB_PORT,
        driver=settings.DB_DRIVER_NAME,
    )


def build_connection_url(config: PoolConfig) -> URL:
    """Construct the SQLAlchemy connection URL for `config`."""
    return URL.create(
        drivername=config.driver,
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )


def _connect_args(config: PoolConfig) -> dict:
    # connect_timeout is understood by the MySQL and PostgreSQL drivers only
    if config.driver.startswith(("mysql", "mariadb", "postgresql")):
        return {"connect_timeout": config.connect_timeout}
    return {}


def create_connection_engine(config: PoolConfig) -> Engine:
    """
    Create the bounded connection pool and attach the error observer.

    No connection is opened here; the first checkout happens in the startup probe.
    """
    engine = create_engine(
        build_connection_url(config),
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.idle_timeout,
        pool_pre_ping=config.keep_alive,
        connect_args=_connect_args(config),
    )
    register_pool_error_observer(engine)
    return engine


def init_database(settings: Settings) -> Engine:
    """
    Validate credentials and construct the application's connection pool.

    Parameters
    ----------
    settings : Settings
        Source of the DB_* values.

    Returns
    -------
    Engine
        The pool handle. The caller owns it for the lifetime of the process.

    Raises
    ------
    DatabaseConfigError
        Before any connection attempt, when credentials are missing.
    """
    return create_connection_engine(load_pool_config(settings))
