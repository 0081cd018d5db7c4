"""
Pool Error Observer
===================

Long-lived listener attached to the SQLAlchemy Engine that logs every
connection/pool error. Three transient network failures get an extra
informational line:

- ``ECONNRESET``   connection reset by the server or the network
- ``ENOTFOUND``    database host name could not be resolved
- ``ECONNREFUSED`` nothing listening on the database port

No corrective action is taken. A broken connection is invalidated by SQLAlchemy
and the pool opens a fresh one on the next checkout (``pool_pre_ping`` covers
connections that died while idle).
"""

import errno
import logging
import socket
from typing import Callable, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine, ExceptionContext

logger = logging.getLogger("uvicorn.error")

# MySQL client error codes wrapped by the DBAPI drivers
_MYSQL_CLIENT_ERRORS = {
    2003: "ECONNREFUSED",  # CR_CONN_HOST_ERROR
    2005: "ENOTFOUND",  # CR_UNKNOWN_HOST
    2013: "ECONNRESET",  # CR_SERVER_LOST
}

_ERRNO_NAMES = {
    errno.ECONNRESET: "ECONNRESET",
    errno.ECONNREFUSED: "ECONNREFUSED",
}


def _classify_single(exc: BaseException) -> Optional[str]:
    if isinstance(exc, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(exc, ConnectionResetError):
        return "ECONNRESET"
    if isinstance(exc, ConnectionRefusedError):
        return "ECONNREFUSED"
    if isinstance(exc, OSError) and exc.errno in _ERRNO_NAMES:
        return _ERRNO_NAMES[exc.errno]
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], int):
        return _MYSQL_CLIENT_ERRORS.get(args[0])
    return None


def classify_transient_error(exc: Optional[BaseException]) -> Optional[str]:
    """
    Map an exception (or anything in its cause chain) to a transient error code.

    Returns
    -------
    str | None
        ``"ECONNRESET"``, ``"ENOTFOUND"``, ``"ECONNREFUSED"`` or None.
    """
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        code = _classify_single(exc)
        if code:
            return code
        # sqlalchemy.exc.DBAPIError keeps the driver exception on `.orig`
        exc = getattr(exc, "orig", None) or exc.__cause__ or exc.__context__
    return None


def on_pool_error(context: ExceptionContext) -> None:
    """`handle_error` listener: log the error, announce reconnects for transient ones."""
    error = context.sqlalchemy_exception or context.original_exception
    logger.error("Database pool error: %s", error)
    if classify_transient_error(context.original_exception) or classify_transient_error(
        context.sqlalchemy_exception
    ):
        logger.info("Attempting to reconnect to database...")


def register_pool_error_observer(engine: Engine) -> Callable[[ExceptionContext], None]:
    """Attach `on_pool_error` to `engine` and return the registered listener."""
    event.listen(engine, "handle_error", on_pool_error)
    return on_pool_error
