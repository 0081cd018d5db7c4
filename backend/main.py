"""
FastAPI application bootstrap with: \n
- Lifespan-managed database pool (created once, disposed on shutdown) \n
- Fail-fast database gate before traffic is served \n
- CORS configured for the frontend \n
- Contact form relay mounted under /api/contact \n

Environment contract (from `settings`): \n
- INIT_MODE: if 'runtime', build the pool and run the startup gate. \n
- FRONTEND_URL: allowed CORS origin. \n
- HOST / PORT: bind address used by `run()`. \n

Process exit codes: 0 normal shutdown, 1 when the startup database probe fails.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from backend.api.contact import router as contact_router
from backend.database.config.config import Settings, settings as default_settings
from backend.database.config.connection_engine import init_database
from backend.database.helpers.startup_probe import run_startup_gate

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


def get_db_engine(request: Request) -> Optional[Engine]:
    """Dependency returning the pool owned by the running application, if any."""
    return getattr(request.app.state, "db_engine", None)


def create_app(settings: Settings = default_settings, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    settings : Settings
        Application configuration.
    engine : Engine | None
        An already validated pool. When omitted and INIT_MODE is 'runtime', the
        lifespan builds the pool and runs the startup gate itself.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        App lifespan manager.

        Notes
        ------------
        - On startup (before yielding):
            * Attach the given pool, or when INIT_MODE == 'runtime' create it
              and run the fail-fast gate (exits the process on failure).
        - On shutdown (after yielding):
            * Dispose the pool, closing pooled connections.
        """
        db_engine = engine
        if db_engine is None and settings.INIT_MODE == "runtime":
            logger.info("⚙️  Initializing database pool...")
            db_engine = init_database(settings)
            await run_startup_gate(db_engine)
        elif db_engine is None:
            logger.info(f"⏭️  Skipping database init (INIT_MODE={settings.INIT_MODE}).")
        app.state.db_engine = db_engine

        try:
            yield
        finally:
            if db_engine is not None:
                db_engine.dispose()
                logger.info("🛑 Database pool disposed.")

    app = FastAPI(title="Deals247 API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(contact_router, prefix="/api/contact", tags=["contact"])

    @app.get("/api/health")
    async def health(db_engine: Optional[Engine] = Depends(get_db_engine)):
        """Liveness check; reports whether a database pool is attached."""
        return {"status": "ok", "database": "configured" if db_engine is not None else "disabled"}

    return app


app = create_app()
"""Application object for `uvicorn backend.main:app`."""


def run(settings: Settings = default_settings) -> None:
    """
    Process entrypoint: validate DB credentials, run the startup gate, serve.

    `DatabaseConfigError` and the gate's `SystemExit(1)` both propagate and
    terminate the process before the server binds its port.
    """
    engine = None
    if settings.INIT_MODE == "runtime":
        engine = init_database(settings)
        asyncio.run(run_startup_gate(engine))
    uvicorn.run(create_app(settings, engine=engine), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
