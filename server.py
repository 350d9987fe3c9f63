import sys
import logging
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contextlib import asynccontextmanager

from config import PORT, ENV_NAME, get_log_level
from database import SessionLocal, init_db
from resources import build_registry
from store import RecordStore, SqlRecordStore


def create_app(store: Optional[RecordStore] = None, **registry_options) -> FastAPI:
    """
    Builds the API application.
    Without an explicit store the SQL-backed store on DATABASE_URL is used.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Configure logging
        logging.basicConfig(
            level=get_log_level(),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)]
        )
        logger = logging.getLogger(__name__)

        if store is None:
            logger.info("Creating database tables...")
            init_db()
            app.state.store = SqlRecordStore(SessionLocal)
        else:
            app.state.store = store

        app.state.registry = build_registry(app.state.store, **registry_options)
        logger.info(f"Handlers registered for {ENV_NAME}: {sorted({kind for kind, _ in app.state.registry})}")

        yield

    app = FastAPI(lifespan=lifespan, title="Uptime Monitor API", description="Accounts, session tokens and uptime check configurations.")

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger(__name__).exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"Error": "Internal server error."})

    from routers.api import router as api_router
    from routers.health import router as health_router

    app.include_router(api_router)
    app.include_router(health_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
