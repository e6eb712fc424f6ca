import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from uniscape import __version__
from uniscape.core.config import get_settings
from uniscape.core.container import get_container
from uniscape.infrastructure.database import init_db
from uniscape.interfaces.http.routers import create_api_router

settings = get_settings()
logger = logging.getLogger("uniscape")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    await init_db()
    logger.info("%s %s started", settings.project_name, __version__)
    yield
    # Let queued notifications finish before the loop goes away.
    await get_container().notifier.drain()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Wallet-backed booking of student trips and campus shuttles",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("uniscape.main:app", host=settings.host, port=settings.port, reload=settings.server.reload)
