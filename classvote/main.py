# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from classvote.config import Settings, ensure_directories
from classvote.database.connection import connect
from classvote.errors import VotingError
from classvote.routes.option_routes import router as option_router
from classvote.routes.results_routes import router as results_router
from classvote.routes.vote_routes import vote_router
from classvote.storage_mongo import MongoStorage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Starting classvote...")

    ensure_directories(settings)
    client = await connect(settings)
    try:
        storage = MongoStorage(client[settings.mongo_db])
        await storage.ensure_indexes()
        app.state.storage = storage
        logger.info(f"Uploads stored in {settings.upload_dir.resolve()}")

        yield

        logger.info("Shutting down classvote...")
    finally:
        client.close()
        logger.info("MongoDB connection closed")


async def voting_error_handler(request: Request, exc: VotingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = FastAPI(title="classvote - Class Voting API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(VotingError, voting_error_handler)

    app.include_router(option_router)
    app.include_router(vote_router)
    app.include_router(results_router)

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        healthy = await request.app.state.storage.check_health()
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "healthy" if healthy else "unhealthy", "database": "MongoDB"},
        )

    @app.get("/", tags=["Root"], include_in_schema=False)
    async def read_root():
        index = settings.public_dir / "index.html"
        if index.is_file():
            return FileResponse(index)
        return {"message": "Welcome to the classvote API"}

    # Directories are created at startup, hence check_dir=False here
    app.mount(
        settings.uploads_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    # Everything not routed above falls through to the public directory, so an
    # unknown path (including a trailing-slash variant of an API route such as
    # /api/options/) is a static 404, never a redirect.
    app.mount("/", StaticFiles(directory=settings.public_dir, check_dir=False), name="public")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "classvote.main:app",
        host=app.state.settings.host,
        port=app.state.settings.port,
        reload=app.state.settings.debug,
        log_level="info",
    )
