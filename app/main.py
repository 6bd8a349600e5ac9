from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import Settings, settings as default_settings
from app.core.errors import NotFoundError, exception_handlers
from app.core.storage import UploadStorage
from app.db.init_db import init_db
from app.db.store import PostStore
from app.middleware.body_limit import BodySizeLimitMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.modules.posts.api.router import router as posts_router, debug_router
from app.modules.posts.comments.api.router import router as comments_router
from app.modules.posts.reactions.api.router import router as reactions_router
from app.modules.media.router import router as media_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if default_settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("app")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own store instance"""
    settings = settings or default_settings
    store = PostStore.from_settings(settings)
    upload_storage = UploadStorage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
        init_db(store)
        upload_storage.ensure_directory()
        yield
        logger.info("Server stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        exception_handlers=exception_handlers,
        debug=settings.DEBUG,
        description="Flat-file blog with posts, comments and like/dislike counters",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.post_store = store
    app.state.upload_storage = upload_storage

    # Add middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.MAX_BODY_SIZE)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routers
    api = settings.API_PREFIX
    app.include_router(posts_router, prefix=f"{api}/posts", tags=["posts"])
    app.include_router(comments_router, prefix=f"{api}/posts/{{post_id}}/comments", tags=["comments"])
    app.include_router(reactions_router, prefix=f"{api}/posts/{{post_id}}", tags=["reactions"])
    app.include_router(media_router, prefix=f"{api}/uploads", tags=["uploads"])
    app.include_router(debug_router, prefix=f"{api}/debug", tags=["debug"], include_in_schema=settings.DEBUG)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    @app.api_route(f"{api}/{{path:path}}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"], include_in_schema=False)
    async def api_not_found(path: str):
        raise NotFoundError()

    # Static files: uploads first, then the client at the root
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIRECTORY, check_dir=False), name="uploads")
    if Path(settings.STATIC_DIRECTORY).is_dir():
        app.mount("/", StaticFiles(directory=settings.STATIC_DIRECTORY, html=True), name="static")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=3000, workers=1) 
