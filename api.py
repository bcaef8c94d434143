import logging
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import RecordStore
from library import Library
from responses import success
from routes import books, users, get_library

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Server is running on port {settings.api_port}")
    yield
    logger.info("Server stopped; in-memory changes discarded")


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """Build the API over ``store``, or over the configured seed files."""
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)
    app.state.library = Library(store if store is not None else RecordStore.from_files())

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        """Welcome message."""
        return success(message="HOME PAGE: Welcome to the Library Management System")

    # --- Health Check ---
    @app.get("/health")
    def health(library: Library = Depends(get_library)):
        """Lightweight liveness endpoint with collection sizes."""
        return {"status": "healthy", **library.get_statistics()}

    app.include_router(books.router, prefix="/books", tags=["books"])
    app.include_router(users.router, prefix="/users", tags=["users"])
    return app


app = create_app()
