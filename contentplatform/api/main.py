import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contentplatform import __version__
from contentplatform.api.routers import auth, invitations, permissions, roles, templates, users
from contentplatform.api.schemas.common import ErrorResponse
from contentplatform.core.config import get_settings
from contentplatform.core.exceptions import ContentPlatformError
from contentplatform.core.logger import configure_from_settings
from contentplatform.db import models  # noqa: F401 - register tables on Base.metadata
from contentplatform.db.base import Base
from contentplatform.db.seed import run_startup_bootstrap
from contentplatform.db.session import SessionLocal, engine

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_from_settings(settings)
    Base.metadata.create_all(bind=engine)
    if settings.bootstrap_on_startup:
        run_startup_bootstrap(SessionLocal)
    logger.info("%s %s started", settings.app_name, __version__)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant content management platform",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContentPlatformError)
async def content_platform_error_handler(request: Request, exc: ContentPlatformError):
    body = ErrorResponse(error=type(exc).__name__, detail=exc.message, code=exc.code)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)


# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(permissions.router, prefix="/api")
app.include_router(roles.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(invitations.router, prefix="/api")
app.include_router(templates.router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
