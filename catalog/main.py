from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from catalog.core.config import settings
from catalog.core.middleware_correlation import CorrelationIdMiddleware
from catalog.core.logging import get_logger, setup_logging
from catalog.core.errors import register_exception_handlers
from catalog.db.session import engine
from catalog.models.base import Base

# Routers
from fastapi import APIRouter
from catalog.api.routes.authors import router as authors_router

# Register tables on the metadata
import catalog.models.author  # noqa: F401
import catalog.models.book  # noqa: F401


setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.CREATE_TABLES:
        logger.info("Creating tables")
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Local Library - server-rendered catalog of authors and their books.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    """Send visitors to the author list."""
    return RedirectResponse(f"{settings.CATALOG_PREFIX}/authors")

register_exception_handlers(app)

# Mount routers
catalog_router = APIRouter(prefix=settings.CATALOG_PREFIX)
catalog_router.include_router(authors_router)
app.include_router(catalog_router)
