import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import errors
from app.core.config import settings
from app.core.logging import init_logging, request_context_middleware
from app.db.seed import init_db
from app.db.session import engine

from app.api.auth import router as auth_router
from app.api.categories import router as categories_router
from app.api.expenses import router as expenses_router
from app.api.reports import router as reports_router

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET environment variable is required")

    init_db(engine)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENV)
    yield


init_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.middleware("http")(request_context_middleware)

# ERROR HANDLERS
app.add_exception_handler(errors.ServiceError, errors.service_error_handler)
app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
app.add_exception_handler(Exception, errors.server_error_handler)

# ROUTERS
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(categories_router, prefix="/categories", tags=["categories"])
app.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
app.include_router(reports_router, prefix="/reports", tags=["reports"])


@app.get("/health")
def health():
    return {"status": "ok"}
