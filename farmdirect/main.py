import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from farmdirect.core.config import settings
from farmdirect.core.errors import (
    ConflictError,
    FarmDirectError,
    ForbiddenError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from farmdirect.core.logging import configure_logging
from farmdirect.db.init import init_db
from farmdirect.api import me, products, catalog, certifications, orders
from farmdirect.auth.jwt import router as auth_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for a farm-to-consumer marketplace",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Map domain errors to HTTP status codes; subclasses resolve through the MRO
ERROR_STATUS_CODES: dict = {
    ValidationError: 400,
    InvalidTransitionError: 400,
    UnauthenticatedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    InternalError: 500,
}


def status_code_for(exc: FarmDirectError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


@app.exception_handler(FarmDirectError)
async def farmdirect_error_handler(request: Request, exc: FarmDirectError) -> JSONResponse:
    status_code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_type": type(exc).__name__, **exc.extra},
        headers=headers,
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(
        status_code=500,
        content={"detail": error.message, "error_type": type(error).__name__},
    )


# Initialize database
@app.on_event("startup")
async def startup_event():
    init_db()

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(me.router, prefix="/me", tags=["me"])
app.include_router(products.router, prefix="/products", tags=["products"])
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(certifications.router, prefix="/certifications", tags=["certifications"])
app.include_router(orders.router, prefix="/orders", tags=["orders"])

@app.get("/health")
def health():
    return {"ok": True}
