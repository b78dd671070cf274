# marketplace/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text

from marketplace.config.settings import CORS_ORIGINS, LOG_LEVEL
from marketplace.database.session import Base, engine
from marketplace import models  # noqa: F401  registers every table on Base
from marketplace.gateway.gateway_router import gateway_router
from marketplace.services.image_service import image_service

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def database_ok() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Marketplace API is starting")
    if database_ok():
        Base.metadata.create_all(bind=engine)
        logger.info("Database connected")
    image_service.ensure_dirs()
    yield
    # Shutdown
    logger.info("Shutting down")


def _missing_fields(errors) -> list:
    return [str(e["loc"][-1]) for e in errors if e.get("type") == "missing" and e.get("loc")]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = _missing_fields(errors)
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = "Validation failed"
    details = [{"field": ".".join(str(p) for p in e.get("loc", ())[1:]), "message": e.get("msg")} for e in errors]
    return JSONResponse(status_code=400, content={"message": message, "errors": details})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Substance Marketplace API",
        description="Customers, dealers and providers: catalog, inventory, orders, purchase orders and shipments",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.get("/health")
    async def health():
        status = {"status": "healthy", "service": "substance-marketplace-api", "version": VERSION}
        if database_ok():
            status["database"] = "connected"
        else:
            status["database"] = "unavailable"
            status["status"] = "degraded"
        return status

    @app.get("/")
    async def root():
        return {
            "message": "Substance Marketplace API",
            "version": VERSION,
            "api_base": "/api",
            "docs": "/docs",
            "endpoints": {"health": "/health", "uploads": "/uploads"},
        }

    # single entry point for every business router
    app.include_router(gateway_router, prefix="/api")

    app.mount("/uploads", StaticFiles(directory=str(image_service.base_dir), check_dir=False), name="uploads")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=8000, reload=False, log_level=LOG_LEVEL.lower())
