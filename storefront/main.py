import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

import storefront.models  # noqa: F401  registers every table on Base.metadata
from storefront.api.routes_auth import router as auth_router
from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_category import router as category_router
from storefront.api.routes_dashboard import router as dashboard_router
from storefront.api.routes_order import router as order_router
from storefront.api.routes_payment import router as payment_router
from storefront.api.routes_product import router as product_router
from storefront.api.routes_user import router as user_router
from storefront.core.config import settings
from storefront.core.errors import StorefrontError
from storefront.core.logging import configure_logging
from storefront.core.monitoring import monitoring
from storefront.db.deps import get_db
from storefront.db.session import Base, engine
from storefront.schemas.common import error_body

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = [str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path")]
        field = ".".join(location)
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request."


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error_body(_validation_message(exc)))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        monitoring.record_error(repr(exc), path=request.url.path)
        return JSONResponse(status_code=500, content=error_body("Internal server error."))


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"Storefront API started ({settings.ENVIRONMENT})")
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="storefront-api",
        description="Catalog, carts, orders and payments for the storefront",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_timing(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            monitoring.record_request(False, (time.perf_counter() - started) * 1000)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        monitoring.record_request(response.status_code < 500, elapsed_ms)
        return response

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["Auth"])
    app.include_router(product_router, prefix="/api/products", tags=["Product"])
    app.include_router(category_router, prefix="/api/categories", tags=["Category"])
    app.include_router(cart_router, prefix="/api", tags=["Cart"])
    app.include_router(order_router, prefix="/api", tags=["Order"])
    app.include_router(payment_router, prefix="/api/payments", tags=["Payment"])
    app.include_router(user_router, prefix="/api/users", tags=["User"])
    app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])

    @app.get("/health", tags=["Health"])
    def health(db: Session = Depends(get_db)):
        status = monitoring.get_health_status()
        try:
            db.execute(text("SELECT 1"))
            status["database"] = "ok"
        except Exception as exc:
            logger.error(f"Database health check failed: {exc}")
            status["database"] = "unavailable"
            status["status"] = "CRITICAL"
        return {"status": "success", "data": status}

    # Bearer auth in the generated docs
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Storefront API",
            version="1.0.0",
            description="Public catalog plus authenticated carts, orders and payments.",
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
            }
        }
        for path in openapi_schema["paths"].values():
            for method in path.values():
                method["security"] = [{"BearerAuth": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi
    return app


app = create_app()
