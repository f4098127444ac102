"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.commerce.api.http.app_data import ApplicationDependencies
from src.commerce.api.http.routers import (
    auth_router,
    health_router,
    products_router,
    users_router,
)
from src.commerce.api.utils.app_startup import configure_logging
from src.commerce.core.exceptions import CommerceError
from src.commerce.core.services import (
    DataSeeder,
    DbManageService,
    DbSessionService,
    EmailSender,
    HttpProductCascade,
    JwtGeneratorService,
    JwtVerificationService,
    LocalProductCascade,
    ProductCascade,
)
from src.commerce.runtime.context import get_config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def build_product_cascade(database_service: DbSessionService) -> ProductCascade:
    """Pick the cascade transport configured for this deployment."""
    cfg = get_config().cascade
    if cfg.mode == "http":
        logger.info("Product cascade over HTTP to {}", cfg.product_service_url)
        return HttpProductCascade(cfg.product_service_url, timeout=cfg.timeout_seconds)
    return LocalProductCascade(database_service)


def build_dependencies(database_service: DbSessionService | None = None) -> ApplicationDependencies:
    database_service = database_service or DbSessionService()
    return ApplicationDependencies(
        database_service=database_service,
        jwt_verify_service=JwtVerificationService(),
        jwt_generation_service=JwtGeneratorService(),
        product_cascade=build_product_cascade(database_service),
        email_sender=EmailSender(),
    )


async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    # Tests install their own dependencies before startup
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies()

    deps: ApplicationDependencies = app.state.app_dependencies
    DbManageService(deps.database_service.engine).create_all()
    with deps.database_service.session_scope() as session:
        DataSeeder(session).seed()


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")


def create_app() -> FastAPI:
    config = get_config()
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app)
        try:
            yield
        finally:
            await shutdown(app)

    is_production = config.app.environment == "production"
    app = FastAPI(
        title="Commerce Services",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.app_dependencies = None

    app.add_middleware(SecurityHeadersMiddleware)

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        start = time.perf_counter()
        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
        ):
            logger.info("request.start")
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"detail": "Internal Server Error", "request_id": request_id},
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response

    @app.exception_handler(CommerceError)
    async def commerce_error_handler(request: Request, exc: CommerceError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "-")
        if exc.status_code >= 500:
            logger.error("{}: {}", exc.error_code, exc.message)
        else:
            logger.info("{}: {}", exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.to_dict(), "request_id": request_id},
            headers={"X-Request-ID": request_id},
        )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(users_router)

    return app


app = create_app()

__all__ = ["app", "create_app", "build_dependencies", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(app, host=config.app.host, port=config.app.port, access_log=False)
