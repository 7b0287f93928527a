import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from context_service.domain.errors import (
    AuthorizationError,
    DependencyError,
    LimitError,
    RateLimitExceeded,
    ValidationError,
)

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = exc.to_dict()
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} ({exc.base_error.message})")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def handle_limit_error(request: Request, exc: LimitError):
    error_dict = {
        "code": "limit_reached",
        "message": str(exc),
        "kind": exc.kind,
        "upgrade_required": True,
        "current_plan": exc.plan,
        "limit": exc.limit,
    }
    logger.warning(f"Limit reached: {exc.kind} on plan {exc.plan}")
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": error_dict})


async def handle_authorization_error(request: Request, exc: AuthorizationError):
    error_dict = {"code": "forbidden", "message": exc.reason}
    logger.warning(f"Forbidden: {exc.reason}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_dependency_error(request: Request, exc: DependencyError):
    error_dict = {"code": "upstream_unavailable", "message": "Upstream service unavailable"}
    logger.error(f"Dependency error ({exc.service}): {exc}")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": error_dict})


async def handle_validation_error(request: Request, exc: ValidationError):
    error_dict = {"code": "invalid_request", "message": str(exc)}
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    error_dict = {
        "code": "rate_limited",
        "message": "Too many requests",
        "retry_after": exc.retry_after,
    }
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": error_dict},
        headers={"Retry-After": str(exc.retry_after)},
    )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Context API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from context_service.api.routes import (
        billing,
        boards,
        context,
        cron,
        files,
        health_check,
        monday,
        notes,
        settings,
        viewers,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(context.router, prefix=prefix, tags=["Context"])
    app.include_router(notes.router, prefix=prefix, tags=["Notes"])
    app.include_router(files.router, prefix=prefix, tags=["Files"])
    app.include_router(boards.router, prefix=prefix, tags=["Boards"])
    app.include_router(settings.router, prefix=prefix, tags=["Settings"])
    app.include_router(viewers.router, prefix=prefix, tags=["Viewers"])
    app.include_router(billing.router, prefix=prefix, tags=["Billing"])
    app.include_router(monday.router, prefix=prefix, tags=["monday.com"])
    app.include_router(cron.router, prefix=prefix, tags=["Cron"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(LimitError, handle_limit_error)
    app.add_exception_handler(AuthorizationError, handle_authorization_error)
    app.add_exception_handler(DependencyError, handle_dependency_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)

    return app
