from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.core.config import settings
from taskboard.core.database import init_models
from taskboard.core.errors import (
    AuthError,
    Forbidden,
    NotFound,
    StoreFailure,
    TaskboardError,
    ValidationError,
)
from taskboard.core.logs import get_logger, setup_logging
from taskboard.routers import auth, projects, tasks, users

setup_logging()
log = get_logger("api")

STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    StoreFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def describe(exc: TaskboardError) -> str:
    if isinstance(exc, ValidationError):
        return "Validation error"
    if isinstance(exc, NotFound):
        return f"{exc.entity.capitalize()} not found"
    if isinstance(exc, Forbidden):
        return f"Not authorized to {exc.action.replace('_', ' ')} this {exc.entity}"
    if isinstance(exc, AuthError):
        return "Could not validate credentials"
    return "Server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Taskboard API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(tasks.router)
    app.include_router(users.router)

    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        if code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc)
        body = {"success": False, "error": exc.kind, "message": describe(exc)}
        if isinstance(exc, ValidationError):
            body["errors"] = exc.errors
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err["loc"][1:]) or "body", "reason": err["type"]}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": ValidationError.kind,
                     "message": "Validation error", "errors": errors},
        )

    @app.get("/")
    async def root():
        return {"message": "Taskboard API is running"}

    return app


app = create_app()
