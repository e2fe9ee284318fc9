from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from project_tree.api.lifespan import lifespan
from project_tree.api.routes.content import router as content_router
from project_tree.api.routes.health import router as health_router
from project_tree.api.routes.projects import router as projects_router
from project_tree.errors import (
    DataCorruptionError,
    InvalidInputError,
    NotFoundError,
    ProjectTreeError,
)

_STATUS_BY_ERROR: list[tuple[type[ProjectTreeError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (DataCorruptionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


async def _handle_project_tree_error(_request: Request, exc: Exception) -> JSONResponse:
    code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(status_code=code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Project Tree API",
        description="Keep a virtual project tree in step with the files on disk.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(ProjectTreeError, _handle_project_tree_error)

    app.include_router(health_router, include_in_schema=False)
    app.include_router(projects_router)
    app.include_router(content_router)

    return app
