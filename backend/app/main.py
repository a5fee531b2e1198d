"""FastAPI entrypoint for the diary duplicator webhook."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routers import diary
from .config import Settings, load_settings
from .infra.logging import configure_logging

NOT_FOUND_STATUSES = {404, 405}


async def _not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Unknown paths and wrong methods on the webhook path look the same to callers.
    if exc.status_code in NOT_FOUND_STATUSES:
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Instantiate the FastAPI app and register the webhook route."""

    settings = settings or load_settings()
    configure_logging(settings)
    application = FastAPI(
        title="Diary Duplicator",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    application.state.settings = settings
    application.add_exception_handler(StarletteHTTPException, _not_found_handler)
    application.include_router(diary.router)
    return application


app = create_app()
