import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admissions_chat.api.v1.api import api_router
from admissions_chat.core.config import Settings, settings as default_settings
from admissions_chat.core.database import create_engine_from_settings, create_session_factory
from admissions_chat.core.errors import ChatError, ValidationError
from admissions_chat.core.init_db import init_db
from admissions_chat.core.logging import configure_logging
from admissions_chat.services.completion import OpenAICompletionProvider
from admissions_chat.services.store import ConversationStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Clients for the database and the completion API live as long as the app
    settings: Settings = app.state.settings
    engine = create_engine_from_settings(settings)
    await init_db(engine)
    app.state.store = ConversationStore(create_session_factory(engine))
    provider = OpenAICompletionProvider.from_settings(settings)
    app.state.provider = provider
    logger.info("%s started on port %s", settings.PROJECT_NAME, settings.SERVER_PORT)
    try:
        yield
    finally:
        await provider.close()
        await engine.dispose()


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body for %s: %s", request.url.path, exc.errors())
    error = ValidationError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ChatError, chat_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router, prefix=settings.API_V1_STR)
    # Unprefixed routes are the ones the web client calls
    app.include_router(api_router, prefix="")
    return app


app = create_app()
