import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import converter, currencies
from .services.conversion_state import ConversionState
from .services.rates.base import RateSource
from .services.rates.providers import make_rate_source
from .services.trend import TrendSampler


def build_conversion_state(
    settings: Settings, source: RateSource | None = None
) -> ConversionState:
    return ConversionState(
        source or make_rate_source(settings.rate_source, settings),
        amount=settings.default_amount,
        base=settings.default_base,
        target=settings.default_target,
        sampler=TrendSampler(
            count=settings.trend_sample_count, jitter=settings.trend_jitter
        ),
    )


def create_app(
    settings_override: Settings | None = None, source: RateSource | None = None
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    source: inject a rate source directly instead of building one from settings.
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    state = build_conversion_state(settings, source)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.getLogger("fxboard").info(
            "starting converter", extra={"base": state.base_currency}
        )
        state.start()
        try:
            yield
        finally:
            await state.close()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.converter = state

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(currencies.router)
    app.include_router(converter.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
