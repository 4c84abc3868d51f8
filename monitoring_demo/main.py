"""Main FastAPI application for the monitoring demo service.

Builds the app around an explicit runner (worker pool + run guard) and
exposes `main()`, which validates configuration before anything binds.
"""
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from monitoring_demo.api.routes import router
from monitoring_demo.core.config import Settings, load_settings
from monitoring_demo.core.errors import BackendBusyError, ConfigurationError, ExerciseError
from monitoring_demo.core.logger import get_logger, setup_logging
from monitoring_demo.exercisers import Exerciser, build_exercisers
from monitoring_demo.services.runner import ExerciseRunner

logger = get_logger(__name__)


def create_app(
    settings: Settings,
    exercisers: Optional[Dict[str, Exerciser]] = None,
    runner: Optional[ExerciseRunner] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Validated settings (see `load_settings`)
        exercisers: Override the exercisers built from settings
        runner: Override the runner built from settings and exercisers

    Returns:
        Configured FastAPI app; the runner is available as `app.state.runner`
    """
    if runner is None:
        if exercisers is None:
            exercisers = build_exercisers(settings)
        runner = ExerciseRunner.from_settings(settings, exercisers)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        logger.info(
            "Monitoring demo starting",
            backends=list(runner.exercisers),
            run_mode=runner.mode,
            load_mode=settings.LOAD_MODE,
            load_sec=settings.LOAD_SEC,
        )

        yield

        logger.info("Monitoring demo shutting down, waiting for running exercises")
        runner.shutdown(wait=True)
        logger.info("Monitoring demo stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        # /mysql/ is an unknown path, not an alias for /mysql
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.runner = runner

    app.include_router(router)

    @app.exception_handler(BackendBusyError)
    async def busy_error_handler(request: Request, exc: BackendBusyError) -> PlainTextResponse:
        """Reject a run for a backend that is already running."""
        return PlainTextResponse(
            str(exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(ExerciseError)
    async def exercise_error_handler(request: Request, exc: ExerciseError) -> PlainTextResponse:
        """Report a failed run with its error text."""
        return PlainTextResponse(
            str(exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        logger.info(
            "HTTP request processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response

    return app


def main() -> None:
    """Validate configuration, then serve.

    Exits with status 1 and one ``$VAR is required`` line per problem on
    stderr when configuration is incomplete; the listener never binds.
    """
    import uvicorn

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        for line in exc.messages():
            print(line, file=sys.stderr)
        sys.exit(1)

    setup_logging(settings)
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
