# statscore/main.py

import asyncio
import sys
import time
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import (
    http_exception_handler as fastapi_http_exception_handler,
    request_validation_exception_handler as fastapi_validation_exception_handler,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

from statscore.core.constants import UVICORN_HOST, UVICORN_PORT, UVICORN_LOG_LEVEL
from statscore.core.dependencies import Services, build_services
from statscore.core.logger import logger
from statscore.core.responses import ErrorCodes, error
from statscore.routers import configuration, events, leaderboard
from statscore.tasks.reset_watch import reset_watch_loop


def _global_excepthook(exc_type, exc, tb):
    """Route uncaught process-level exceptions through the logger. Ctrl+C passes through."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    logger.opt(exception=(exc_type, exc, tb)).error("Unhandled top-level exception")


def _asyncio_exception_handler(loop, context):
    msg = context.get("message", "")
    exc = context.get("exception")
    if exc is not None:
        logger.opt(exception=exc).error(f"Unhandled exception in async task | {msg}")
    else:
        logger.error(f"Async task error | {msg} | context={context}")


def create_app(services: Optional[Services] = None, run_reset_watch: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.warning("statscore starting")
        app.state.services.startup()
        asyncio.get_running_loop().set_exception_handler(_asyncio_exception_handler)
        watcher = None
        if run_reset_watch:
            watcher = asyncio.create_task(reset_watch_loop(app.state.services))
            logger.info("Daily reset watcher started")
        logger.success("statscore started")
        try:
            yield
        finally:
            if watcher is not None:
                watcher.cancel()
                with suppress(asyncio.CancelledError):
                    await watcher
            await app.state.services.shutdown()

    app = FastAPI(title="statscore API", lifespan=lifespan)
    app.state.services = services if services is not None else build_services()

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            f"HTTP {exc.status_code} | {request.method} {request.url.path} | detail={getattr(exc, 'detail', '')}"
        )
        return await fastapi_http_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation failed | {request.method} {request.url.path} | errors={exc.errors()}")
        return await fastapi_validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Uncaught exception | {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": error(ErrorCodes.INTERNAL_ERROR, "Internal Server Error")})

    @app.middleware("http")
    async def request_timer_middleware(request: Request, call_next):
        """Log method, path, status and time taken; expose the time as X-Process-Time."""
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed = time.perf_counter() - start
            if response is not None:
                response.headers["X-Process-Time"] = f"{elapsed:.6f}s"
            status = getattr(response, "status_code", "-")
            logger.info("[{host}] {method} {path} -> {status} | {elapsed:.2f} ms".format(
                host=request.client.host if request.client else "-",
                method=request.method,
                path=request.url.path,
                status=status,
                elapsed=elapsed * 1000,
            ))

    app.include_router(events.router)
    app.include_router(leaderboard.router)
    app.include_router(configuration.router)

    @app.get("/api/health")
    def read_root():
        return {"status": "ok"}

    return app


def main():
    import uvicorn
    sys.excepthook = _global_excepthook
    uvicorn.run(
        "statscore.main:create_app",
        factory=True,
        host=UVICORN_HOST,
        port=UVICORN_PORT,
        log_level=UVICORN_LOG_LEVEL
    )


if __name__ == "__main__":
    main()
