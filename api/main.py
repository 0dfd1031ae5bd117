import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config
from core.db import Database
from core.errors import AppError, ValidationError
from core.log import configure_logging, install_loop_exception_guard
from demo import router as demo_router
from products import router as products_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    install_loop_exception_guard(asyncio.get_running_loop())
    db: Database = app.state.db
    if config.is_test_mode():
        logger.info("db_connect_skipped app_env=test")
    else:
        # No store, no traffic: a failed connect aborts startup.
        try:
            await db.connect()
        except Exception:
            logger.exception("db_connect_failed startup aborted")
            raise
    try:
        yield
    finally:
        await db.close()


def _field_name(loc: tuple) -> str:
    # ("query", "page") -> "page"; ("body", 7) for broken JSON -> "body"
    if len(loc) > 1 and isinstance(loc[1], str):
        return loc[1]
    return str(loc[0]) if loc else "request"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed kind=%s", type(exc).__name__, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for item in exc.errors():
        errors.setdefault(_field_name(tuple(item.get("loc", ()))), str(item.get("msg", "Invalid value")))
    return await app_error_handler(request, ValidationError(errors))


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def create_app(db: Database | None = None) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Products API", version="1.0.0", lifespan=lifespan)
    app.state.db = db or Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(demo_router.router, tags=["health"])
    app.include_router(products_router.router, tags=["products"])
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=config.host(), port=config.port())


if __name__ == "__main__":
    run()
