import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .constants import ROOT_PATH
from .core import Wiki
from .db import init_db
from .errors import (
    AuthenticationFailed,
    Conflict,
    InvalidTitle,
    NotFound,
    StorageFailure,
    WikiError,
)
from .routers import articles, browse, history, users
from .routers.common import get_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = get_engine()
    init_db(engine)
    app.state.wiki = Wiki.from_settings(engine)
    yield


app = FastAPI(root_path=ROOT_PATH, lifespan=lifespan)

app.include_router(articles.router, prefix="/v1/articles")
app.include_router(browse.router, prefix="/v1")
app.include_router(history.router, prefix="/v1/history")
app.include_router(users.router, prefix="/v1/users")

STATUS_CODES: dict[type[WikiError], int] = {
    Conflict: 409,
    NotFound: 404,
    InvalidTitle: 422,
    AuthenticationFailed: 401,
    StorageFailure: 503,
}


@app.exception_handler(WikiError)
async def wiki_error_handler(request: Request, exc: WikiError) -> JSONResponse:
    status_code = next(
        (code for kind, code in STATUS_CODES.items() if isinstance(exc, kind)), 500
    )
    logger.debug(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.debug(f"Processed request in {process_time:.3f} seconds")
    return response


app.add_middleware(GZipMiddleware, minimum_size=1000)
