from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config, db, log
from persons import repository as person_repository
from persons import router as persons_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    pool = await db.init_pool()
    try:
        await person_repository.ensure_schema(pool)
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="person-service", lifespan=lifespan)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            messages.append("malformed JSON body")
            continue
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = loc[-1] if loc else "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request: " + "; ".join(messages))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, _: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Registered before the persons router so `/{person_id}` never shadows it.
@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(persons_router.router, tags=["persons"])


def run() -> None:
    log.configure_logging()
    logger.info("server_starting port=%s", config.port())
    uvicorn.run(app, host=config.host(), port=config.port(), log_config=None)


if __name__ == "__main__":
    run()
