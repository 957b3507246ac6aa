import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from dateplan.config import get_settings
from dateplan.database import init_db
from dateplan.exceptions import DateplanError, DetailMessage, InvalidInputError
from dateplan.routers import anniversaries, schedules

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Dateplan API", lifespan=lifespan)
app.include_router(schedules.router)
app.include_router(anniversaries.router)


def error_body(code: str, message: str) -> dict:
    return {"success": False, "code": code, "message": message}


@app.exception_handler(DateplanError)
async def dateplan_error_handler(request: Request, exc: DateplanError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = DetailMessage.INVALID_INPUT_VALUE
    errors = exc.errors()
    if errors:
        error = errors[0]
        # ValueErrors raised in schema validators carry the client-facing message
        if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
            message = str(error["ctx"]["error"])
    return JSONResponse(status_code=400, content=error_body(InvalidInputError.code, message))


@app.get("/")
async def root():
    return {"message": "Dateplan API is running"}
