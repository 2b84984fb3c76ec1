import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.db import Database, DatabaseSettings
from core.errors import ApiError, ValidationError
from core.logging import setup_logging
from health import router as health_router
from menu_items import router as menu_items_router

setup_logging()
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip() or DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to routes through `core.db.get_db`.
    db = Database(DatabaseSettings.from_env())
    await db.connect()
    app.state.db = db
    logger.info("startup_complete")
    try:
        yield
    finally:
        await db.close()
        logger.info("shutdown_complete")


app = FastAPI(title="Menu Items API", lifespan=lifespan)

# Allow the staff page's dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api_error path=%s message=%s error=%s", request.url.path, exc.message, exc.error)
    else:
        logger.info("api_error path=%s status=%s message=%s", request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    in_body = any(err.get("loc", ("",))[0] == "body" for err in errors)
    message = "Request body must be a JSON object" if in_body else "Invalid request parameters"
    first = errors[0].get("msg") if errors else None
    return await api_error_handler(request, ValidationError(message, error=first))


app.include_router(menu_items_router.router, tags=["menu-items"])
app.include_router(health_router.router, tags=["health"])


@app.get("/")
def root() -> dict:
    return {"message": "menu items api"}
