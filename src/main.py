import logging
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.api import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
)
from core.exceptions import InvalidRequestError
from core.middleware import CorrelationIdMiddleware
from core.structured_logging import setup_logging


def _is_http_origin(origin: str) -> bool:
    parsed = urlparse(origin)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def validate_cors_origins(origins: list[str]) -> list[str]:
    """Drop blank and non-http(s) origins, logging each rejected value."""
    accepted: list[str] = []
    for origin in filter(None, (o.strip() for o in origins)):
        if _is_http_origin(origin):
            accepted.append(origin)
        else:
            logging.warning("Ignoring invalid CORS origin %r", origin)
    return accepted


settings = get_settings()
setup_logging()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Turns vague requests into structured, scored prompts",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
)

# Middleware added later wraps the earlier ones: CORS headers reach error
# responses and every log line carries the request id.
app.add_middleware(ExceptionNormalizationMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=validate_cors_origins(list(settings.CORS_ORIGINS)),
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(InvalidRequestError, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


# Interactive docs live beside the versioned API.
@app.get("/api/v1/docs", include_in_schema=False)
def swagger_ui():
    return get_swagger_ui_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} API Docs"
    )


@app.get("/api/v1/redoc", include_in_schema=False)
def redoc_html():
    return get_redoc_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} API Redoc"
    )


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"{settings.APP_NAME} is running", "docs": "/api/v1/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
