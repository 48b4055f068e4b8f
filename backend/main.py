import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.responses import CORS_HEADERS, PrettyJSONResponse, json_response
from api.routes import not_found_payload, router, status_router
from config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# httpx logs request URLs at INFO, and the Google AI key travels in the query string
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} {settings.app_version} starting up")
    logger.info(f"Default model: {settings.google_ai_model}")
    logger.info(f"Google AI API key configured: {settings.has_api_key}")
    yield
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    default_response_class=PrettyJSONResponse,
    redirect_slashes=False,
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_and_errors(request: Request, call_next):
    """Answer preflight requests, add CORS headers, and turn uncaught errors into 500s."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        response = json_response({"success": False, "error": str(e) or "Internal server error"}, 500)

    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Wrong method on a known path is reported like an unknown path
    if exc.status_code in (404, 405):
        return json_response(not_found_payload(), 404)
    return json_response({"success": False, "error": str(exc.detail)}, exc.status_code)


app.include_router(status_router)
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
