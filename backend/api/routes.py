import logging

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute
from pydantic import ValidationError
from starlette.routing import Match

from config import Settings, get_settings
from models.schemas import ErrorResponse, HealthResponse, NotFoundResponse, TaskRequest
from services.agent_service import TaskProcessor, get_task_processor, utc_timestamp
from .responses import json_response

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["/", "/health", "/agent", "/info"]

INVALID_TASK_ERROR = 'Invalid request: "task" field is required'


class AnyMethodRoute(APIRoute):
    """Route that serves every HTTP method, not just the ones it was declared with.

    OPTIONS never gets here, the CORS middleware answers it.
    """

    def matches(self, scope):
        match, child_scope = super().matches(scope)
        if match == Match.PARTIAL:
            return Match.FULL, child_scope
        return match, child_scope

    async def handle(self, scope, receive, send):
        await self.app(scope, receive, send)


router = APIRouter()
status_router = APIRouter(route_class=AnyMethodRoute)


def not_found_payload() -> dict:
    return NotFoundResponse(available_endpoints=AVAILABLE_ENDPOINTS).model_dump(by_alias=True)


@status_router.get("/")
@status_router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    health = HealthResponse(
        message="Agent is running",
        timestamp=utc_timestamp(),
        has_api_key=settings.has_api_key,
    )
    return json_response(health.model_dump(by_alias=True))


@router.post("/agent")
async def run_agent(request: Request, processor: TaskProcessor = Depends(get_task_processor)):
    # Malformed JSON raises here and is turned into a 500 by the middleware
    body = await request.json()

    task = body.get("task") if isinstance(body, dict) else None
    if not task or not isinstance(task, str):
        return json_response(ErrorResponse(error=INVALID_TASK_ERROR).model_dump(), 400)

    try:
        agent_request = TaskRequest.model_validate(body)
    except ValidationError as e:
        detail = e.errors()[0]
        field = ".".join(str(part) for part in detail["loc"])
        error = ErrorResponse(error=f'Invalid request: "{field}" {detail["msg"]}')
        return json_response(error.model_dump(), 400)

    logger.info(f"Processing task with {type(processor).__name__}")
    response = await processor.process(agent_request)
    return json_response(response.to_payload())


@status_router.get("/info")
async def info(settings: Settings = Depends(get_settings)):
    return json_response({
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "AI Task Automation Agent powered by Google AI",
        "endpoints": {
            "/": "Health check",
            "/health": "Health check",
            "/agent": "POST - Process a task",
            "/info": "GET - API information",
        },
        "exampleRequest": {
            "endpoint": "/agent",
            "method": "POST",
            "body": {
                "task": "What is the capital of France?",
                "context": "Optional context information",
                "model": "gemini-1.5-flash",
            },
        },
    })
