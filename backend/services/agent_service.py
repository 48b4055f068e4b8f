import abc
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends

from config import Settings, get_settings
from models.schemas import KnownModel, TaskRequest, TaskResponse
from .google_ai_service import GoogleAIClient

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "fallback"

GREETING_REPLY = (
    "Hello! I'm a task automation agent. "
    "I can help you with various tasks when configured with Google AI API."
)

HELP_REPLY = """I'm an AI agent that can:
- Answer questions
- Process tasks
- Provide assistance

To unlock full AI capabilities, configure the GOOGLE_AI_API_KEY secret."""


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_prompt(task: str, context: Optional[str] = None) -> str:
    if context:
        return f"Context: {context}\n\nTask: {task}\n\nPlease provide a helpful and concise response."
    return task


def fallback_reply(task: str, timestamp: str) -> str:
    """Keyword-based reply used when no Google AI key is configured.

    Checks run in a fixed order and the first match wins, so a task
    containing both "hello" and "time" gets the greeting.
    """
    text = task.lower()

    if "hello" in text or "hi" in text:
        return GREETING_REPLY
    elif "time" in text:
        return f"The current timestamp is: {timestamp}"
    elif "help" in text or "what can you do" in text:
        return HELP_REPLY
    else:
        return (
            f'Received task: "{task}". '
            "To process this with AI, please configure the GOOGLE_AI_API_KEY secret."
        )


class TaskProcessor(abc.ABC):
    """Turns a TaskRequest into a TaskResponse."""

    @abc.abstractmethod
    async def process(self, request: TaskRequest) -> TaskResponse:
        ...


class GoogleAITaskProcessor(TaskProcessor):
    def __init__(self, client: GoogleAIClient, default_model: str):
        self.client = client
        self.default_model = default_model

    async def process(self, request: TaskRequest) -> TaskResponse:
        timestamp = utc_timestamp()
        model = request.model or self.default_model

        if not KnownModel.is_known(model):
            logger.warning(f"Unknown model requested, passing through: {model}")

        try:
            prompt = build_prompt(request.task, request.context)
            generation = await self.client.generate(prompt, model)
        except Exception as e:
            logger.error(f"Google AI request failed for model {model}: {e}")
            return TaskResponse.failure(error=str(e) or "Unknown error occurred", timestamp=timestamp)

        logger.info(f"Google AI answered with model {model} (tokens used: {generation.tokens_used})")
        return TaskResponse.ok(
            result=generation.text,
            timestamp=timestamp,
            model=model,
            tokens_used=generation.tokens_used,
        )


class FallbackTaskProcessor(TaskProcessor):
    async def process(self, request: TaskRequest) -> TaskResponse:
        timestamp = utc_timestamp()
        return TaskResponse.ok(
            result=fallback_reply(request.task, timestamp),
            timestamp=timestamp,
            model=FALLBACK_MODEL,
        )


def create_task_processor(settings: Settings) -> TaskProcessor:
    """Pick the AI processor when a key is configured, the keyword fallback otherwise"""
    if settings.has_api_key:
        client = GoogleAIClient(
            api_key=settings.google_ai_api_key,
            base_url=settings.google_ai_base_url,
            timeout=settings.google_ai_timeout,
        )
        return GoogleAITaskProcessor(client, default_model=settings.google_ai_model)

    logger.info("No Google AI API key configured, using fallback processor")
    return FallbackTaskProcessor()


def get_task_processor(settings: Settings = Depends(get_settings)) -> TaskProcessor:
    return create_task_processor(settings)
