from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class KnownModel(str, Enum):
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GEMINI_PRO = "gemini-pro"
    GEMINI_1_5_FLASH = "gemini-1.5-flash"
    GEMINI_1_5_PRO = "gemini-1.5-pro"

    @classmethod
    def is_known(cls, name: str) -> bool:
        return name in {member.value for member in cls}


class CamelModel(BaseModel):
    """Base for payloads exchanged in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Agent API

class TaskRequest(BaseModel):
    task: str = Field(..., min_length=1)
    context: Optional[str] = None
    model: Optional[str] = None


class TaskResponse(CamelModel):
    success: bool
    result: Optional[str] = None
    error: Optional[str] = None
    timestamp: str
    model: Optional[str] = None
    tokens_used: Optional[int] = None

    @model_validator(mode="after")
    def check_outcome(self) -> "TaskResponse":
        if self.success and (self.result is None or self.error is not None):
            raise ValueError("successful response must carry a result and no error")
        if not self.success and (self.error is None or self.result is not None):
            raise ValueError("failed response must carry an error and no result")
        return self

    @classmethod
    def ok(
        cls,
        result: str,
        timestamp: str,
        model: str,
        tokens_used: Optional[int] = None,
    ) -> "TaskResponse":
        return cls(success=True, result=result, timestamp=timestamp, model=model, tokens_used=tokens_used)

    @classmethod
    def failure(cls, error: str, timestamp: str) -> "TaskResponse":
        return cls(success=False, error=error, timestamp=timestamp)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(CamelModel):
    status: str = "healthy"
    message: str
    timestamp: str
    has_api_key: bool


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class NotFoundResponse(ErrorResponse):
    error: str = "Not found"
    available_endpoints: List[str]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Google AI (Gemini) generateContent wire format

class ContentPart(CamelModel):
    text: str


class Content(CamelModel):
    parts: List[ContentPart]
    role: Optional[str] = None


class GenerationConfig(CamelModel):
    temperature: float = 0.7
    max_output_tokens: int = 1024
    top_p: float = 0.95
    top_k: int = 40


class GoogleAIRequest(CamelModel):
    contents: List[Content]
    generation_config: GenerationConfig = Field(default_factory=GenerationConfig)

    @classmethod
    def from_prompt(cls, prompt: str) -> "GoogleAIRequest":
        return cls(contents=[Content(parts=[ContentPart(text=prompt)])])


class Candidate(CamelModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    index: Optional[int] = None


class UsageMetadata(CamelModel):
    prompt_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    total_token_count: Optional[int] = None


class GoogleAIResponse(CamelModel):
    candidates: Optional[List[Candidate]] = None
    usage_metadata: Optional[UsageMetadata] = None


class GenerationResult(BaseModel):
    """Text of the first candidate plus the reported total token count"""

    text: str
    tokens_used: Optional[int] = None
