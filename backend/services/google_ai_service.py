import logging

import httpx

from models.schemas import GenerationResult, GoogleAIRequest, GoogleAIResponse

logger = logging.getLogger(__name__)


class GoogleAIError(Exception):
    """Raised when the Google AI API returns an unusable answer"""


class GoogleAIClient:
    def __init__(self, api_key: str, base_url: str, timeout: float = 60.0):
        if not api_key:
            raise ValueError("Google AI API key required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    async def generate(self, prompt: str, model: str) -> GenerationResult:
        """Call the Gemini generateContent endpoint once and return the first candidate's text"""
        body = GoogleAIRequest.from_prompt(prompt).model_dump(by_alias=True, exclude_none=True)
        logger.debug(f"Calling Google AI model {model} ({len(prompt)} prompt chars)")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.endpoint(model),
                params={"key": self.api_key},
                json=body,
            )

        if not response.is_success:
            raise GoogleAIError(f"Google AI API error ({response.status_code}): {response.text}")

        try:
            data = GoogleAIResponse.model_validate(response.json())
        except ValueError as e:  # JSONDecodeError and ValidationError
            raise GoogleAIError(f"Malformed response from Google AI: {e}") from e

        if not data.candidates:
            raise GoogleAIError("No response from Google AI")

        candidate = data.candidates[0]
        if candidate.content is None or not candidate.content.parts:
            raise GoogleAIError(f"Google AI returned no content (finish reason: {candidate.finish_reason})")

        tokens_used = data.usage_metadata.total_token_count if data.usage_metadata else None
        return GenerationResult(text=candidate.content.parts[0].text, tokens_used=tokens_used)
