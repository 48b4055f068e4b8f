import json
from typing import Any

from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class PrettyJSONResponse(JSONResponse):
    """JSONResponse rendered with 2-space indentation"""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, allow_nan=False, indent=2).encode("utf-8")


def json_response(payload: Any, status_code: int = 200) -> PrettyJSONResponse:
    return PrettyJSONResponse(content=payload, status_code=status_code)
