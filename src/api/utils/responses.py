"""JSON response class backed by orjson.

``ORJSONResponse`` is the application's default response class, so route
return values and error bodies are all serialized by orjson with sorted keys.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """JSON response rendered with orjson."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)
