"""Send response entity."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class SendResponse:
    """Result of an awaited send."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, response: Mapping[str, Any]) -> "SendResponse":
        """
        Create a response from the decoded API body.

        The API reports queued deliveries under ``deliveries``; they are
        exposed as ``data``.

        Raises:
            ValueError: If the body is not an object or ``success`` is not a boolean
        """
        if not isinstance(response, Mapping):
            raise ValueError(f"Expected a JSON object, got {type(response).__name__}")
        if "success" not in response:
            raise ValueError("Response is missing the 'success' field")
        if not isinstance(response["success"], bool):
            raise ValueError(
                f"Response field 'success' must be a boolean, got {type(response['success']).__name__}"
            )

        return cls(
            success=response["success"],
            data=response.get("deliveries"),
            error=response.get("error"),
            message=response.get("message"),
        )

    def is_success(self) -> bool:
        return self.success

    def has_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary, dropping fields that are not set."""
        data = {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "message": self.message,
        }
        return {key: value for key, value in data.items() if value is not None}

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)
