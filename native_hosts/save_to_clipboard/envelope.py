from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError

_LOGGER = logging.getLogger("save_to_clipboard.envelope")

ACTION_COPY_PDF = "copyPdf"
# Actions whose handler consumes `url`; for anything else the dispatcher reports the action itself.
URL_ACTIONS = frozenset({ACTION_COPY_PDF})


@dataclass(frozen=True, slots=True)
class Request:
    action: str
    url: str | None = None
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class Response:
    success: bool
    message: str | None = None
    error: str | None = None
    filename: str | None = None
    size: int | None = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("successful response cannot carry an error")
        if not self.success and self.message is not None:
            raise ValueError("failed response cannot carry a message")

    @classmethod
    def ok(cls, message: str, *, filename: str | None = None, size: int | None = None) -> Response:
        return cls(success=True, message=message, filename=filename, size=size)

    @classmethod
    def failure(cls, error: str) -> Response:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        for key in ("message", "error", "filename", "size"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"field `{key}` must be a string")
    return value


def decode_request(raw: bytes) -> Request:
    try:
        data = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DecodeError(f"payload is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError("request must be a JSON object")

    action = data.get("action")
    if not isinstance(action, str):
        raise DecodeError("missing required field `action`")
    url = _optional_str(data, "url")
    if url is None and action in URL_ACTIONS:
        raise DecodeError("missing required field `url`")
    return Request(action=action, url=url, filename=_optional_str(data, "filename"))


def encode_response(response: Response) -> bytes:
    try:
        return json.dumps(response.to_dict(), ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        _LOGGER.error("response_encode_failed error=%s", exc)
        fallback = {"success": False, "error": f"Failed to encode response: {exc}"}
        return json.dumps(fallback, separators=(",", ":")).encode("utf-8")


def decode_response(raw: bytes) -> Response:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"invalid response JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("success"), bool):
        raise DecodeError("response must be an object with boolean `success`")
    size = data.get("size")
    if size is not None and (isinstance(size, bool) or not isinstance(size, int)):
        raise DecodeError("field `size` must be an integer")
    try:
        return Response(
            success=data["success"],
            message=_optional_str(data, "message"),
            error=_optional_str(data, "error"),
            filename=_optional_str(data, "filename"),
            size=size,
        )
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc


__all__ = [
    "ACTION_COPY_PDF",
    "Request",
    "Response",
    "decode_request",
    "decode_response",
    "encode_response",
]
