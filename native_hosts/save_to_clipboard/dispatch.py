"""Single request/response exchange with the browser extension.

The browser starts one process per `connectNative()` call; this module reads
exactly one frame, answers it with exactly one frame and reports the exit code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO

from .clipboard import DEFAULT_FILENAME
from .envelope import ACTION_COPY_PDF, Request, Response, decode_request, encode_response
from .errors import CollaboratorError, DecodeError, DispatchError, TransportError
from .framing import read_frame, write_frame

_LOGGER = logging.getLogger("save_to_clipboard.dispatch")

COPY_SUCCESS_MESSAGE = "PDF copied to clipboard successfully"

CopyPdf = Callable[[str, str], Any]


class ExchangeState(Enum):
    AWAITING_REQUEST = "awaiting_request"
    COMPLETED = "completed"


@dataclass(slots=True)
class ExchangeResult:
    state: ExchangeState
    response: Response | None = None
    exit_code: int = 1


def handle_request(request: Request, copy_pdf: CopyPdf) -> Response:
    if request.action != ACTION_COPY_PDF:
        err = DispatchError(request.action)
        _LOGGER.warning("dispatch_unknown_action action=%s", request.action)
        return Response.failure(str(err))

    filename = request.filename or DEFAULT_FILENAME
    try:
        copy_pdf(str(request.url), filename)
    except CollaboratorError as exc:
        _LOGGER.warning("copy_pdf_failed url=%s error=%s", request.url, exc)
        return Response.failure(str(exc))
    except Exception as exc:  # noqa: BLE001
        # The peer must always get a frame back, whatever the collaborator raised.
        _LOGGER.error("copy_pdf_crashed url=%s", request.url, exc_info=True)
        return Response.failure(f"Unexpected error: {exc}")
    return Response.ok(COPY_SUCCESS_MESSAGE, filename=filename)


def exchange(
    stdin: BinaryIO,
    stdout: BinaryIO,
    *,
    copy_pdf: CopyPdf,
    max_frame_bytes: int | None = None,
) -> ExchangeResult:
    result = ExchangeResult(state=ExchangeState.AWAITING_REQUEST)
    try:
        raw = read_frame(stdin, max_bytes=max_frame_bytes)
        request = decode_request(raw)
    except TransportError as exc:
        _LOGGER.warning("request_read_failed error=%s", exc)
        response = Response.failure(f"Failed to read message from stdin: {exc}")
    except DecodeError as exc:
        _LOGGER.warning("request_decode_failed error=%s", exc)
        response = Response.failure(f"Failed to decode request JSON: {exc}")
    else:
        _LOGGER.debug("request_received action=%s url=%s", request.action, request.url)
        response = handle_request(request, copy_pdf)

    result.state = ExchangeState.COMPLETED
    result.response = response
    try:
        write_frame(stdout, encode_response(response))
    except TransportError as exc:
        _LOGGER.error("response_write_failed error=%s", exc)
        return result
    result.exit_code = 0 if response.success else 1
    return result


def run_exchange(
    stdin: BinaryIO,
    stdout: BinaryIO,
    *,
    copy_pdf: CopyPdf,
    max_frame_bytes: int | None = None,
) -> int:
    return exchange(stdin, stdout, copy_pdf=copy_pdf, max_frame_bytes=max_frame_bytes).exit_code


__all__ = ["COPY_SUCCESS_MESSAGE", "ExchangeResult", "ExchangeState", "exchange", "handle_request", "run_exchange"]
