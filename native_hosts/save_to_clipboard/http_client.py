from __future__ import annotations

import http.client
import logging
import ssl
import urllib.parse
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import HTTPRedirectHandler, HTTPSHandler, Request, build_opener

from .config import HostConfig
from .errors import CollaboratorError

_LOGGER = logging.getLogger("save_to_clipboard.http_client")
_USER_AGENT = "save-to-clipboard/1.0"


class HttpClientError(CollaboratorError):
    pass


@dataclass(frozen=True, slots=True)
class Download:
    status: int
    content_type: str
    body: bytes


class _SafeRedirectHandler(HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        # urllib may pass relative URLs here; normalize against the previous URL.
        absolute = urllib.parse.urljoin(req.full_url, str(newurl))
        if urllib.parse.urlparse(absolute).scheme not in ("http", "https"):
            raise HttpClientError(f"Invalid URL: {absolute}")
        return super().redirect_request(req, fp, code, msg, headers, absolute)


def ensure_http_url(url: str) -> None:
    try:
        parsed = urllib.parse.urlparse(url)
        # Accessing .port validates it (non-numeric or out of range raises ValueError).
        parsed.port  # noqa: B018
    except ValueError as exc:
        raise HttpClientError(f"Invalid URL: {url}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise HttpClientError(f"Invalid URL: {url}")


def http_get_bytes(url: str, config: HostConfig) -> Download:
    ensure_http_url(url)
    ctx = ssl.create_default_context()
    opener = build_opener(_SafeRedirectHandler(), HTTPSHandler(context=ctx))
    try:
        req = Request(url, headers={"User-Agent": _USER_AGENT})
        with opener.open(req, timeout=config.http_timeout) as resp:
            status = int(resp.status)
            if status != 200:
                raise HttpClientError(f"HTTP error: {status}")
            body = resp.read(config.http_max_bytes + 1)
            if len(body) > config.http_max_bytes:
                raise HttpClientError(f"Download exceeds {config.http_max_bytes} bytes")
            content_type = str(resp.headers.get("Content-Type") or "")
    except HTTPError as exc:
        raise HttpClientError(f"HTTP error: {exc.code}") from exc
    except URLError as exc:
        raise HttpClientError(str(exc.reason)) from exc
    except http.client.InvalidURL as exc:
        raise HttpClientError(f"Invalid URL: {url}") from exc
    except (OSError, ValueError, http.client.HTTPException) as exc:
        raise HttpClientError(f"Download failed: {exc!r}") from exc

    if content_type and "pdf" not in content_type and "octet-stream" not in content_type:
        # Some servers mislabel PDFs; keep going.
        _LOGGER.warning("download_content_type_not_pdf url=%s content_type=%s", url, content_type)
    return Download(status=status, content_type=content_type, body=body)


__all__ = ["Download", "HttpClientError", "ensure_http_url", "http_get_bytes"]
