from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

HOST_NAME = "com.hikuohiku.save_to_clipboard"
HOST_DESCRIPTION = "Native messaging host for Save to Clipboard extension"
BINARY_NAME = "SaveToClipboard"

DEFAULT_BINARY_CANDIDATES: list[str] = [
    # Installed by the .pkg installer.
    f"/usr/local/bin/{BINARY_NAME}",
    f"/opt/homebrew/bin/{BINARY_NAME}",
    f"~/.local/bin/{BINARY_NAME}",
]

DEFAULT_MAX_FRAME_BYTES = 8_000_000
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_HTTP_MAX_BYTES = 100 * 1024 * 1024


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name) or default)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.environ.get(name) or default)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class HostConfig:
    binary_override: str | None = None
    max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    http_max_bytes: int = DEFAULT_HTTP_MAX_BYTES
    debug: bool = False

    @classmethod
    def from_env(cls) -> HostConfig:
        override = (os.environ.get("SAVE_TO_CLIPBOARD_BINARY") or "").strip()
        return cls(
            binary_override=expand_path(override) if override else None,
            max_frame_bytes=_env_int("SAVE_TO_CLIPBOARD_MAX_FRAME_BYTES", DEFAULT_MAX_FRAME_BYTES),
            http_timeout=_env_float("SAVE_TO_CLIPBOARD_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            http_max_bytes=_env_int("SAVE_TO_CLIPBOARD_HTTP_MAX_BYTES", DEFAULT_HTTP_MAX_BYTES),
            debug=os.environ.get("SAVE_TO_CLIPBOARD_DEBUG") == "1",
        )

    def binary_candidates(self) -> list[str]:
        """Ordered install locations probed when writing manifests."""
        candidates = [expand_path(c) for c in DEFAULT_BINARY_CANDIDATES]
        if self.binary_override:
            candidates.insert(0, self.binary_override)
        return candidates
