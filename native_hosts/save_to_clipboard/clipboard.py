"""Fetch a PDF and place it on the system clipboard.

Platform plumbing only: the dispatcher sees a call that either returns the
written file or raises `CollaboratorError` with a human-readable reason.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

from .config import HostConfig
from .errors import CollaboratorError
from .http_client import http_get_bytes

_LOGGER = logging.getLogger("save_to_clipboard.clipboard")
PDF_MIME = "application/pdf"
DEFAULT_FILENAME = "document.pdf"


class ClipboardError(CollaboratorError):
    pass


def _safe_filename(filename: str) -> str:
    name = Path(str(filename or "")).name.strip()
    return name or DEFAULT_FILENAME


def _clipboard_command(path: Path, *, platform: str) -> tuple[list[str], bytes | None]:
    if platform == "darwin":
        posix = str(path).replace("\\", "\\\\").replace('"', '\\"')
        script = f'set the clipboard to (read (POSIX file "{posix}") as «class PDF »)'
        return ["osascript", "-e", script], None
    if platform.startswith("linux"):
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            return ["wl-copy", "--type", PDF_MIME], path.read_bytes()
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard", "-t", PDF_MIME, "-i", str(path)], None
        raise ClipboardError("No clipboard tool found (install wl-clipboard or xclip)")
    raise ClipboardError(f"Clipboard is not supported on platform: {platform}")


def place_file_on_clipboard(path: Path, *, platform: str | None = None) -> None:
    platform = platform or sys.platform
    command, stdin_data = _clipboard_command(path, platform=platform)
    try:
        # Never inherit stdout: it carries the native messaging frames.
        proc = subprocess.run(
            command,
            input=stdin_data,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ClipboardError(f"Failed to run {command[0]}: {exc}") from exc
    if proc.returncode != 0:
        raise ClipboardError(f"{command[0]} exited with status {proc.returncode}")


def copy_pdf_to_clipboard(
    url: str,
    filename: str,
    config: HostConfig | None = None,
    *,
    platform: str | None = None,
) -> Path:
    config = config or HostConfig.from_env()
    download = http_get_bytes(url, config)
    target = Path(tempfile.gettempdir()) / _safe_filename(filename)
    try:
        target.write_bytes(download.body)
    except OSError as exc:
        raise ClipboardError(f"Failed to write {target}: {exc}") from exc
    place_file_on_clipboard(target, platform=platform)
    _LOGGER.info("pdf_copied url=%s path=%s bytes=%d", url, target, len(download.body))
    return target


__all__ = ["ClipboardError", "copy_pdf_to_clipboard", "place_file_on_clipboard"]
