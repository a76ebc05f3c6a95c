"""Find locally installed extensions that may talk to this host.

Used by `--configure ... --dev` so that unpacked/development copies of the
extension (whose ids differ from the store id) are allowed as well.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .browsers import platform_key

_LOGGER = logging.getLogger("save_to_clipboard.extension_detector")

NATIVE_MESSAGING_PERMISSION = "nativeMessaging"
PROFILE_NAMES: tuple[str, ...] = ("Default", "Profile 1", "Profile 2", "Profile 3", "Profile 4")
_EXT_ID_RE = re.compile(r"^[a-z]{32}$")


def primary_user_data_dir(platform: str, home: Path) -> Path | None:
    key = platform_key(platform)
    if key == "darwin":
        return home / "Library" / "Application Support" / "Google" / "Chrome"
    if key == "linux":
        return home / ".config" / "google-chrome"
    return None


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8", errors="replace"))
    except (OSError, ValueError) as exc:
        _LOGGER.debug("extension_manifest_skipped path=%s error=%s", path, exc)
        return None


def declares_native_messaging(manifest: Any) -> bool:
    if not isinstance(manifest, dict):
        return False
    permissions = manifest.get("permissions")
    # optional_permissions alone does not qualify an extension.
    return isinstance(permissions, list) and NATIVE_MESSAGING_PERMISSION in permissions


def _sorted_dirs(path: Path) -> list[Path]:
    try:
        return sorted(p for p in path.iterdir() if p.is_dir())
    except OSError as exc:
        _LOGGER.debug("extension_dir_unreadable path=%s error=%s", path, exc)
        return []


def _ids_from_extensions_dir(profile: Path) -> Iterator[str]:
    root = profile / "Extensions"
    if not root.is_dir():
        return
    for candidate in _sorted_dirs(root):
        name = candidate.name
        if len(name) != 32 or name.startswith("."):
            continue
        for version in _sorted_dirs(candidate):
            if declares_native_messaging(_load_json(version / "manifest.json")):
                yield name
                break


def _ids_from_preferences(profile: Path) -> Iterator[str]:
    # Unpacked extensions live outside Extensions/; Chrome records their path in the profile prefs.
    for pref_name in ("Preferences", "Secure Preferences"):
        pref = profile / pref_name
        if not pref.is_file():
            continue
        data = _load_json(pref)
        extensions = data.get("extensions") if isinstance(data, dict) else None
        settings = extensions.get("settings") if isinstance(extensions, dict) else None
        if not isinstance(settings, dict):
            continue
        for ext_id, entry in settings.items():
            if not isinstance(entry, dict):
                continue
            manifest = entry.get("manifest")
            if not isinstance(manifest, dict):
                raw_path = str(entry.get("path") or "").strip()
                if not raw_path:
                    continue
                ext_dir = Path(raw_path).expanduser()
                if not ext_dir.is_absolute():
                    ext_dir = profile / "Extensions" / ext_dir
                manifest = _load_json(ext_dir / "manifest.json")
            if declares_native_messaging(manifest):
                yield str(ext_id)


def detect_extension_ids(
    *,
    platform: str | None = None,
    home: Path | None = None,
    profiles: tuple[str, ...] = PROFILE_NAMES,
) -> list[str]:
    platform = platform or sys.platform
    home = home or Path.home()
    user_data = primary_user_data_dir(platform, home)
    if user_data is None or not user_data.is_dir():
        return []

    found: list[str] = []
    seen: set[str] = set()
    for profile_name in profiles:
        profile = user_data / profile_name
        if not profile.is_dir():
            continue
        for source in (_ids_from_extensions_dir(profile), _ids_from_preferences(profile)):
            for ext_id in source:
                if ext_id in seen or not _EXT_ID_RE.fullmatch(ext_id):
                    continue
                seen.add(ext_id)
                found.append(ext_id)
    _LOGGER.debug("extensions_detected ids=%s", found)
    return found


__all__ = ["NATIVE_MESSAGING_PERMISSION", "PROFILE_NAMES", "declares_native_messaging", "detect_extension_ids"]
