from __future__ import annotations

import contextlib
import json
import logging
import os
import re
import sys
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .browsers import BrowserTarget, ManifestKind, targets_for_platform
from .config import HOST_DESCRIPTION, HOST_NAME, HostConfig
from .errors import ConfigurationError, ValidationError
from .extension_detector import detect_extension_ids

_LOGGER = logging.getLogger("save_to_clipboard.native_host_installer")
_EXT_ID_RE = re.compile(r"^[a-z]{32}$")

Detector = Callable[[], list[str]]


class TargetStatus(Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TargetOutcome:
    label: str
    manifest_path: str
    status: TargetStatus
    error: str | None = None


@dataclass(slots=True)
class ConfigureReport:
    extension_ids: list[str] = field(default_factory=list)
    binary_path: str | None = None
    error: str | None = None
    outcomes: list[TargetOutcome] = field(default_factory=list)

    def _count(self, *statuses: TargetStatus) -> int:
        return sum(1 for o in self.outcomes if o.status in statuses)

    @property
    def configured(self) -> int:
        return self._count(TargetStatus.CREATED, TargetStatus.UPDATED)

    @property
    def created(self) -> int:
        return self._count(TargetStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(TargetStatus.SKIPPED)

    @property
    def errors(self) -> list[str]:
        return [f"{o.label}: {o.error}" for o in self.outcomes if o.status is TargetStatus.FAILED]

    @property
    def ok(self) -> bool:
        return self.error is None and self.configured > 0


def is_valid_extension_id(raw: object) -> bool:
    return isinstance(raw, str) and _EXT_ID_RE.fullmatch(raw) is not None


def validate_extension_id(raw: str) -> str:
    if not is_valid_extension_id(raw):
        raise ValidationError(f"Invalid extension ID format: expected 32 lowercase letters (a-z), received {raw!r}")
    return raw


def merge_extension_ids(primary_id: str, detected: Iterable[str]) -> list[str]:
    ids = [primary_id]
    for ext_id in detected:
        if ext_id in ids:
            continue
        if not is_valid_extension_id(ext_id):
            _LOGGER.debug("detected_id_rejected id=%s", ext_id)
            continue
        ids.append(ext_id)
    return ids


def resolve_binary(candidates: Iterable[str]) -> str | None:
    for candidate in candidates:
        if Path(candidate).exists():
            return str(candidate)
    return None


def build_manifest(kind: ManifestKind, binary_path: str, extension_ids: list[str]) -> dict[str, object]:
    manifest: dict[str, object] = {
        "name": HOST_NAME,
        "description": HOST_DESCRIPTION,
        "path": binary_path,
        "type": "stdio",
    }
    if kind is ManifestKind.FIREFOX:
        manifest["allowed_extensions"] = list(extension_ids)
    else:
        manifest["allowed_origins"] = [f"chrome-extension://{ext_id}/" for ext_id in extension_ids]
    return manifest


def render_manifest(manifest: dict[str, object]) -> str:
    return json.dumps(manifest, indent=2) + "\n"


def _write_manifest(path: Path, manifest: dict[str, object]) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            fp.write(render_manifest(manifest))
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
    if os.name != "nt":
        with contextlib.suppress(OSError):
            path.chmod(0o644)


def _configure_target(target: BrowserTarget, binary_path: str, extension_ids: list[str]) -> TargetOutcome:
    path = target.manifest_path
    if not target.support_dir.is_dir():
        return TargetOutcome(target.display_name, str(path), TargetStatus.SKIPPED)
    try:
        target.manifest_dir.mkdir(parents=True, exist_ok=True)
        existed = path.exists()
        _write_manifest(path, build_manifest(target.manifest_kind, binary_path, extension_ids))
    except OSError as exc:
        err = ConfigurationError(target.display_name, str(exc))
        _LOGGER.warning("configure_target_failed label=%s error=%s", err.label, err.reason)
        return TargetOutcome(target.display_name, str(path), TargetStatus.FAILED, error=err.reason)
    status = TargetStatus.UPDATED if existed else TargetStatus.CREATED
    _LOGGER.info("configure_target_ok label=%s status=%s path=%s", target.display_name, status.value, path)
    return TargetOutcome(target.display_name, str(path), status)


def configure(
    primary_id: str,
    dev_mode: bool = False,
    *,
    platform: str | None = None,
    home: Path | None = None,
    binary_candidates: list[str] | None = None,
    detector: Detector | None = None,
) -> ConfigureReport:
    """Write the host manifest for every installed browser.

    Browsers whose support directory is missing are skipped. A failed target is
    recorded in the report and does not stop the remaining ones.
    """
    validate_extension_id(primary_id)
    platform = platform or sys.platform
    home = home or Path.home()

    detected: list[str] = []
    if dev_mode:
        detector = detector or (lambda: detect_extension_ids(platform=platform, home=home))
        detected = detector()
    report = ConfigureReport(extension_ids=merge_extension_ids(primary_id, detected))

    candidates = binary_candidates if binary_candidates is not None else HostConfig.from_env().binary_candidates()
    binary_path = resolve_binary(candidates)
    if binary_path is None:
        report.error = "binary not found (looked in: " + ", ".join(candidates) + ")"
        _LOGGER.warning("configure_binary_missing candidates=%s", candidates)
        return report
    report.binary_path = binary_path

    for target in targets_for_platform(platform, home):
        report.outcomes.append(_configure_target(target, binary_path, report.extension_ids))
    return report


__all__ = [
    "ConfigureReport",
    "TargetOutcome",
    "TargetStatus",
    "build_manifest",
    "configure",
    "is_valid_extension_id",
    "merge_extension_ids",
    "render_manifest",
    "resolve_binary",
    "validate_extension_id",
]
