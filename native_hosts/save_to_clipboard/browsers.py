from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import HOST_NAME


class ManifestKind(Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"


@dataclass(frozen=True, slots=True)
class BrowserTarget:
    display_name: str
    manifest_kind: ManifestKind
    manifest_path: Path

    @property
    def manifest_dir(self) -> Path:
        return self.manifest_path.parent

    @property
    def support_dir(self) -> Path:
        # Exists only when the browser has been installed and launched at least once.
        return self.manifest_path.parent.parent


_MAC_SUPPORT = ("Library", "Application Support")

# (display name, manifest kind, NativeMessagingHosts dir relative to $HOME)
BROWSER_TABLE: dict[str, list[tuple[str, ManifestKind, tuple[str, ...]]]] = {
    "darwin": [
        ("Chrome", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Google", "Chrome", "NativeMessagingHosts")),
        ("Chrome Beta", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Google", "Chrome Beta", "NativeMessagingHosts")),
        ("Chrome Canary", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Google", "Chrome Canary", "NativeMessagingHosts")),
        ("Chromium", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Chromium", "NativeMessagingHosts")),
        ("Edge", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Microsoft Edge", "NativeMessagingHosts")),
        ("Brave", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "BraveSoftware", "Brave-Browser", "NativeMessagingHosts")),
        ("Arc", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Arc", "User Data", "NativeMessagingHosts")),
        ("Vivaldi", ManifestKind.CHROMIUM, (*_MAC_SUPPORT, "Vivaldi", "NativeMessagingHosts")),
        ("Firefox", ManifestKind.FIREFOX, (*_MAC_SUPPORT, "Mozilla", "NativeMessagingHosts")),
    ],
    "linux": [
        ("Chrome", ManifestKind.CHROMIUM, (".config", "google-chrome", "NativeMessagingHosts")),
        ("Chrome Beta", ManifestKind.CHROMIUM, (".config", "google-chrome-beta", "NativeMessagingHosts")),
        ("Chrome Unstable", ManifestKind.CHROMIUM, (".config", "google-chrome-unstable", "NativeMessagingHosts")),
        ("Chromium", ManifestKind.CHROMIUM, (".config", "chromium", "NativeMessagingHosts")),
        ("Edge", ManifestKind.CHROMIUM, (".config", "microsoft-edge", "NativeMessagingHosts")),
        ("Brave", ManifestKind.CHROMIUM, (".config", "BraveSoftware", "Brave-Browser", "NativeMessagingHosts")),
        ("Vivaldi", ManifestKind.CHROMIUM, (".config", "vivaldi", "NativeMessagingHosts")),
        ("Firefox", ManifestKind.FIREFOX, (".mozilla", "native-messaging-hosts")),
    ],
}


def platform_key(platform: str) -> str:
    if platform.startswith("linux"):
        return "linux"
    return platform


def targets_for_platform(platform: str, home: Path) -> list[BrowserTarget]:
    out_name = f"{HOST_NAME}.json"
    return [
        BrowserTarget(name, kind, home.joinpath(*parts) / out_name)
        for name, kind, parts in BROWSER_TABLE.get(platform_key(platform), [])
    ]


__all__ = ["BROWSER_TABLE", "BrowserTarget", "ManifestKind", "platform_key", "targets_for_platform"]
