from __future__ import annotations


def test_host_config_from_env(monkeypatch, tmp_path) -> None:
    from native_hosts.save_to_clipboard.config import HostConfig

    monkeypatch.setenv("SAVE_TO_CLIPBOARD_BINARY", str(tmp_path / "SaveToClipboard"))
    monkeypatch.setenv("SAVE_TO_CLIPBOARD_MAX_FRAME_BYTES", "1024")
    monkeypatch.setenv("SAVE_TO_CLIPBOARD_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("SAVE_TO_CLIPBOARD_DEBUG", "1")

    config = HostConfig.from_env()

    assert config.max_frame_bytes == 1024
    assert config.http_timeout == 2.5
    assert config.debug is True
    assert config.binary_candidates()[0] == str(tmp_path / "SaveToClipboard")
    assert "/usr/local/bin/SaveToClipboard" in config.binary_candidates()


def test_malformed_numbers_fall_back_to_defaults(monkeypatch) -> None:
    from native_hosts.save_to_clipboard import config as config_mod

    monkeypatch.delenv("SAVE_TO_CLIPBOARD_BINARY", raising=False)
    monkeypatch.setenv("SAVE_TO_CLIPBOARD_MAX_FRAME_BYTES", "lots")
    monkeypatch.setenv("SAVE_TO_CLIPBOARD_HTTP_MAX_BYTES", "-5")

    config = config_mod.HostConfig.from_env()

    assert config.max_frame_bytes == config_mod.DEFAULT_MAX_FRAME_BYTES
    assert config.http_max_bytes == config_mod.DEFAULT_HTTP_MAX_BYTES
    assert config.binary_override is None
    assert config.binary_candidates()[0] == "/usr/local/bin/SaveToClipboard"
