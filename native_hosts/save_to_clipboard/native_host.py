"""Native Messaging host for the Save to Clipboard extension.

Launched by the browser when the extension calls `connectNative()`: one framed
request on stdin, one framed response on stdout, exit code mirrors success.

Run with `--configure EXTENSION_ID [--dev]` to register the host with every
installed browser instead.
"""

from __future__ import annotations

import argparse
import functools
import logging
import sys

from .clipboard import copy_pdf_to_clipboard
from .config import BINARY_NAME, HostConfig
from .dispatch import run_exchange
from .native_host_installer import ConfigureReport, TargetStatus, configure, is_valid_extension_id

_LOGGER = logging.getLogger("save_to_clipboard")

USAGE = f"""{BINARY_NAME} Native Messaging Host

Usage:
  {BINARY_NAME} --configure EXTENSION_ID [--dev]
    Configure the extension ID in all browser manifests
    (--dev also allows unpacked extensions found in local Chrome profiles)

  {BINARY_NAME}
    Run as native messaging host (reads from stdin)
"""


def _configure_logging(config: HostConfig) -> None:
    # Native messaging requires strict stdout framing. Never write logs to stdout.
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


class _UnrecognizedArguments(Exception):
    pass


class _HostArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # noqa: ANN201
        # argparse would exit 2; malformed arguments fall through to native messaging mode instead.
        raise _UnrecognizedArguments(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _HostArgumentParser(prog=BINARY_NAME, usage=USAGE, add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("--configure", nargs="?", const="", default=None, metavar="EXTENSION_ID")
    parser.add_argument("--dev", action="store_true")
    return parser


def format_report(report: ConfigureReport) -> list[str]:
    lines = [f"Configuring extension ID: {report.extension_ids[0]}"]
    for ext_id in report.extension_ids[1:]:
        lines.append(f"   + detected development extension: {ext_id}")
    lines.append("")
    if report.error:
        lines.append(f"Error: {report.error}")
        lines.append(f"   Install {BINARY_NAME} first")
        return lines

    for outcome in report.outcomes:
        if outcome.status is TargetStatus.CREATED:
            lines.append(f"   Created {outcome.label}: {outcome.manifest_path}")
        elif outcome.status is TargetStatus.UPDATED:
            lines.append(f"   Updated {outcome.label}: {outcome.manifest_path}")
        elif outcome.status is TargetStatus.FAILED:
            lines.append(f"   Failed to update {outcome.label}: {outcome.error}")
    lines.append("")
    lines.append(
        f"Configured {report.configured} browser manifest(s) "
        f"({report.created} new, {report.skipped} skipped, {len(report.errors)} failed)"
    )
    if report.configured:
        lines.extend(["", "Next steps:", "   1. Reload the extension in your browser", "   2. Test by copying a PDF"])
    else:
        lines.append("   No supported browser found to configure")
    return lines


def run_configure(extension_id: str, dev_mode: bool) -> int:
    if not is_valid_extension_id(extension_id):
        print("Invalid extension ID format")
        print("   Expected: 32 lowercase letters (a-z)")
        print(f"   Received: {extension_id}")
        return 1
    report = configure(extension_id, dev_mode)
    for line in format_report(report):
        print(line)
    return 0


def main(argv: list[str] | None = None) -> None:
    config = HostConfig.from_env()
    _configure_logging(config)
    parser = _build_parser()
    try:
        args, extra = parser.parse_known_args(argv)
    except _UnrecognizedArguments as exc:
        _LOGGER.debug("native_host_args_ignored error=%s", exc)
        args = parser.parse_known_args([])[0]
        extra = list(sys.argv[1:] if argv is None else argv)

    if args.help:
        print(USAGE)
        raise SystemExit(0)
    if args.configure is not None:
        raise SystemExit(run_configure(args.configure, args.dev))

    # Browsers pass the caller origin (and --parent-window on Windows); nothing to act on.
    _LOGGER.debug("native_host_start args=%s", extra)
    copy_pdf = functools.partial(copy_pdf_to_clipboard, config=config)
    try:
        code = run_exchange(
            sys.stdin.buffer,
            sys.stdout.buffer,
            copy_pdf=copy_pdf,
            max_frame_bytes=config.max_frame_bytes,
        )
    except KeyboardInterrupt:
        raise SystemExit(1) from None
    raise SystemExit(code)


if __name__ == "__main__":
    main()
