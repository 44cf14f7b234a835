# devdoctor/core/report.py
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import typer

from devdoctor.core.logger import LoggerProxy
from devdoctor.core.types import CapabilitySnapshot, Persona, Platform, ToolWarning


def _block(warning: ToolWarning) -> list[str]:
    lines = [f"WARNING: {warning.headline}", *warning.detail.splitlines()]
    if warning.tip:
        lines.append(f"TIP: {warning.tip}")
    return lines


def render_text(warnings: Sequence[ToolWarning]) -> str:
    """Plain-text rendering, one block per warning separated by a blank line."""
    return "\n\n".join("\n".join(_block(w)) for w in warnings)


def warnings_as_dicts(warnings: Sequence[ToolWarning]) -> list[dict[str, Any]]:
    return [w.as_dict() for w in warnings]


def build_report(
    snapshot: CapabilitySnapshot,
    persona: Persona,
    platform: Platform,
    warnings: Sequence[ToolWarning],
) -> dict[str, Any]:
    return {
        "persona": persona.value,
        "platform": platform.value,
        "snapshot": snapshot.as_dict(),
        "warnings": warnings_as_dicts(warnings),
    }


def emit_warnings(warnings: Sequence[ToolWarning], log: LoggerProxy) -> None:
    """Print every warning block to stdout whatever the log level is."""
    for w in warnings:
        log.debug("Rule %s fired", w.rule)
        typer.echo(f"WARNING: {w.headline}")
        typer.echo(w.detail + "\n")
        if w.tip:
            typer.echo(f"TIP: {w.tip}\n")
