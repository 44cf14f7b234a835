#!/usr/bin/env python3
"""
devdoctor - post-install toolchain doctor
=========================================

CLI entry point that wires up:
* Logging & configuration
* Profile ownership repair after sudo installs
* Toolchain probing and warning composition
"""

from __future__ import annotations

import json
import os
import sys

# ── Standard library ────────────────────────────────────────────────────────
from pathlib import Path
from typing import Annotated, Any

# ── Third-party ─────────────────────────────────────────────────────────────
import jsonschema
import typer
from typing_extensions import TypedDict

# ── Local imports ───────────────────────────────────────────────────────────
from devdoctor.core import config as config_loader
from devdoctor.core.composer import compose
from devdoctor.core.logger import LoggerProxy, setup_logging
from devdoctor.core.ownership import repair_profile_ownership
from devdoctor.core.report import build_report, emit_warnings, render_text
from devdoctor.core.sysinfo import collect_snapshot
from devdoctor.core.types import CapabilitySnapshot, Persona, Platform, Severity, ToolWarning

DEFAULT_CONFIG_PATH = config_loader.DEFAULT_CONFIG_PATH


class DoctorContext(TypedDict):
    """Values captured once at startup and handed to the core."""

    config: dict[str, Any]
    persona: Persona
    platform: Platform
    verbose: bool


app = typer.Typer(
    help="devdoctor - checks the host for mobile toolchain dependencies.",
    add_completion=False,
)


def _log_with_severity(log: LoggerProxy, sev: Severity, msg: str) -> None:
    getattr(log, sev.log_method())(msg)


def _current_platform() -> Platform:
    return Platform.from_sys_platform(sys.platform)


def _prepare(config_file: Path, persona: str | None, verbose: bool) -> DoctorContext:
    try:
        config = config_loader.load_config(config_file)
    except jsonschema.ValidationError as exc:
        typer.echo(f"ERROR: Invalid configuration in {config_file}: {exc.message}", err=True)
        raise typer.Exit(code=1) from None

    setup_logging(config, verbose=verbose)

    try:
        resolved = config_loader.resolve_persona(config, persona)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1) from None

    return {
        "config": config,
        "persona": resolved,
        "platform": _current_platform(),
        "verbose": verbose,
    }


def _diagnose(ctx: DoctorContext) -> tuple[CapabilitySnapshot, list[ToolWarning]]:
    timeout = ctx["config"].get("probes", {}).get("timeout_seconds", 10)
    snapshot = collect_snapshot(ctx["platform"], os.environ, timeout=timeout)
    warnings = compose(
        snapshot,
        ctx["persona"],
        ctx["platform"],
        tip_once=ctx["config"].get("cli", {}).get("tip_once", False),
    )
    return snapshot, warnings


ConfigFileOption = Annotated[
    Path,
    typer.Option(help="Path to JSON configuration file.", envvar="DEVDOCTOR_CONFIG_FILE"),
]
PersonaOption = Annotated[
    str | None,
    typer.Option(
        "--persona",
        "-p",
        help="CLI variant whose guidance to show: 'tns' or 'appbuilder'.",
        envvar="DEVDOCTOR_PERSONA",
    ),
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Enable verbose (DEBUG) output.")
]


# ── CLI commands ────────────────────────────────────────────────────────────
@app.command(name="post-install")
def post_install(
    config_file: ConfigFileOption = DEFAULT_CONFIG_PATH,
    persona: PersonaOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Print commands without executing.")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Run the post-install checks.

    Repairs profile ownership after a sudo install, then prints a warning for
    every missing toolchain dependency. Warnings never fail the install.
    """
    ctx = _prepare(config_file, persona, verbose)
    log = LoggerProxy(__name__)

    profile_dir = Path(ctx["config"]["cli"]["profile_dir"]).expanduser()
    ownership = repair_profile_ownership(
        profile_dir, os.environ.get("SUDO_USER"), ctx["platform"], dry_run=dry_run
    )
    for sev, msg in ownership.messages:
        _log_with_severity(log, sev, f"{ownership.name}: {msg}")

    _, warnings = _diagnose(ctx)
    emit_warnings(warnings, log)
    log.info(
        "Post-install checks finished with %d warning(s) for %s on %s.",
        len(warnings),
        ctx["persona"].product_name,
        ctx["platform"].value,
    )


@app.command()
def check(
    config_file: ConfigFileOption = DEFAULT_CONFIG_PATH,
    persona: PersonaOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print a JSON report.")] = False,
    strict: Annotated[
        bool, typer.Option("--strict", help="Exit with code 2 when any warning fires.")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Probe the toolchain and print the resulting warnings.
    """
    ctx = _prepare(config_file, persona, verbose)
    snapshot, warnings = _diagnose(ctx)

    if as_json:
        report = build_report(snapshot, ctx["persona"], ctx["platform"], warnings)
        typer.echo(json.dumps(report, indent=2))
    elif warnings:
        typer.echo(render_text(warnings))
    else:
        typer.echo("All toolchain dependencies were found.")

    if strict and warnings:
        raise typer.Exit(code=2)


@app.command(name="generate-config")
def generate_config_command(
    config_file: ConfigFileOption = DEFAULT_CONFIG_PATH,
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing config file.")] = False,
) -> None:
    """
    Write a default config file (~/.config/devdoctor/config.json unless overridden).
    """
    if config_file.exists() and not force:
        typer.echo("Config already exists - use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    if config_loader.generate_default_config(config_file):
        typer.echo(f"Default config written to {config_file}")
    else:
        typer.echo("Failed to create default config", err=True)
        raise typer.Exit(code=1)


# ── Main guard ──────────────────────────────────────────────────────────────
if __name__ == "__main__":
    app()
