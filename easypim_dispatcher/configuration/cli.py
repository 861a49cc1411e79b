"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
import sys
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from easypim_dispatcher.configuration.driver import get_dispatcher_config
from easypim_dispatcher.dispatch.dispatcher import dispatch_notification
from easypim_dispatcher.routing.classifier import classify_platform
from easypim_dispatcher.routing.parameters import derive_execution_parameters
from easypim_dispatcher.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


@typer_app.command(name="serve")
def serve_cli(
    host: Annotated[str, Option(envvar="HOST", help="Interface to bind.")] = "0.0.0.0",
    port: Annotated[int, Option(envvar="PORT", help="Port to listen on.")] = 8080,
) -> None:
    """Serve the Event Grid webhook endpoint."""
    typer.echo(f"Serving EasyPIM event dispatcher on {host}:{port}")
    uvicorn.run("easypim_dispatcher.app:app", host=host, port=port)


@typer_app.command(name="dispatch")
def dispatch_cli(
    event_file: Annotated[str, Argument(help="Path to a file holding the notification body, or '-' for stdin.")],
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Run a single notification through the dispatcher and print the response."""
    configure_logging(debug=debug)
    if event_file == "-":
        body = sys.stdin.read()
    else:
        path = Path(event_file)
        if not path.exists():
            error = f"Event file not found: {path.absolute()}"
            typer.echo(error, err=True)
            raise typer.Exit(code=2)
        body = path.read_text(encoding="utf-8")

    config = get_dispatcher_config()
    result = asyncio.run(dispatch_notification(body, config))
    typer.echo(json.dumps(result.body, indent=2))
    if result.status_code >= 500:
        sys.exit(1)


@typer_app.command(name="plan")
def plan_cli(
    secret_name: Annotated[str, Argument(help="Name of the changed secret.")],
    vault_name: Annotated[str, Option(help="Name of the vault holding the secret.")] = "Unknown",
) -> None:
    """Show how a secret change would be routed, without triggering anything."""
    config = get_dispatcher_config()
    decision = classify_platform(secret_name)
    parameters = derive_execution_parameters(secret_name, vault_name, config.overrides)
    typer.echo(f"Platform: {decision.platform.value}")
    typer.echo(f"WhatIf: {str(parameters.preview_only).lower()}")
    typer.echo(f"Mode: {parameters.mode.value}")
    typer.echo(f"Verbose: {str(parameters.verbose).lower()}")
    typer.echo(f"Description: {parameters.description}")


if __name__ == "__main__":
    typer_app()
