# src/splunkacs/cli.py
"""splunkacs Command Line Interface.

Entry point for the splunkacs CLI tool. Results are printed to stdout as
JSON; logs go to stderr.
"""

from __future__ import annotations

import json
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import Any

import typer
from pydantic import ValidationError

from splunkacs import __version__
from splunkacs.contracts import (
    AcsApiError,
    HecTokenSpec,
    IndexDataType,
    IndexSpec,
    SplunkAcsError,
    normalize_indexes,
)
from splunkacs.core.config import SplunkAcsSettings, load_settings, resolve_config
from splunkacs.core.logging import configure_logging
from splunkacs.engine import CancellationToken
from splunkacs.provider import AcsProvider

__all__ = ["app"]

app = typer.Typer(
    name="splunkacs",
    help="Manage Splunk Cloud HEC tokens and indexes through the Admin Config Service.",
    no_args_is_help=True,
)
hec_token_app = typer.Typer(help="HTTP Event Collector tokens.", no_args_is_help=True)
index_app = typer.Typer(help="Indexes.", no_args_is_help=True)
app.add_typer(hec_token_app, name="hec-token")
app.add_typer(index_app, name="index")


@dataclass
class _CliState:
    settings: SplunkAcsSettings


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"splunkacs version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to settings YAML. SPLUNKACS_* environment variables override it.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR).",
    ),
    json_logs: bool | None = typer.Option(
        None,
        "--json-logs/--console-logs",
        help="Override the configured log format.",
    ),
) -> None:
    """splunkacs: Splunk Admin Config Service resources with convergence waits."""
    try:
        settings = load_settings(config)
    except FileNotFoundError as e:
        raise _fail(str(e)) from None
    except ValidationError as e:
        raise _fail(f"Invalid configuration:\n{e}") from None

    configure_logging(
        json_output=settings.logging.json_output if json_logs is None else json_logs,
        level=log_level or settings.logging.level,
    )
    ctx.obj = _CliState(settings=settings)


@contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Turn Ctrl-C into a cancellation of the running propagation wait."""

    def handler(signum: int, frame: FrameType | None) -> None:
        token.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


@contextmanager
def _provider(ctx: typer.Context) -> Iterator[AcsProvider]:
    state: _CliState = ctx.obj
    provider = AcsProvider(state.settings)
    try:
        provider.configure()
        yield provider
    except SplunkAcsError as e:
        raise _fail(str(e)) from None
    finally:
        provider.close()


def _emit(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _exists(error: AcsApiError | None) -> bool:
    """True if a GET succeeded, False on 404, raise on anything else."""
    if error is None:
        return True
    if error.is_not_found:
        return False
    raise error


# =============================================================================
# HEC tokens
# =============================================================================


@hec_token_app.command("apply")
def hec_token_apply(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Token name."),
    default_index: str = typer.Option(..., "--default-index", help="Default index for events."),
    allowed_index: list[str] | None = typer.Option(
        None, "--allowed-index", help="Index the token may write to (repeatable)."
    ),
    default_host: str = typer.Option("", "--default-host"),
    default_source: str = typer.Option("", "--default-source"),
    default_sourcetype: str = typer.Option("", "--default-sourcetype"),
    disabled: bool = typer.Option(False, "--disabled/--enabled"),
    use_ack: bool = typer.Option(False, "--use-ack/--no-ack", help="Enable indexer acknowledgement."),
) -> None:
    """Create the token, or update it in place if it already exists."""
    spec = HecTokenSpec(
        name=name,
        default_index=default_index,
        allowed_indexes=normalize_indexes(allowed_index),
        default_host=default_host,
        default_source=default_source,
        default_sourcetype=default_sourcetype,
        disabled=disabled,
        use_ack=use_ack,
    )
    token = CancellationToken(deadline_seconds=ctx.obj.settings.propagation.deadline_seconds)
    with _provider(ctx) as provider, _cancel_on_interrupt(token):
        resource = provider.hec_tokens()
        if _exists(provider.client.get_hec_token(name).error):
            result = resource.update(spec, cancel=token)
        else:
            result = resource.create(spec, cancel=token)
    _emit(result.to_state())


@hec_token_app.command("show")
def hec_token_show(ctx: typer.Context, name: str = typer.Argument(..., help="Token name.")) -> None:
    """Print a token's current state, including its value."""
    with _provider(ctx) as provider:
        result = provider.hec_token_data_source().read(name)
    _emit(result.to_state())


@hec_token_app.command("delete")
def hec_token_delete(ctx: typer.Context, name: str = typer.Argument(..., help="Token name.")) -> None:
    """Delete a token."""
    with _provider(ctx) as provider:
        provider.hec_tokens().delete(name)
    _emit({"deleted": name})


# =============================================================================
# Indexes
# =============================================================================


@index_app.command("apply")
def index_apply(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Index name."),
    data_type: IndexDataType = typer.Option(IndexDataType.EVENT, "--data-type", case_sensitive=False),
    searchable_days: int = typer.Option(0, "--searchable-days", min=0),
    max_data_size_mb: int = typer.Option(0, "--max-data-size-mb", min=0),
) -> None:
    """Create the index, or update retention and size if it already exists."""
    spec = IndexSpec(
        name=name,
        data_type=data_type,
        searchable_days=searchable_days,
        max_data_size_mb=max_data_size_mb,
    )
    token = CancellationToken(deadline_seconds=ctx.obj.settings.propagation.deadline_seconds)
    with _provider(ctx) as provider, _cancel_on_interrupt(token):
        resource = provider.indexes()
        current = provider.client.get_index(name)
        if _exists(current.error):
            assert current.value is not None
            if current.value.spec.data_type != spec.data_type:
                raise _fail(
                    f"index {name!r} holds {current.value.spec.data_type} data; "
                    "changing data_type requires deleting and recreating it"
                )
            result = resource.update(spec, cancel=token)
        else:
            result = resource.create(spec, cancel=token)
    _emit(result.to_state())


@index_app.command("show")
def index_show(ctx: typer.Context, name: str = typer.Argument(..., help="Index name.")) -> None:
    """Print an index's current state and usage."""
    with _provider(ctx) as provider:
        result = provider.index_data_source().read(name)
    _emit(result.to_state())


@index_app.command("delete")
def index_delete(ctx: typer.Context, name: str = typer.Argument(..., help="Index name.")) -> None:
    """Delete an index and its data."""
    with _provider(ctx) as provider:
        provider.indexes().delete(name)
    _emit({"deleted": name})


# =============================================================================
# Stack
# =============================================================================


@app.command("stack-status")
def stack_status(ctx: typer.Context) -> None:
    """Print the stack type and version."""
    with _provider(ctx) as provider:
        result = provider.stack_status_data_source().read()
    _emit(result.to_state())


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the resolved configuration with secrets masked."""
    _emit(resolve_config(ctx.obj.settings))
