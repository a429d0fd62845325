"""CLI interface for vaultdigest."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from vaultdigest import console as ui
from vaultdigest.concurrency import CancellationToken
from vaultdigest.config import VaultDigestConfig, load_config, merge_cli_overrides
from vaultdigest.errors import ConfigError, ProcessingCancelled
from vaultdigest.processors import (
    BacklogProcessor,
    DailyProcessor,
    Processor,
    WeeklyProcessor,
)
from vaultdigest.summarizer import LLMSummarizer

APP_NAME = "vaultdigest"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130

app = typer.Typer(
    name=APP_NAME,
    help="AI-powered daily, weekly and backlog digests for a Markdown vault.",
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

STEPS: dict[str, tuple[str, type[Processor]]] = {
    "daily": ("Daily Processing", DailyProcessor),
    "weekly": ("Weekly Review", WeeklyProcessor),
    "backlog": ("Backlog Review", BacklogProcessor),
}


def _setup_logging(verbose: bool) -> None:
    handler = RichHandler(
        console=ui.err_console,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # SDK request logs are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@contextmanager
def _cancel_on_signals(token: CancellationToken) -> Iterator[None]:
    """Turn SIGINT/SIGTERM into a cancellation request for the duration."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, _frame: object) -> None:
        logger.warning("Received signal %d, cancelling", signum)
        token.cancel()

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from vaultdigest import __version__

        ui.console.print(f"{APP_NAME} {__version__}")
        raise typer.Exit()


def run_steps(config: VaultDigestConfig, names: list[str], label: str) -> int:
    """Run processors in order and map the outcome to an exit code."""
    try:
        config.ensure_valid()
    except ConfigError as exc:
        ui.error(str(exc))
        return EXIT_FAILED

    ui.info(f"Vault: {config.vault.root}")
    summarizer = LLMSummarizer(config)
    token = CancellationToken()

    with _cancel_on_signals(token):
        try:
            for name in names:
                step_title, processor_cls = STEPS[name]
                ui.title(step_title)
                logger.info("Starting %s command", name)
                processor_cls(config, summarizer).process(token)
            ui.success(f"{label} completed successfully")
            return EXIT_OK
        except (ProcessingCancelled, KeyboardInterrupt):
            ui.warn(f"{label} cancelled by user")
            return EXIT_CANCELLED
        except Exception as exc:
            ui.error(f"{label} failed: {exc}")
            logger.debug("%s failed", label, exc_info=True)
            return EXIT_FAILED


def _finish(ctx: typer.Context, names: list[str], label: str) -> None:
    code = run_steps(ctx.obj, names, label)
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .vaultdigest.toml file."),
    ] = None,
    vault: Annotated[
        Optional[Path],
        typer.Option("--vault", help="Vault root directory (overrides config)."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Claude model (sonnet, haiku, opus or an ID)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Process the vault inbox, weekly digest and task backlog.

    Without a subcommand, runs daily, weekly and backlog in sequence.
    """
    from vaultdigest import __version__

    _setup_logging(verbose)
    ui.banner(APP_NAME, __version__)

    try:
        config = load_config(config_path)
        ctx.obj = merge_cli_overrides(config, vault_path=vault, model=model)
    except ConfigError as exc:
        ui.error(str(exc))
        raise typer.Exit(EXIT_FAILED) from None

    if ctx.invoked_subcommand is None:
        logger.info("Running all commands because no specific command was provided")
        ui.title("Running All: Daily, Weekly, Backlog")
        _finish(ctx, ["daily", "weekly", "backlog"], "Run-all")


@app.command()
def daily(ctx: typer.Context) -> None:
    """Process daily tasks and notes from the inbox."""
    _finish(ctx, ["daily"], "Daily command")


@app.command()
def weekly(ctx: typer.Context) -> None:
    """Generate the weekly review and summary."""
    _finish(ctx, ["weekly"], "Weekly command")


@app.command()
def backlog(ctx: typer.Context) -> None:
    """Review open tasks from the last four weeks."""
    _finish(ctx, ["backlog"], "Backlog review")


if __name__ == "__main__":
    app()
