#!/usr/bin/env python3

from __future__ import annotations
import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from fchat.bot import run_bot
from fchat.config import BotConfig, ConfigError, load_config
from fchat.core.Dispatcher import HandlerErrorPolicy
from shared.log import configure_root_logging

app = typer.Typer(help="F-Chat example bot")
console = Console()


def _resolve_config(config_path: Optional[Path]) -> BotConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Config error[/]: {e}")
        raise typer.Exit(code=2)


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file; overrides FCHAT_* env vars"),
    channel: Optional[List[str]] = typer.Option(None, "--channel", "-c", help="Channel to join (repeatable)"),
    chat_url: Optional[str] = typer.Option(None, help="WebSocket URL of the chat server"),
    continue_on_handler_error: bool = typer.Option(False, help="Log handler failures instead of ending the session"),
    log_level: Optional[str] = typer.Option(None, help="DEBUG, INFO, WARNING or ERROR"),
):
    """Log in, join channels and answer messages until disconnected."""
    config = _resolve_config(config_path)
    try:
        config.update({
            "channels": channel or None,
            "chat_url": chat_url,
            "log_level": log_level,
            "handler_error_policy": HandlerErrorPolicy.CONTINUE.value if continue_on_handler_error else None,
        })
        config.validate()
    except ConfigError as e:
        console.print(f"[red]Config error[/]: {e}")
        raise typer.Exit(code=2)

    configure_root_logging(config.log_level)
    console.print(f"[bold green]F-Chat bot starting[/] as {config.character} on {config.chat_url}")
    status = asyncio.run(run_bot(config))
    raise typer.Exit(code=status)


@app.command("show-config")
def show_config(
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file; overrides FCHAT_* env vars"),
):
    """Print the resolved configuration with the password hidden."""
    config = _resolve_config(config_path)
    table = Table(title="Bot configuration")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in config.masked().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
