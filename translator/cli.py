"""Command-line front end for the translator."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .app import TranslatorApp
from .config import Config
from .identity import StaticIdentityProvider
from .models import AUTO_DETECT, EditState, HistoryEntry, Identity, TranslationView
from .utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Near-real-time text translation with speech playback")

SESSION_HELP = (
    "Type text to translate. Commands: :speak, :swap, :history, :fav N, :clear, "
    ":clear-history, :theme, :login USER, :logout, :quit"
)


def _build_app(config_paths: Optional[List[Path]], log_level: Optional[str], user: Optional[str]) -> TranslatorApp:
    load_dotenv()
    configure_logging(log_level or "INFO")
    config = Config.load(config_paths)
    if log_level is None:
        configure_logging(config.system.log_level)
    identity = Identity(user_id=user) if user else None
    return TranslatorApp.from_config(config, identity_provider=StaticIdentityProvider(identity))


def _render_view(view: TranslationView) -> None:
    if view.is_empty:
        return
    body = f"[bold]{escape(view.translation)}[/bold]"
    if view.alternatives:
        body += "\n\n[dim]Alternatives:[/dim] " + " | ".join(escape(alt) for alt in view.alternatives)
    if view.notes:
        body += f"\n[dim]Notes:[/dim] {escape(view.notes)}"
    console.print(Panel(body, title=f"detected: {view.detected_language or '?'}", expand=False))


def _render_history(entries: List[HistoryEntry]) -> None:
    if not entries:
        console.print("[dim]History is empty[/dim]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("★")
    table.add_column("When")
    table.add_column("Langs")
    table.add_column("Source")
    table.add_column("Translation")
    for index, entry in enumerate(entries, start=1):
        table.add_row(
            str(index),
            "★" if entry.is_favorite else "",
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
            f"{entry.source_language}->{entry.target_language}",
            escape(entry.source_text),
            escape(entry.translation),
        )
    console.print(table)


async def _handle_command(translator: TranslatorApp, line: str) -> bool:
    """Run one ``:command``; return False when the session should end."""
    command, _, argument = line[1:].partition(" ")
    argument = argument.strip()

    if command in ("quit", "q", "exit"):
        return False
    if command == "speak":
        await translator.speak(argument or None)
    elif command == "swap":
        translator.orchestrator.swap()
        await translator.orchestrator.settle()
        _render_view(translator.orchestrator.view)
    elif command == "history":
        _render_history(translator.history)
    elif command == "fav":
        try:
            entry = translator.history[int(argument) - 1]
        except (ValueError, IndexError):
            console.print("[red]Usage: :fav N (row number from :history)[/red]")
            return True
        value = await translator.toggle_favorite(entry.id)
        if value is not None:
            console.print(f"{'★ added' if value else '☆ removed'}: {escape(entry.source_text)}")
    elif command == "clear":
        translator.orchestrator.clear()
    elif command == "clear-history":
        if typer.confirm("Are you sure you want to clear all history?", default=False):
            await translator.clear_history()
    elif command == "theme":
        console.print(f"Theme: {translator.theme.toggle()}")
    elif command == "login":
        if not argument:
            console.print("[red]Usage: :login USER[/red]")
            return True
        await translator.identity_provider.sign_in(Identity(user_id=argument))
    elif command == "logout":
        await translator.identity_provider.sign_out()
    else:
        console.print(SESSION_HELP)
    return True


async def session_async(
    config_paths: Optional[List[Path]],
    log_level: Optional[str],
    user: Optional[str],
    edit_state: EditState,
) -> None:
    translator = _build_app(config_paths, log_level, user)
    translator.notices.add_listener(lambda message: message and console.print(f"[yellow]{message}[/yellow]"))
    await translator.start()
    translator.orchestrator.edit_state = edit_state

    console.print(SESSION_HELP)
    try:
        while True:
            line = await asyncio.to_thread(console.input, "[bold cyan]> [/bold cyan]")
            if line.startswith(":"):
                if not await _handle_command(translator, line.strip()):
                    break
                continue
            translator.type_text(line)
            await translator.orchestrator.settle()
            _render_view(translator.orchestrator.view)
    except (EOFError, KeyboardInterrupt):
        logger.info("Session ended by user")
    finally:
        await translator.shutdown()


async def translate_async(
    text: str,
    config_paths: Optional[List[Path]],
    log_level: Optional[str],
    user: Optional[str],
    edit_state: EditState,
    speak: bool,
) -> None:
    translator = _build_app(config_paths, log_level, user)
    await translator.start()
    try:
        translator.submit(edit_state.with_text(text))
        await translator.orchestrator.settle()
        view = translator.orchestrator.view
        if view.is_empty:
            console.print(f"[red]{escape(translator.notices.current or 'No translation produced')}[/red]")
            raise typer.Exit(code=1)
        _render_view(view)
        if speak and not await translator.speak():
            console.print(f"[red]{translator.notices.current}[/red]")
    finally:
        await translator.shutdown()


async def history_async(config_paths: Optional[List[Path]], log_level: Optional[str], user: Optional[str], clear: bool) -> None:
    translator = _build_app(config_paths, log_level, user)
    await translator.start()
    try:
        if clear:
            if not await translator.clear_history():
                raise typer.Exit(code=1)
            console.print("History Cleared")
        else:
            _render_history(translator.history)
    finally:
        await translator.shutdown()


ConfigOption = typer.Option(None, "--config", help="YAML config file (repeatable, merged left-to-right)")
LogLevelOption = typer.Option(None, help="Logging level (defaults to system.log_level)")
UserOption = typer.Option(None, "--user", help="Signed-in user id; selects the remote history backend")


@app.command("session")
def session(
    config: Optional[List[Path]] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    user: Optional[str] = UserOption,
    source_language: str = typer.Option(AUTO_DETECT, "--from", help="Source language code or 'auto'"),
    source_country: str = typer.Option("", help="Source country code"),
    target_language: str = typer.Option("en", "--to", help="Target language code"),
    target_country: str = typer.Option("US", help="Target country code"),
) -> None:
    """Interactive translation session."""
    state = EditState(
        source_language=source_language,
        source_country=source_country,
        target_language=target_language,
        target_country=target_country,
    )
    asyncio.run(session_async(config, log_level, user, state))


@app.command("translate")
def translate(
    text: str,
    config: Optional[List[Path]] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    user: Optional[str] = UserOption,
    source_language: str = typer.Option(AUTO_DETECT, "--from", help="Source language code or 'auto'"),
    source_country: str = typer.Option("", help="Source country code"),
    target_language: str = typer.Option("en", "--to", help="Target language code"),
    target_country: str = typer.Option("US", help="Target country code"),
    speak: bool = typer.Option(False, "--speak", help="Speak the translation"),
) -> None:
    """Translate TEXT once and record it in history."""
    state = EditState(
        source_language=source_language,
        source_country=source_country,
        target_language=target_language,
        target_country=target_country,
    )
    asyncio.run(translate_async(text, config, log_level, user, state, speak))


@app.command("history")
def history(
    config: Optional[List[Path]] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    user: Optional[str] = UserOption,
) -> None:
    """List the most recent translations (newest first)."""
    asyncio.run(history_async(config, log_level, user, clear=False))


@app.command("clear-history")
def clear_history(
    config: Optional[List[Path]] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
    user: Optional[str] = UserOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every history entry for the active backend."""
    if not yes and not typer.confirm("Are you sure you want to clear all history?", default=False):
        raise typer.Exit()
    asyncio.run(history_async(config, log_level, user, clear=True))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
