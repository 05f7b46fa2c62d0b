"""
Runtime wiring for notecal
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from notecal import __version__
from notecal.auth import (
    AuthorizationCodeProvider,
    ConsoleCodePrompt,
    EncryptedTokenStore,
    JsonTokenStore,
    LoopbackCodeListener,
    TokenManager,
    TokenStore,
)
from notecal.config import PluginSettingsStore, get_settings, resolve_credentials
from notecal.integrations.google_calendar import GoogleCalendarService
from notecal.notifications import ConsoleNotifier, Notifier
from notecal.obsidian import EventLineProcessor, NoteProcessResult, VaultWatcher
from notecal.utils import get_logger

if TYPE_CHECKING:
    from notecal.config.settings import Settings


@dataclass
class RuntimeContext:
    """Container for runtime components."""

    settings: "Settings"
    plugin_settings: PluginSettingsStore
    token_manager: TokenManager
    calendar: GoogleCalendarService
    processor: EventLineProcessor
    notifier: Notifier


def build_token_store(settings: "Settings") -> TokenStore:
    if settings.token_encryption_key:
        return EncryptedTokenStore(
            settings.token_file, settings.token_encryption_key.get_secret_value()
        )
    return JsonTokenStore(settings.token_file)


def build_code_provider(settings: "Settings") -> AuthorizationCodeProvider:
    if settings.auth_mode == "loopback":
        return LoopbackCodeListener()
    return ConsoleCodePrompt()


def build_runtime_context(
    settings: "Settings | None" = None, notifier: Notifier | None = None
) -> RuntimeContext:
    """Construct the runtime components for the application."""
    settings = settings or get_settings()
    notifier = notifier or ConsoleNotifier()

    plugin_settings = PluginSettingsStore(settings.settings_file)
    token_manager = TokenManager(
        build_token_store(settings), build_code_provider(settings)
    )
    calendar = GoogleCalendarService()
    processor = EventLineProcessor(
        token_manager,
        calendar,
        lambda: resolve_credentials(settings, plugin_settings),
        notifier,
        calendar_id=settings.calendar_id,
        time_zone=settings.calendar_timezone,
    )

    return RuntimeContext(
        settings=settings,
        plugin_settings=plugin_settings,
        token_manager=token_manager,
        calendar=calendar,
        processor=processor,
        notifier=notifier,
    )


async def process_path(context: RuntimeContext, path: Path) -> NoteProcessResult | None:
    """One-shot scan of a single note."""
    try:
        return await context.processor.process_file(path)
    finally:
        await context.calendar.close()


async def authorize(context: RuntimeContext) -> None:
    """Run the consent flow now instead of waiting for the first event line."""
    credentials = resolve_credentials(context.settings, context.plugin_settings)
    await context.token_manager.authorize(credentials)
    context.notifier.notify("Google Calendar authorized.")


async def run_watch(context: RuntimeContext) -> None:
    """Watch the vault and process changed notes until cancelled."""
    logger = get_logger("main")
    vault_path = context.settings.obsidian_vault_path

    if not vault_path.exists():
        logger.warning(
            "Obsidian vault path does not exist, creating directory",
            path=str(vault_path),
        )
        vault_path.mkdir(parents=True, exist_ok=True)

    logger.info("Starting notecal", version=__version__, vault=str(vault_path))

    watcher = VaultWatcher(
        vault_path,
        context.processor.process_file,
        interval_seconds=context.settings.poll_interval_seconds,
        scan_on_start=context.settings.scan_on_start,
    )
    try:
        await watcher.run()
    except asyncio.CancelledError:
        watcher.stop()
        raise
    finally:
        await context.calendar.close()
        logger.info("All services stopped")
