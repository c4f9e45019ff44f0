"""
Anekbot
=======

A Discord bot that keeps sampling aneks from a set of source channels in the
background and posts a random one whenever a user asks for it.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. ANEKBOT_HOME environment variable, if set.
    2. The executable's directory when running frozen (PyInstaller, Nuitka).
    3. Otherwise the repository root, two levels above this package.
    """
    if env_home := os.getenv("ANEKBOT_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from anekbot.configuration.app_configuration import app_config
from anekbot.crawler.discord_source_client import DiscordSourceClient
from anekbot.services.content_cache_service import ContentCacheService
from anekbot.ui.console import ConsoleControl, close_bot_instance, console_session
from anekbot.util.logger import get_logger, handle_exception


logger = get_logger("main")

RESTART_EXIT_CODE = 42


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Intents for slash commands plus message events in source channels."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.messages = True
    intents.message_content = True
    return intents


def load_cogs(
    discord_bot_instance: discord.Bot,
    cache_service: ContentCacheService,
    source_client: DiscordSourceClient,
) -> None:
    """Register all cogs with the provided bot instance."""
    from anekbot.cog.commands import anek_cmds
    from anekbot.cog.listener import events_listener

    anek_cmds.setup(discord_bot_instance, cache_service)
    events_listener.setup(discord_bot_instance, cache_service, source_client)

    logger.info("All cogs loaded successfully.")


def create_bot() -> tuple[discord.Bot, ContentCacheService]:
    """Instantiate the bot, its content cache and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    source_client = DiscordSourceClient(bot)
    cache_service = ContentCacheService(app_config.cache_settings, source_client)
    load_cogs(bot, cache_service, source_client)
    return bot, cache_service


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and log around the connection lifecycle."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot, cache_service: ContentCacheService) -> None:
    """Stop the crawl loop and close the Discord connection."""
    try:
        await cache_service.shutdown()
    except Exception as exc:
        logger.exception("Error during content cache shutdown: %s", exc)

    await close_bot_instance(bot, log_close=True)
    logger.info("Shutdown complete.")


async def run_bot_session(
    bot: discord.Bot,
    cache_service: ContentCacheService,
    token: str,
    control: ConsoleControl,
) -> int:
    """Run the bot alongside the console, returning an exit code."""
    control.set_bot(bot)
    exit_code = 0

    try:
        async with console_session(control):
            try:
                await start_bot(bot, token)
            except asyncio.CancelledError:
                logger.info("Bot start cancelled; proceeding to shutdown")
            except discord.LoginFailure as exc:
                logger.critical("Discord rejected the bot token: %s", exc)
                exit_code = 1
            except Exception as exc:
                logger.critical("Discord bot runtime error: %s", exc)
                exit_code = 1
    finally:
        control.set_bot(None)
        await shutdown_runtime(bot, cache_service)

    return exit_code


async def async_main() -> int:
    """Bootstrap the bot, cache and console, returning an exit code."""
    token = load_environment()

    try:
        bot, cache_service = create_bot()
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    control = ConsoleControl(cache_service)
    exit_code = await run_bot_session(bot, cache_service, token, control)

    if control.is_restart_requested():
        logger.info("Restart requested, returning exit code %d to trigger restart", RESTART_EXIT_CODE)
        return RESTART_EXIT_CODE

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Anekbot…")
    try:
        exit_code = asyncio.run(async_main())

        if exit_code == RESTART_EXIT_CODE:
            logger.info("Restart requested; replacing current process with new instance.")
            os.execv(sys.executable, [sys.executable] + sys.argv)
            return 0  # pragma: no cover

        return exit_code
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    print(f"Exited with code: {main()}")
