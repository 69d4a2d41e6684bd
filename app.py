"""Entry point for the Blitz Discord bot."""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv('.env')

# Configure logging BEFORE importing any modules that use logger
log_level = os.getenv('LOG_LEVEL', 'INFO')
logging.basicConfig(
    level=getattr(logging, log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Import after logging is configured
from blitz.bot import BlitzBot
from blitz.config import BotSettings


async def main(settings: BotSettings) -> None:
    """Run the bot until the connection closes."""
    bot = BlitzBot(
        token=settings.token,
        plugins_dir=settings.plugins_dir,
        guild_id=settings.guild_id,
    )
    async with bot:
        await bot.launch()


if __name__ == "__main__":
    settings = BotSettings.from_env()
    ok, error = settings.validate()
    if not ok:
        logger.error(f"Invalid settings: {error}")
        sys.exit(1)

    logger.info("Starting Blitz bot")
    logger.info(f"Plugins directory: {settings.plugins_dir}")
    logger.info(f"Command scope: {'guild ' + settings.guild_id if settings.guild_id else 'global'}")

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Shutting down Blitz bot")
