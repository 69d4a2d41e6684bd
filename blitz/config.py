"""Startup settings for the bot, read from the environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from blitz.constants import default_plugins_dir

logger = logging.getLogger(__name__)


@dataclass
class BotSettings:
    """Startup parameters consumed by BlitzBot.

    Secrets are never hard-coded; the token comes from BLITZ_TOKEN or DISCORD_TOKEN.
    """

    token: str
    plugins_dir: Path
    guild_id: Optional[str] = None  # Deployment scope; None registers commands globally
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BotSettings":
        """Build settings from environment variables (call load_dotenv first)."""
        token = os.getenv("BLITZ_TOKEN") or os.getenv("DISCORD_TOKEN", "")
        guild_id = os.getenv("BLITZ_GUILD_ID", "").strip() or None
        settings = cls(
            token=token,
            plugins_dir=default_plugins_dir(),
            guild_id=guild_id,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        logger.debug(
            f"Loaded settings: plugins_dir={settings.plugins_dir}, "
            f"guild_id={settings.guild_id or 'global'}"
        )
        return settings

    def validate(self) -> tuple[bool, Optional[str]]:
        """
        Validate settings.

        Returns:
            (is_valid, error_message)
        """
        if not self.token:
            return False, "Bot token not found (env: BLITZ_TOKEN or DISCORD_TOKEN)"

        if self.guild_id is not None and not self.guild_id.isdigit():
            return False, f"Invalid guild id (expected a numeric snowflake): {self.guild_id}"

        return True, None
