"""Configuration management for the save codec tool."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


@dataclass
class ToolConfig:
    """Tool configuration settings."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    compress_level: int = 9
    default_password: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv("SAVE_CODEC_LOG_LEVEL", "INFO"),
            log_file=os.getenv("SAVE_CODEC_LOG_FILE") or None,
            compress_level=int(os.getenv("SAVE_CODEC_COMPRESS_LEVEL", "9")),
            default_password=os.getenv("SAVE_CODEC_PASSWORD") or None,
        )

    def validate(self) -> None:
        """Validate configuration values."""
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")

        if not 0 <= self.compress_level <= 9:
            raise ValueError("compress_level must be between 0 and 9")


# Global configuration instance
config = ToolConfig.from_env()
config.validate()
