"""
Trade Directory CLI Configuration

Handles environment variables and configuration for Supabase access.
Configuration is loaded from environment variables or a .env file.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, List

from dotenv import load_dotenv

# Load environment from .env file if present
env_file = Path.home() / ".dircli" / ".env"
if env_file.exists():
    load_dotenv(env_file)
else:
    load_dotenv()  # Try current directory


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SupabaseConfig:
    """Supabase configuration for database access."""
    url: str
    service_role_key: str

    @classmethod
    def from_env(cls) -> "SupabaseConfig":
        """Load Supabase config from environment variables."""
        return cls(
            url=os.environ.get("SUPABASE_URL", ""),
            service_role_key=os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
        )


@dataclass
class DirectoryConfig:
    """Ranking behaviour, mirroring the API's DIRECTORY_* settings."""
    count_all_tiers: bool
    hide_inactive_vendors: bool

    @classmethod
    def from_env(cls) -> "DirectoryConfig":
        return cls(
            count_all_tiers=_env_flag("DIRECTORY_COUNT_ALL_TIERS", True),
            hide_inactive_vendors=_env_flag("DIRECTORY_HIDE_INACTIVE_VENDORS", True),
        )


@dataclass
class Config:
    """Main CLI configuration."""
    supabase: SupabaseConfig
    directory: DirectoryConfig

    @classmethod
    def load(cls) -> "Config":
        """Load all configuration from environment."""
        return cls(
            supabase=SupabaseConfig.from_env(),
            directory=DirectoryConfig.from_env(),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of missing fields.

        Returns:
            List of missing/invalid configuration items
        """
        missing = []

        if not self.supabase.url:
            missing.append("SUPABASE_URL")
        if not self.supabase.service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")

        return missing


# Singleton config instance
_config: Optional[Config] = None

def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def get_supabase_client():
    """Create a Supabase client with service role key."""
    from supabase import create_client
    config = get_config()
    return create_client(config.supabase.url, config.supabase.service_role_key)
