"""
Core configuration settings for the application.
"""
import json
from typing import List, Union
from pydantic import Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase Configuration
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_service_role_key: str = Field(..., description="Supabase service role key")

    # FastAPI Configuration
    api_v1_str: str = Field(default="/api/v1", description="API v1 prefix")
    project_name: str = Field(default="tradedir", description="Project name")
    environment: str = Field(default="dev", description="Environment (dev, staging, production)")
    debug: bool = Field(default=False, description="Debug mode - set True only for local development")

    # CORS Configuration
    allowed_origins: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins"
    )

    # Additional CORS origin patterns (checked dynamically)
    cors_origin_patterns: List[str] = Field(
        default=[
            r"https://.*\.netlify\.app$",  # Netlify preview deployments
        ],
        description="Regex patterns for allowed CORS origins"
    )

    @field_validator('allowed_origins', 'cors_origin_patterns', mode='before')
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse list settings from string (JSON) or list."""
        if isinstance(v, str):
            try:
                # Try to parse as JSON array first
                return json.loads(v)
            except (json.JSONDecodeError, ValueError):
                # If not JSON, split by comma as fallback
                return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @property
    def is_production_environment(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ["production", "prod"]

    # Rate Limiting Configuration
    rate_limit_enabled: bool = Field(default=True, description="Enable slowapi rate limiting")
    directory_rate_limit: str = Field(default="120/minute", description="Public directory requests per IP")

    # Directory Ranking Configuration
    directory_count_all_tiers: bool = Field(
        default=True,
        description="Count every tier group even after the page is full, so totals are stable across pages"
    )
    directory_ranking_rpc_enabled: bool = Field(
        default=False,
        description="Try the dir_ranked_products database function before the tier walk"
    )
    directory_hide_inactive_vendors: bool = Field(
        default=True,
        description="Exclude listings of suspended vendors (vendors.is_active = false)"
    )

    model_config = ConfigDict(
        env_file=".env.dev",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
