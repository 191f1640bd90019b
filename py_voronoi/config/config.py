"""Application settings pulled from environment variables and ``.env``."""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings. Environment variables use the ``VORONOI_`` prefix."""

    model_config = SettingsConfigDict(
        env_prefix="VORONOI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Diagram defaults (CLI flags override these)
    default_width: int = Field(default=800, description="Default grid width in cells")
    default_height: int = Field(default=800, description="Default grid height in cells")
    default_site_count: int = Field(default=50, ge=0, description="Default number of sites")
    default_seed: int = Field(default=42, ge=0, le=2**64 - 1, description="Default RNG seed")
    max_dimension: int = Field(default=20000, description="Largest accepted grid width or height")

    # Output
    output_prefix: str = Field(default="output_voronoi_", description="Output filename prefix")
    output_format: str = Field(default="png", description="Output image format / extension")

    # Performance Configuration
    workers: Optional[int] = Field(default=None, ge=1, description="Rasterizer threads (None = CPU count)")
    rows_per_task: Optional[int] = Field(default=None, ge=1, description="Grid rows per rasterizer task")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: Literal["plain", "json"] = Field(default="plain", description="Logging format (plain or json)")

    @field_validator("default_width", "default_height", "max_dimension")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def get_settings() -> Settings:
    """Read settings fresh from the environment."""
    return Settings()

