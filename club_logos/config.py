"""Club Logo Pipeline Configuration.

Settings for the Leonardo API, generation parameters, polling policy
and text overlay. Loaded once at startup and passed to every stage.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from club_logos.errors import ConfigError


class PipelineSettings(BaseSettings):
    """Pipeline settings loaded from environment variables / .env."""

    # ==========================================================================
    # Leonardo API
    # ==========================================================================

    LEO_API_KEY: str = ""
    LEO_BASE_URL: str = "https://cloud.leonardo.ai/api/rest/v1"
    LEO_MODEL_ID: str = "b24e16ff-06e3-43eb-8d33-4416c2d75876"  # Lightning XL
    LEO_HTTP_TIMEOUT_SECONDS: float = 60.0

    # ==========================================================================
    # Local files
    # ==========================================================================

    LOGOS_REFERENCE_IMAGE: str = "reference.png"  # clean layout template
    LOGOS_OUTPUT_DIR: str = "output"

    # ==========================================================================
    # Generation parameters
    # ==========================================================================

    LOGOS_INIT_STRENGTH: float = 0.5
    LOGOS_WIDTH: int = 512
    LOGOS_HEIGHT: int = 512
    LOGOS_NUM_IMAGES: int = 1
    LOGOS_PRESET_STYLE: str = "DYNAMIC"
    LOGOS_ALCHEMY: bool = True
    LOGOS_CONTROLNET_PREPROCESSOR_ID: int = 67
    LOGOS_CONTROLNET_STRENGTH_TYPE: str = "High"

    # ==========================================================================
    # Polling / pacing
    # ==========================================================================

    LOGOS_POLL_MAX_ATTEMPTS: int = 10
    LOGOS_POLL_INTERVAL_SECONDS: float = 3.0
    LOGOS_CLUB_DELAY_SECONDS: float = 2.0  # pause between clubs (rate limits)

    # ==========================================================================
    # Text overlay
    # ==========================================================================

    LOGOS_FONT_PATH: str = "DejaVuSans.ttf"
    LOGOS_FONT_SIZE_START: int = 36
    LOGOS_FONT_SIZE_STEP: int = 2
    LOGOS_FONT_SIZE_MIN: int = 18
    LOGOS_TEXT_MAX_WIDTH_RATIO: float = 0.8
    LOGOS_TEXT_TOP_RATIO: float = 0.22

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_pipeline_settings() -> PipelineSettings:
    """Get cached pipeline settings instance."""
    return PipelineSettings()


def load_settings() -> PipelineSettings:
    """Load settings and check the credentials needed for a run.

    Raises:
        ConfigError: If LEO_API_KEY is missing or blank.
    """
    settings = get_pipeline_settings()
    if not settings.LEO_API_KEY.strip():
        raise ConfigError("Missing LEO_API_KEY in environment or .env")
    return settings
