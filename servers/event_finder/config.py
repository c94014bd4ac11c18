"""Configuration and logging setup for the event finder."""

import logging
from functools import lru_cache
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from the environment (and .env)."""

    # Provider credentials
    ticketmaster_api_key: str = Field(default="", description="Ticketmaster Discovery API key")
    eventbrite_api_token: str = Field(default="", description="Eventbrite private token")
    eventbrite_organization_ids: str = Field(
        default="", description="Comma-separated Eventbrite organization ids to search"
    )
    seatgeek_client_id: str = Field(default="", description="SeatGeek client id")
    bandsintown_app_id: str = Field(default="", description="Bandsintown app id")
    bandsintown_artists: str = Field(
        default="", description="Comma-separated artists to look up on Bandsintown"
    )
    yelp_api_key: str = Field(default="", description="Yelp Fusion API key")
    meetup_access_token: str = Field(default="", description="Meetup OAuth access token")

    # Geocoding
    geocoder_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    geocoder_user_agent: str = Field(default="EventFinderApp/1.0")

    # Aggregation
    max_results_per_provider: int = Field(default=50, gt=0)
    enable_deduplication: bool = True
    parallel_requests: bool = True
    provider_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def eventbrite_organization_id_list(self) -> list[str]:
        return _split_csv(self.eventbrite_organization_ids)

    @property
    def bandsintown_artist_list(self) -> list[str]:
        return _split_csv(self.bandsintown_artists)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog level and rendering."""
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    # Quiet transport loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
