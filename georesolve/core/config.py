"""Application configuration."""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_PROVIDERS = (
    "google_findplace",
    "geoapify",
    "mapbox",
    "google_text",
    "nominatim",
)


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "Georesolve"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Provider credentials (a missing key drops the provider from the chain)
    GOOGLE_MAPS_API_KEY: str | None = None
    GEOAPIFY_API_KEY: str | None = None
    MAPBOX_TOKEN: str | None = None

    # Provider endpoints
    GOOGLE_PLACES_BASE_URL: str = "https://maps.googleapis.com/maps/api/place"
    GEOAPIFY_BASE_URL: str = "https://api.geoapify.com/v1/geocode/search"
    MAPBOX_BASE_URL: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org/search"
    NOMINATIM_ENABLED: bool = True
    NOMINATIM_USER_AGENT: str = "georesolve/0.1 (contact: owner@example.com)"
    NOMINATIM_VIEWBOX_PAD: float = Field(default=0.3, gt=0, le=5)

    # Resolution Settings
    GEOCODING_PROVIDERS: list[str] = Field(
        default=list(KNOWN_PROVIDERS),
        description="Geocoding providers in priority order",
    )
    GEOCODING_TIMEOUT: float = Field(default=8.0, gt=0)  # per-adapter deadline
    GEOCODING_COUNTRY_CODE: str = "us"
    GEOCODING_MAX_CANDIDATES: int = Field(default=8, ge=1)
    GEOCODING_PROVIDER_CANDIDATE_LIMIT: int = Field(default=8, ge=1)
    GEOCODING_REGION_MATCH_WEIGHT: float = Field(default=30.0, ge=0)
    GEOCODING_CITY_MATCH_WEIGHT: float = Field(default=20.0, ge=0)
    GEOCODING_QUERY_SPECIFIC_LENGTH: int = Field(default=24, ge=0)
    GEOCODING_BIAS_RADIUS_M: int = Field(default=25000, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @field_validator("GEOCODING_PROVIDERS")
    @classmethod
    def validate_providers(cls, value: list[str]) -> list[str]:
        """Normalize provider names and reject unknown ones."""
        names = [name.strip().lower() for name in value if name.strip()]
        unknown = [name for name in names if name not in KNOWN_PROVIDERS]
        if unknown:
            raise ValueError(
                f"Unknown geocoding providers: {', '.join(unknown)}. "
                f"Supported providers: {', '.join(KNOWN_PROVIDERS)}"
            )
        # Keep first occurrence, a provider is tried at most once per request
        return list(dict.fromkeys(names))

    @field_validator("GEOCODING_COUNTRY_CODE")
    @classmethod
    def lower_country_code(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:8000",
                "http://localhost:3000",
            ]
        return self


# Create settings instance
settings = Settings()
