"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

PROVIDER_NAME = "TheTVDB"
DEFAULT_BASE_URL = "https://thetvdb.com"


class SyncConfig(BaseModel):
    """A validated configuration model for the application."""

    # Provider & API
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    enable_internet_providers: bool = True
    disabled_fetchers: list[str] = Field(default_factory=list)

    # Paths
    data_path: str = ""
    library_file: str = ""
    preferred_language: str = "en"

    # Sync behaviour
    max_workers: int = 1
    update_interval_hours: int = 24
    request_timeout: int = 60
    requests_per_second: float = 4.0

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures the provider URL is an absolute http(s) URL without trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {v}")
        return v.rstrip("/")

    @field_validator("preferred_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        if not v:
            raise ValueError("preferred_language cannot be empty.")
        return v.lower()

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 16:
            raise ValueError("Max workers must be between 1 and 16.")
        return v

    @field_validator("update_interval_hours")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("update_interval_hours must be at least 1.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("request_timeout must be at least 1 second.")
        return v

    @field_validator("requests_per_second")
    @classmethod
    def validate_rate(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("requests_per_second must be positive.")
        return v

    @model_validator(mode="after")
    def validate_api_config(self) -> "SyncConfig":
        """An API key is only needed when the provider can actually be reached."""
        if self.provider_enabled and not self.api_key:
            raise ValueError(
                "API settings are incomplete. 'api_key' is required while "
                f"{PROVIDER_NAME} is enabled."
            )
        return self

    @property
    def provider_enabled(self) -> bool:
        """False when internet providers are off or TheTVDB is on the disabled list."""
        if not self.enable_internet_providers:
            return False
        disabled = {name.casefold() for name in self.disabled_fetchers}
        return PROVIDER_NAME.casefold() not in disabled

    @property
    def series_data_path(self) -> Path:
        if self.data_path:
            return Path(self.data_path).expanduser()
        return Path(self.config_path) / "tvdb"

    @property
    def library_path(self) -> Path:
        if self.library_file:
            return Path(self.library_file).expanduser()
        return Path(self.config_path) / "library.json"

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
