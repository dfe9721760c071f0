"""Package-wide defaults, loaded with pydantic-settings.

Every value can be overridden through an environment variable with the
``DATATABLE_`` prefix, for example::

    DATATABLE_DEFAULT_PAGE_SIZE=25
    DATATABLE_FILTER_DEBOUNCE_MS=150
    DATATABLE_PAGE_SIZE_OPTIONS='[10, 20, 50]'
    DATATABLE_LOG_LEVEL=DEBUG

The options models in :mod:`reflex_datatable.models` read their defaults
from :func:`get_settings`, so overrides apply to every grid built afterwards.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataTableSettings(BaseSettings):
    """Defaults for pagination, filtering and logging.

    Environment prefix: DATATABLE_
    """

    model_config = SettingsConfigDict(
        env_prefix="DATATABLE_",
        extra="ignore",
    )

    default_page_size: int = Field(default=10, ge=1)
    page_size_options: list[int] = Field(default_factory=lambda: [10, 25, 50, 100])
    filter_debounce_ms: int = Field(default=300, ge=0)
    max_visible_pages: int = Field(default=7, ge=5)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: str = "%(name)s - %(levelname)s - %(message)s"

    @field_validator("page_size_options")
    @classmethod
    def _check_page_size_options(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("page_size_options must not be empty")
        if any(size < 1 for size in v):
            raise ValueError("page_size_options must all be >= 1")
        return sorted(set(v))

    @model_validator(mode="after")
    def _default_page_size_is_offered(self) -> "DataTableSettings":
        if self.default_page_size not in self.page_size_options:
            self.page_size_options = sorted({*self.page_size_options, self.default_page_size})
        return self


@lru_cache(maxsize=1)
def get_settings() -> DataTableSettings:
    """Get the global settings instance (cached).

    Call :func:`clear_settings` to pick up changed environment variables.
    """
    return DataTableSettings()


def clear_settings() -> None:
    """Clear the cached settings to force a reload on next access."""
    get_settings.cache_clear()


def reload_settings() -> DataTableSettings:
    """Reload settings from the environment."""
    clear_settings()
    return get_settings()
