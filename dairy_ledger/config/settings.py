"""
Configuration Management for Dairy Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a working default, so the app runs with no .env at all;
environment variables only rebrand the statements or move the backups.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dairy_ledger.models.entities import MilkType, default_prices


class BusinessSettings(BaseSettings):
    """Business identity and defaults for new customers."""

    model_config = SettingsConfigDict(
        env_prefix="DAIRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    business_name: str = Field(
        default="Kharjul Milk Service",
        description="Printed in the statement header"
    )
    currency_label: str = Field(
        default="Rs.",
        description="Currency prefix used on statements"
    )

    # Attribution footer, printed as three runs with the middle one in bold
    footer_prefix: str = Field(default="Developed By :- ")
    footer_author: str = Field(default="Hiralal Nandwani")
    footer_suffix: str = Field(
        default=" - 8149802925 (Subscription starts just from Rs. 1/- perday)"
    )

    # New customer defaults
    default_prices: dict[MilkType, Decimal] = Field(
        default_factory=default_prices,
        description="Price per litre offered to new customers"
    )
    default_quantity: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        description="Litres per day for new customers"
    )

    @property
    def footer_text(self) -> str:
        return f"{self.footer_prefix}{self.footer_author}{self.footer_suffix}"


class StatementSettings(BaseSettings):
    """Statement layout settings."""

    model_config = SettingsConfigDict(
        env_prefix="STATEMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    first_page_rows: int = Field(
        default=26,
        ge=1,
        le=200,
        description="Transaction rows that fit under the header block"
    )
    rows_per_page: int = Field(
        default=41,
        ge=1,
        le=200,
        description="Transaction rows on every following page"
    )
    accent_color: str = Field(
        default="#2EB872",
        description="Header band and payment rows"
    )
    owed_color: str = Field(
        default="#FF0000",
        description="Net receivable when the customer owes"
    )

    @field_validator('accent_color', 'owed_color')
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        v = v.strip()
        if len(v) != 7 or not v.startswith("#"):
            raise ValueError(f"Expected a colour like '#2EB872', got '{v}'")
        int(v[1:], 16)
        return v.upper()


class StorageSettings(BaseSettings):
    """Backup file settings."""

    model_config = SettingsConfigDict(
        env_prefix="BACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backup_dir: str = Field(
        default="data/backups",
        description="Directory for JSON backup snapshots"
    )
    filename_prefix: str = Field(
        default="milk_daily_backup_",
        description="Backup files are named <prefix><YYYY-MM-DD>.json"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    recent_activity_limit: int = Field(
        default=3,
        ge=1,
        le=50,
        description="Delivery logs shown under 'recent activity' on the dashboard"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def business(self) -> BusinessSettings:
        return BusinessSettings()

    @property
    def statement(self) -> StatementSettings:
        return StatementSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a '<name>_error'
    entry for each section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("business", "statement", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
