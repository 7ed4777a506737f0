"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator

from core.schema import PartyCodes


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Partnership Ledger Analyzer", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Party short codes as they appear in the "Who" column
    party_a_code: str = Field(default="NB", alias="PARTY_A_CODE")
    party_b_code: str = Field(default="NS", alias="PARTY_B_CODE")
    shared_code: str = Field(default="C", alias="SHARED_CODE")
    unspecified_label: str = Field(default="Unspecified", alias="UNSPECIFIED_LABEL")

    # Processing
    settlement_epsilon: Decimal = Field(default=Decimal("0.01"), alias="SETTLEMENT_EPSILON")
    currency_symbol: str = Field(default="₹", alias="CURRENCY_SYMBOL")
    csv_encoding: str = Field(default="utf-8-sig", alias="CSV_ENCODING")

    # Uploads
    max_upload_mb: int = Field(default=10, alias="MAX_UPLOAD_MB")
    temp_storage_path: str = Field(default="files", alias="STORAGE_PATH")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("settlement_epsilon")
    @classmethod
    def validate_epsilon(cls, v):
        if v < 0:
            raise ValueError("Settlement epsilon cannot be negative")
        return v

    @field_validator("max_upload_mb")
    @classmethod
    def validate_upload_limit(cls, v):
        if v < 1:
            raise ValueError("Max upload size must be at least 1 MB")
        return v

    @field_validator("party_a_code", "party_b_code", "shared_code")
    @classmethod
    def validate_code(cls, v):
        """Party codes are compared trimmed and uppercased."""
        v_clean = v.strip().upper()
        if not v_clean:
            raise ValueError("Party codes cannot be empty")
        return v_clean

    @model_validator(mode="after")
    def validate_distinct_codes(self):
        """Each party needs its own code or rows could not be told apart."""
        codes = [self.party_a_code, self.party_b_code, self.shared_code]
        if len(set(codes)) != len(codes):
            raise ValueError(f"Party codes must be distinct, got: {codes}")
        return self

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def party_codes(self) -> PartyCodes:
        """Build the party code table used by the engine and the report."""
        return PartyCodes(
            party_a=self.party_a_code,
            party_b=self.party_b_code,
            shared=self.shared_code,
            unspecified=self.unspecified_label,
        )

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.temp_storage_path).mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.ensure_directories()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
