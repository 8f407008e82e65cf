"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="acme-ops", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/acme",
        description="Database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Cache ==========
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL for the shared cache; in-memory cache when unset"
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        description="TTL for cached ticket lists and report status",
        ge=1
    )

    # ========== Reports ==========
    reports_tmp_dir: Path = Field(
        default=Path("tmp"),
        description="Staging directory scanned for transaction CSV files"
    )
    reports_output_dir: Path = Field(
        default=Path("out"),
        description="Directory receiving generated reports"
    )
    reports_parallel_processing: bool = Field(
        default=True,
        description="Run the three report generators concurrently"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class TicketType(str, Enum):
    """Ticket types accepted by the router."""
    MANAGEMENT_REPORT = "managementReport"
    REGISTRATION_ADDRESS_CHANGE = "registrationAddressChange"
    STRIKE_OFF = "strikeOff"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    OPEN = "open"
    RESOLVED = "resolved"


class TicketCategory(str, Enum):
    """Business category derived from the ticket type."""
    ACCOUNTING = "accounting"
    CORPORATE = "corporate"
    MANAGEMENT = "management"


class UserRole(str, Enum):
    """Company user roles."""
    DIRECTOR = "director"
    ACCOUNTANT = "accountant"
    CORPORATE_SECRETARY = "corporateSecretary"


class ReportType(str, Enum):
    """Reports produced by the pipeline."""
    ACCOUNTS = "accounts"
    YEARLY = "yearly"
    FINANCIAL_STATEMENTS = "fs"


class ReportStatus:
    """Report status strings; FINISHED and ERROR are prefixes."""
    IDLE = "idle"
    STARTING = "starting"
    FINISHED = "finished"
    ERROR = "error"


# ========== Cache keys ==========

TICKETS_CACHE_KEY = "all-tickets"
REPORTS_STATUS_CACHE_KEY = "reports-status"


# ========== Report names ==========

REPORT_TYPES = [r.value for r in ReportType]
