"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic_settings import BaseSettings

from batchimport.models.job import BatchError, JobDefinition


class RegistryConfig(BaseSettings):
    """Component registry configuration."""

    model_config = {"env_prefix": "BATCHIMPORT_REGISTRY_"}

    register_default_validator: bool = True


class BatchSettings(BaseSettings):
    """Root settings: logging plus the defaults stamped onto new jobs."""

    model_config = {"env_prefix": "BATCHIMPORT_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_json: bool | None = None  # None: JSON when stdout is not a tty

    reader_type: str = "csv"
    validator_type: str = "default"
    max_errors: int = 10
    duplicate_handling: BatchError = BatchError.SKIP
    error_handling: BatchError = BatchError.SKIP

    registry: RegistryConfig = RegistryConfig()

    def new_job(self, **kwargs: Any) -> JobDefinition:
        """Create a job definition carrying the configured policy defaults."""
        values: dict[str, Any] = {
            "reader_type": self.reader_type,
            "validator_type": self.validator_type,
            "max_errors": self.max_errors,
            "duplicate_handling": self.duplicate_handling,
            "error_handling": self.error_handling,
        }
        values.update(kwargs)
        return JobDefinition(**values)
