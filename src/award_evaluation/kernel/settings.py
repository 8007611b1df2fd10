"""
Service settings - runtime parameters for the award evaluation service

Reference vocabularies (valid schemes and scales) are deliberately NOT here:
they arrive with each creation request, so two requests can validate against
different vocabularies without touching process state.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

ENV_PREFIX = "AWARD_EVALUATION_"


class ServiceSettings(BaseModel):
    """
    Runtime settings for storage, logging and metrics

    Defaults suit local development. Production deployments override them
    through AWARD_EVALUATION_* environment variables (see from_env).
    """

    sqlite_path: Path = Field(
        default=Path("awards.db"),
        description="SQLite database holding awards and award periods",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )

    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON (production) instead of console output",
    )

    metrics_port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="Port for the Prometheus metrics endpoint (None = disabled)",
    )

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """
        Build settings from the environment

        Reads AWARD_EVALUATION_SQLITE_PATH, AWARD_EVALUATION_LOG_LEVEL,
        AWARD_EVALUATION_JSON_LOGS and AWARD_EVALUATION_METRICS_PORT. When JSON_LOGS is unset,
        ENVIRONMENT=production switches JSON logs on.
        """
        values: dict[str, object] = {}
        for field_name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None and raw != "":
                values[field_name] = raw

        if "json_logs" not in values:
            values["json_logs"] = (
                os.getenv("ENVIRONMENT", "development").lower() == "production"
            )

        return cls.model_validate(values)
