"""
Hook Configuration.

Environment-driven counterpart of the ``StackdriverHook`` keyword arguments.
Mapping values (``labels``, ``resource_labels``) are read from the
environment as JSON objects.
"""

from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..levels import ALL_LEVELS, Level


class HookSettings(BaseSettings):
    """Cloud Logging hook configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SDHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    levels: str = Field(
        default=",".join(level.name.lower() for level in ALL_LEVELS),
        description="Comma-separated levels the hook is applied to",
    )
    project_id: str = Field(default="", description="Google Cloud project ID")
    resource_type: str = Field(default="", description="Monitored resource type (e.g. global, gce_instance)")
    resource_labels: Dict[str, str] = Field(default_factory=dict, description="Monitored resource labels")
    log_name: str = Field(default="", description="Log name (qualified with the project when set)")
    error_reporting_log_name: str = Field(default="", description="Log name for error events")
    labels: Dict[str, str] = Field(default_factory=dict, description="Labels sent with every entry")
    partial_success: bool = Field(default=False, description="Allow partial writes of log entries")
    error_reporting_service_name: str = Field(default="", description="Error Reporting service name")
    log_errors_in_regular_log: bool = Field(
        default=False,
        description="Keep error events in the regular log when no service name is set",
    )
    credentials_file: Optional[str] = Field(default=None, description="Service account JSON file")
    agent_host: Optional[str] = Field(default=None, description="Logging agent host; enables agent mode")
    agent_port: int = Field(default=24224, description="Logging agent forward port")
    agent_timeout: float = Field(default=3.0, description="Logging agent socket timeout in seconds")
    max_workers: Optional[int] = Field(default=None, description="Delivery worker threads")
    max_pending: Optional[int] = Field(default=None, description="Bound on outstanding deliveries")
    wait_timeout: Optional[float] = Field(default=None, description="Drain timeout used on flush and exit")

    @field_validator("levels")
    @classmethod
    def _check_levels(cls, value: str) -> str:
        for name in value.split(","):
            if name.strip():
                Level.parse(name)
        return value

    @property
    def level_set(self) -> tuple[Level, ...]:
        """Parsed ``levels`` in ascending order."""
        parsed = {Level.parse(name) for name in self.levels.split(",") if name.strip()}
        return tuple(sorted(parsed))

    @property
    def agent_mode(self) -> bool:
        return bool(self.agent_host)
