"""
Builds a ``StackdriverHook`` from ``HookSettings``.

Delivery mode:
    - agent: ``SDHOOK_AGENT_HOST`` is set
    - api: a service account key (``SDHOOK_CREDENTIALS_FILE``) or the
      application default credentials
"""

from __future__ import annotations

from typing import Any, Optional

from .clients import (
    FluentAgentChannel,
    GoogleErrorReporter,
    GoogleLogWriter,
    default_credentials,
    service_account_credentials,
)
from .config import HookSettings, settings as default_settings
from .hook import StackdriverHook
from .logging import get_logger
from .types import MonitoredResource, ResourceType

logger = get_logger("sdhook.factory")


def _resource(config: HookSettings, project_id: str) -> Optional[MonitoredResource]:
    if config.resource_type:
        return MonitoredResource(type=config.resource_type, labels=dict(config.resource_labels))
    if project_id:
        return MonitoredResource.of(ResourceType.PROJECT, project_id=project_id)
    return None


def build_hook(config: Optional[HookSettings] = None, **overrides: Any) -> StackdriverHook:
    """Create a hook from settings; keyword arguments override the derived options.

    Raises:
        ConfigurationError: If credentials or required options are missing
    """
    config = config or default_settings.hook
    options: dict[str, Any] = {
        "levels": config.level_set,
        "project_id": config.project_id,
        "log_name": config.log_name,
        "error_reporting_log_name": config.error_reporting_log_name,
        "labels": dict(config.labels),
        "partial_success": config.partial_success,
        "error_reporting_service_name": config.error_reporting_service_name,
        "log_errors_in_regular_log": config.log_errors_in_regular_log,
        "max_workers": config.max_workers,
        "max_pending": config.max_pending,
    }

    context: dict[str, Any]
    if config.agent_mode:
        options["agent_channel"] = FluentAgentChannel.connect(
            config.agent_host, config.agent_port, timeout=config.agent_timeout
        )
        options["resource"] = _resource(config, config.project_id)
        context = {"mode": "agent", "host": config.agent_host, "port": config.agent_port}
    elif not any(k in overrides for k in ("log_writer", "agent_channel", "backend")):
        if config.credentials_file:
            credentials, key_project = service_account_credentials(path=config.credentials_file)
        else:
            credentials, key_project = default_credentials()
        project_id = config.project_id or key_project or ""
        options["project_id"] = project_id
        options["resource"] = _resource(config, project_id)
        options["log_writer"] = GoogleLogWriter.from_credentials(credentials)
        if config.error_reporting_service_name:
            options["error_reporter"] = GoogleErrorReporter.from_credentials(credentials)
        context = {"mode": "api", "project_id": project_id}
    else:
        options["resource"] = _resource(config, config.project_id)
        context = {"mode": "custom"}

    options.update(overrides)
    hook = StackdriverHook(**options)
    logger.info("hook_configured", **context)
    if config.wait_timeout is not None:
        hook.register_exit_handler(config.wait_timeout)
    return hook
