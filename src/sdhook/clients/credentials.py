"""
Credential helpers for the API clients.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

import google.auth
from google.auth import compute_engine
from google.auth.compute_engine import _metadata
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, TransportError
from google.auth.transport import requests as google_requests
from google.oauth2 import service_account

from ..exceptions import InvalidCredentials

# OAuth2 scopes required for Cloud Logging and Error Reporting.
REQUIRED_SCOPES = ("https://www.googleapis.com/auth/cloud-platform",)


def service_account_credentials(
    path: Optional[str] = None,
    info: Optional[Mapping[str, Any]] = None,
) -> Tuple[Credentials, str]:
    """Load service account credentials from a JSON key file or parsed key.

    Service account keys can be downloaded from
    https://console.cloud.google.com/iam-admin/serviceaccounts/

    Returns:
        The credentials and the key's project ID

    Raises:
        InvalidCredentials: If the key cannot be read or has no project_id
    """
    if (path is None) == (info is None):
        raise ValueError("exactly one of path or info is required")

    source = path or "service account info"
    try:
        if path is not None:
            credentials = service_account.Credentials.from_service_account_file(path, scopes=REQUIRED_SCOPES)
        else:
            credentials = service_account.Credentials.from_service_account_info(dict(info), scopes=REQUIRED_SCOPES)
    except (OSError, ValueError) as exc:
        raise InvalidCredentials(source=source, reason=str(exc)) from exc

    if not credentials.project_id:
        raise InvalidCredentials(source=source, reason="google service account credentials missing project_id")
    return credentials, credentials.project_id


def default_credentials() -> Tuple[Credentials, Optional[str]]:
    """Application default credentials and the project they resolve to."""
    try:
        credentials, project_id = google.auth.default(scopes=REQUIRED_SCOPES)
    except DefaultCredentialsError as exc:
        raise InvalidCredentials(source="application default credentials", reason=str(exc)) from exc
    return credentials, project_id


def compute_credentials(service_account_email: str = "default", *, request: Any = None) -> Credentials:
    """Credentials of a Compute Engine service account, fetched from the metadata server.

    Scopes cannot be added to an existing instance, so the service account's
    scopes are checked here rather than on the first write.

    Raises:
        InvalidCredentials: If the metadata server is unreachable or the
            account lacks the cloud-platform scope
    """
    source = f"compute metadata ({service_account_email})"
    request = request or google_requests.Request()
    try:
        info = _metadata.get_service_account_info(request, service_account=service_account_email)
    except TransportError as exc:
        raise InvalidCredentials(source=source, reason=str(exc)) from exc

    scopes = info.get("scopes", [])
    if isinstance(scopes, str):
        scopes = scopes.split()
    for scope in REQUIRED_SCOPES:
        if scope not in scopes:
            raise InvalidCredentials(source=source, reason=f"missing required scope {scope} in compute metadata")
    return compute_engine.Credentials(service_account_email=service_account_email)
