"""
REST API client for Northflank addons and addon backups (v1 API).
"""

import logging
from typing import Any, Dict, List, Optional

from google.auth.transport.requests import AuthorizedSession
from google.oauth2.credentials import Credentials

from errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.northflank.com"
API_VERSION = "v1"


class NorthflankRestClient:
    """REST client for the Northflank addon backup endpoints.

    Every call is attempted exactly once. A 404 is reported as ``None``;
    any other non-success response raises ``RuntimeError``.
    """

    def __init__(
        self,
        api_token: str,
        host: str = DEFAULT_HOST,
        timeout_s: int = 60,
    ):
        """
        Initialize the Northflank REST client.

        Args:
            api_token: Northflank API token
            host: API host (scheme included)
            timeout_s: Request timeout in seconds
        """
        self.host = host.rstrip("/")
        self.timeout_s = timeout_s

        # Static bearer token; there is no refresh token to exchange.
        creds = Credentials(token=api_token)
        self.session = AuthorizedSession(creds)

    def _url(self, path: str) -> str:
        """Construct full API URL from path."""
        return f"{self.host}/{API_VERSION}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs):
        """
        Execute a single HTTP request.

        Args:
            method: HTTP method (GET, POST)
            path: API path below the version prefix
            **kwargs: Additional request parameters

        Returns:
            requests.Response

        Raises:
            RuntimeError: If the request could not be sent
        """
        url = self._url(path)
        logger.debug(f"{method.upper()} {url}")
        try:
            if method.upper() == "GET":
                return self.session.get(url, timeout=self.timeout_s, **kwargs)
            if method.upper() == "POST":
                return self.session.post(url, timeout=self.timeout_s, **kwargs)
        except Exception as e:
            raise RuntimeError(f"{method.upper()} {url} failed: {e}") from e
        raise ValueError(f"Unsupported method: {method}")

    def _data(self, resp, action: str, allow_missing: bool = True) -> Optional[Any]:
        """
        Unwrap the ``data`` envelope of a response.

        Returns:
            The payload, or None for a 404 when allow_missing is set

        Raises:
            RuntimeError: On any other non-2xx status or a non-JSON body
        """
        if resp.status_code == 404 and allow_missing:
            logger.debug(f"{action}: not found")
            return None
        if not 200 <= resp.status_code < 300:
            raise RuntimeError(f"{action} failed ({resp.status_code}): {resp.text}")
        try:
            body = resp.json()
        except ValueError as e:
            raise RuntimeError(
                f"{action} returned non-JSON response: {resp.text[:200]}"
            ) from e
        if not isinstance(body, dict):
            return None
        return body.get("data")

    def get_project(self, project_id: str) -> Optional[Dict]:
        """
        Get project details.

        Returns:
            Project details, or None if the project does not exist
        """
        resp = self._request("GET", f"projects/{project_id}")
        return self._data(resp, "Get project")

    def get_addon(self, project_id: str, addon_id: str) -> Optional[Dict]:
        """
        Get addon details including its current status.

        Returns:
            Addon details, or None if the addon does not exist
        """
        resp = self._request("GET", f"projects/{project_id}/addons/{addon_id}")
        return self._data(resp, "Get addon")

    def list_addon_backups(self, project_id: str, addon_id: str) -> List[Dict]:
        """
        List backups of an addon, newest first as returned by the API.

        Raises:
            RuntimeError: If the addon is missing or the API call fails
            NotFoundError: If the response carries no backup list
        """
        resp = self._request(
            "GET", f"projects/{project_id}/addons/{addon_id}/backups"
        )
        data = self._data(resp, "List addon backups", allow_missing=False)
        backups = data.get("backups") if isinstance(data, dict) else None
        if not isinstance(backups, list):
            raise NotFoundError(
                f"List addon backups returned no backup list for {addon_id}: {data!r}"
            )
        return backups

    def get_addon_download_link(
        self, project_id: str, addon_id: str, backup_id: str
    ) -> Optional[Dict]:
        """
        Get a download link for a backup.

        Returns:
            Dictionary with a ``downloadLink`` key, or None if the backup is gone
        """
        resp = self._request(
            "GET",
            f"projects/{project_id}/addons/{addon_id}/backups/{backup_id}/download",
        )
        return self._data(resp, "Get backup download link")

    def import_addon_backup(
        self,
        project_id: str,
        addon_id: str,
        backup_id: str,
        name: str,
        import_url: str,
    ) -> Optional[Dict]:
        """
        Create a backup on an addon by importing from a URL.

        Args:
            project_id: Project ID
            addon_id: Addon receiving the import
            backup_id: Backup the import URL was produced from
            name: Name of the new backup
            import_url: Download link of the source backup

        Returns:
            The created backup (with ``id``), or None if the addon is gone
        """
        logger.debug(f"Importing backup {backup_id} into {addon_id} as {name}")
        resp = self._request(
            "POST",
            f"projects/{project_id}/addons/{addon_id}/backups/import",
            json={"name": name, "importUrl": import_url},
        )
        return self._data(resp, "Import addon backup")

    def get_addon_backup(
        self, project_id: str, addon_id: str, backup_id: str
    ) -> Optional[Dict]:
        """
        Get details of a single backup including its status.

        Returns:
            Backup details, or None if the backup does not exist
        """
        resp = self._request(
            "GET", f"projects/{project_id}/addons/{addon_id}/backups/{backup_id}"
        )
        return self._data(resp, "Get addon backup")

    def restore_addon_backup(
        self, project_id: str, addon_id: str, backup_id: str
    ) -> Dict:
        """
        Request a restore of a backup onto its addon.

        Returns:
            Acknowledgement payload (may be empty)

        Raises:
            RuntimeError: If the API call fails
        """
        resp = self._request(
            "POST",
            f"projects/{project_id}/addons/{addon_id}/backups/{backup_id}/restore",
            json={},
        )
        return self._data(resp, "Restore addon backup", allow_missing=False) or {}
