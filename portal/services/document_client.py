"""
Remote Document Client

Maps the portal snapshot to a single named file inside a private GitHub gist.

Architecture:
- save/load decide *which* gist to use (cached id, create, or discovery)
- create/update/fetch are the hard remote calls and raise on failure
- discover is best-effort and reports every failure as "not found"
"""
import json
import logging
from typing import Any, Dict, Optional

import httpx

from portal.core.config import RemoteSettings, settings
from portal.core.exceptions import AppException, AuthError, ConfigError, RemoteError
from portal.schemas.snapshot import PortalSnapshot
from portal.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class DocumentClient:
    def __init__(
        self,
        credentials: CredentialStore,
        http_client: Optional[httpx.AsyncClient] = None,
        remote: RemoteSettings = settings.remote,
    ):
        self.credentials = credentials
        self.remote = remote
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=remote.timeout_seconds)

    async def __aenter__(self) -> "DocumentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        token = self.credentials.get_token()
        if not token:
            raise AuthError("No GitHub token stored; log in first")
        return {
            "Authorization": f"token {token}",
            "Accept": self.remote.accept_header,
        }

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        headers = self._headers()
        try:
            response = await self.http.request(
                method,
                f"{self.remote.api_url}{path}",
                headers=headers,
                json=json_body,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Gist request failed method={method} path={path} error={e}")
            raise RemoteError(f"Could not reach document store: {e}") from e
        logger.info(f"Gist request method={method} path={path} status={response.status_code}")
        return response

    def _files_payload(self, snapshot: PortalSnapshot) -> Dict[str, Any]:
        return {self.remote.gist_filename: {"content": snapshot.to_json()}}

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def create(self, snapshot: PortalSnapshot) -> str:
        """Create a private gist holding the snapshot and cache its id."""
        response = await self._request(
            "POST",
            "/gists",
            json_body={
                "description": self.remote.gist_description,
                "public": False,
                "files": self._files_payload(snapshot),
            },
        )
        if not response.is_success:
            raise RemoteError("Failed to create Gist", upstream_status=response.status_code)

        try:
            document_id = response.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteError("Gist created but no id was returned") from e

        self.credentials.set_document_id(document_id)
        logger.info(f"Created gist {document_id}")
        return document_id

    async def update(self, snapshot: PortalSnapshot) -> None:
        document_id = self.credentials.get_document_id()
        if not document_id:
            raise ConfigError("No document identifier found")

        response = await self._request(
            "PATCH",
            f"/gists/{document_id}",
            json_body={"files": self._files_payload(snapshot)},
        )
        if not response.is_success:
            raise RemoteError("Failed to update Gist", upstream_status=response.status_code)

    async def fetch(self) -> Optional[PortalSnapshot]:
        """Read the cached gist. A missing id, a 404 or a missing file all mean None."""
        document_id = self.credentials.get_document_id()
        if not document_id:
            return None

        response = await self._request("GET", f"/gists/{document_id}")
        if response.status_code == 404:
            logger.info(f"Gist {document_id} no longer exists")
            return None
        if not response.is_success:
            raise RemoteError("Failed to fetch Gist", upstream_status=response.status_code)

        try:
            files = response.json().get("files") or {}
        except (ValueError, AttributeError) as e:
            raise RemoteError("Document store returned a malformed gist") from e

        entry = files.get(self.remote.gist_filename)
        if not entry:
            return None

        try:
            return PortalSnapshot.model_validate(json.loads(entry.get("content") or ""))
        except ValueError as e:
            raise RemoteError(f"Stored portal data could not be parsed: {e}") from e

    async def discover(self) -> Optional[str]:
        """Find an existing gist containing the portal file; never raises."""
        try:
            response = await self._request("GET", "/gists", params={"per_page": 100})
            if not response.is_success:
                return None
            gists = response.json()
        except (AppException, ValueError) as e:
            logger.info(f"Gist discovery skipped: {e}")
            return None

        if not isinstance(gists, list):
            return None

        for gist in gists:
            files = gist.get("files") if isinstance(gist, dict) else None
            if files and self.remote.gist_filename in files and gist.get("id"):
                document_id = gist["id"]
                self.credentials.set_document_id(document_id)
                logger.info(f"Discovered existing gist {document_id}")
                return document_id
        return None

    # ------------------------------------------------------------------
    # High-level API
    # ------------------------------------------------------------------

    async def save(self, snapshot: PortalSnapshot) -> str:
        document_id = self.credentials.get_document_id()
        if not document_id:
            return await self.create(snapshot)
        await self.update(snapshot)
        return document_id

    async def load(self) -> Optional[PortalSnapshot]:
        document_id = self.credentials.get_document_id()
        if not document_id:
            document_id = await self.discover()
        if not document_id:
            return None
        return await self.fetch()
