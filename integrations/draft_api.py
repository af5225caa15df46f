"""HTTP implementation of the draft persistence boundary."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

import config
from core.errors import DraftStoreError
from state.draft_store import StoredDraft

logger = logging.getLogger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, Mapping):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, list):
            message = "; ".join(str(item) for item in message)
        if message:
            return f"HTTP {response.status_code}: {message}"
    return f"HTTP {response.status_code}: {response.reason or 'request failed'}"


class HttpDraftStore:
    """Talk to ``/agencies/{license}/draft-jobs`` on the agency backend.

    Transport failures and non-2xx responses are raised as
    :class:`~core.errors.DraftStoreError`; nothing is retried here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        license_number: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or config.DRAFTS_API_BASE_URL).rstrip("/")
        self._license = license_number or config.AGENCY_LICENSE
        self._token = token or config.DRAFTS_API_TOKEN
        self._timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SECONDS

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, operation: str, suffix: str = "") -> str:
        if not self._license:
            raise DraftStoreError(operation, "Agency license not found")
        return f"{self._base_url}/agencies/{self._license}/draft-jobs{suffix}"

    def _request(
        self,
        operation: str,
        method: str,
        suffix: str = "",
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        url = self._url(operation, suffix)
        try:
            response = requests.request(
                method,
                url,
                json=dict(payload) if payload is not None else None,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s request to %s failed: %s", operation, url, exc)
            raise DraftStoreError(operation, "No response from server") from exc
        if not response.ok:
            message = _error_message(response)
            logger.warning("%s rejected by %s: %s", operation, url, message)
            raise DraftStoreError(operation, message, status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DraftStoreError(operation, "Invalid JSON in response", status_code=response.status_code) from exc

    @staticmethod
    def _as_record(operation: str, body: Any) -> StoredDraft:
        if isinstance(body, Mapping):
            data = body.get("data")
            return dict(data) if isinstance(data, Mapping) else dict(body)
        raise DraftStoreError(operation, "Unexpected response body")

    def create(self, record: Mapping[str, Any], /) -> StoredDraft:
        body = self._request("Create draft job", "POST", payload=record)
        return self._as_record("Create draft job", body)

    def update(self, draft_id: str, partial_record: Mapping[str, Any], /) -> StoredDraft:
        body = self._request("Update draft job", "PATCH", f"/{draft_id}", payload=partial_record)
        return self._as_record("Update draft job", body)

    def delete(self, draft_id: str, /) -> None:
        self._request("Delete draft job", "DELETE", f"/{draft_id}")

    def publish(self, draft_id: str, /) -> StoredDraft:
        body = self._request("Publish draft job", "POST", f"/{draft_id}/publish")
        if body is None:
            return {"id": draft_id, "status": "published"}
        return self._as_record("Publish draft job", body)

    def get(self, draft_id: str) -> StoredDraft:
        body = self._request("Get draft job", "GET", f"/{draft_id}")
        return self._as_record("Get draft job", body)

    def list(self) -> list[StoredDraft]:
        body = self._request("Get draft jobs", "GET")
        if isinstance(body, Mapping):
            body = body.get("data")
        if not isinstance(body, list):
            raise DraftStoreError("Get draft jobs", "Unexpected response body")
        return [dict(item) for item in body if isinstance(item, Mapping)]


__all__ = ["HttpDraftStore"]
