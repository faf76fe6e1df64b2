"""Thin Jira Cloud REST client used by the API layer."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from services.errors import AuthFailure, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass
class FetchResult:
    """Outcome of a best-effort Jira call.

    ``ok`` is True only for a 2xx answer with a decodable JSON body.
    ``status`` is None when the request never got an answer.
    """

    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None


def _is_success(response) -> bool:
    return 200 <= response.status_code < 300


class JiraClient:
    """Authenticated access to one Jira site on behalf of one user."""

    def __init__(self, base_url: str, email: str, api_token: str,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.api_token = api_token
        self.timeout = timeout

    @classmethod
    def from_session(cls, record: dict, timeout: float = DEFAULT_TIMEOUT):
        """Build a client from a stored session record."""
        return cls(record["baseUrl"], record["email"], record["apiToken"],
                   timeout=timeout)

    def _request(self, endpoint: str, params: Optional[dict] = None):
        """Make authenticated request to Jira API."""
        return requests.get(
            f"{self.base_url}{endpoint}",
            auth=(self.email, self.api_token),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            params=params,
            timeout=self.timeout
        )

    def get(self, endpoint: str, params: Optional[dict] = None):
        """GET a JSON resource, raising UpstreamError on non-2xx."""
        response = self._request(endpoint, params)
        if not _is_success(response):
            raise UpstreamError(
                f"Jira API error: {response.status_code}",
                details=response.text or None,
                status_code=response.status_code
            )
        return response.json()

    def fetch(self, endpoint: str, params: Optional[dict] = None) -> FetchResult:
        """GET a JSON resource without raising.

        Used for calls whose failure only means "use another source".
        """
        try:
            response = self._request(endpoint, params)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Jira request {endpoint} failed: {e}")
            return FetchResult(ok=False, error=str(e))

        if not _is_success(response):
            logger.warning(f"Jira request {endpoint} returned {response.status_code}")
            return FetchResult(ok=False, status=response.status_code,
                               error=response.text or None)

        try:
            data = response.json()
        except ValueError as e:
            return FetchResult(ok=False, status=response.status_code, error=str(e))

        return FetchResult(ok=True, status=response.status_code, data=data)

    def login(self) -> dict:
        """Validate the credentials against /myself.

        Returns:
            Dict with accountId and displayName of the authenticated user.

        Raises:
            AuthFailure: Jira did not accept the credentials.
        """
        response = self._request("/rest/api/3/myself")
        if not _is_success(response):
            raise AuthFailure("Invalid Jira credentials", details=response.text or None)

        user = response.json()
        return {
            "accountId": user.get("accountId"),
            "displayName": user.get("displayName"),
        }

    def paginate(self, endpoint: str, params: Optional[dict] = None,
                 page_size: int = 50, max_pages: Optional[int] = None,
                 max_offset: Optional[int] = None) -> list:
        """Collect ``values`` across startAt/maxResults pages.

        Stops on an empty page, ``isLast``, or once the offset reaches
        ``total``. ``max_pages`` and ``max_offset`` bound the loop even if
        Jira keeps claiming there is more.
        """
        collected = []
        start_at = 0
        page = 0

        while max_pages is None or page < max_pages:
            page += 1
            query = dict(params or {})
            query.update({"startAt": start_at, "maxResults": page_size})
            data = self.get(endpoint, params=query)

            values = data.get("values") or []
            collected.extend(values)

            step = data.get("maxResults") or len(values) or page_size
            total = data.get("total")
            if not isinstance(total, int) or isinstance(total, bool):
                total = None

            if data.get("isLast") is True or not values:
                break
            if total is not None and start_at + step >= total:
                break

            start_at += step
            if max_offset is not None and start_at > max_offset:
                logger.warning(f"Stopped paginating {endpoint} at offset {start_at}")
                break

        return collected
