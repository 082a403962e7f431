# flatbot/backend.py
import requests
from typing import Any, Dict, List

from .state import Filters, Listing

SEARCH_TIMEOUT = 20
STATE_TIMEOUT = 15

LIKED = "liked"
SKIPPED = "skipped"


class BackendError(Exception):
    """Search backend unreachable, timed out or answered with an error."""


def build_search_payload(user_id: int, filters: Filters, limit: int) -> Dict[str, Any]:
    return {"user_id": user_id, "filters": filters.to_payload(), "limit": limit}


class BackendClient:
    def __init__(self, base_url: str, search_timeout: float = SEARCH_TIMEOUT, state_timeout: float = STATE_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.search_timeout = search_timeout
        self.state_timeout = state_timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _request(self, method: str, path: str, timeout: float, **kwargs) -> requests.Response:
        try:
            r = requests.request(method, self._url(path), timeout=timeout, **kwargs)
            r.raise_for_status()
        except requests.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise BackendError(f"{method} /{path} failed (status={status}): {e}") from e
        return r

    @staticmethod
    def _json(r: requests.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise BackendError(f"invalid JSON from {r.url}") from e

    def submit_search(self, user_id: int, filters: Filters, limit: int = 10) -> str:
        """Queue a search job for the user and return its job id."""
        r = self._request("POST", "search", self.search_timeout, json=build_search_payload(user_id, filters, limit))
        body = self._json(r)
        job_id = body.get("job_id") if isinstance(body, dict) else None
        if job_id is None:
            raise BackendError(f"search response without job_id: {body!r}")
        return str(job_id)

    def fetch_feed(self, user_id: int, limit: int = 10) -> List[Listing]:
        """Return the next listings for the user, in backend order."""
        r = self._request("GET", "feed", self.search_timeout, params={"user_id": user_id, "limit": limit})
        body = self._json(r)
        if not isinstance(body, list):
            return []
        listings = []
        for item in body:
            try:
                listings.append(Listing.from_dict(item))
            except ValueError:
                print(f"[Backend] Skipping malformed listing: {item!r}")
        return listings

    def report_state(self, user_id: int, listing_id: str, state: str) -> None:
        if state not in (LIKED, SKIPPED):
            raise ValueError(f"unknown listing state: {state}")
        self._request(
            "POST", "state", self.state_timeout,
            json={"user_id": user_id, "listing_id": listing_id, "state": state},
        )
