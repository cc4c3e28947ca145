"""HTTP client for the PostHog REST API."""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar, Union
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ValidationError

from hogman.core.config import DEFAULT_HOST
from hogman.core.errors import ErrorKind, HogmanError
from hogman.core.models import (
    Dashboard,
    ErrorGroup,
    FeatureFlag,
    Insight,
    Organization,
    Person,
    Project,
    PropertyDefinition,
)

logger = logging.getLogger(__name__)

ParamValue = Union[str, int, float, bool]
M = TypeVar("M", bound=BaseModel)

ERROR_STATUSES = ("active", "resolved", "suppressed")
# PostHog property definition types
PROPERTY_TYPES = {"event": 1, "person": 2, "group": 3}


def _param_str(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort message from an error body, else the status line text."""
    detail = response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        return detail
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key) is not None:
                return str(body[key])
    return detail


def parse_model(model: type[M], data: Any) -> M:
    """Validate a response payload, reporting shape mismatches as unknown errors."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HogmanError(
            ErrorKind.UNKNOWN, f"Unexpected {model.__name__} payload: {e.error_count()} error(s)"
        ) from e


def check_response(response: httpx.Response, url: str) -> None:
    """Raise a classified ``HogmanError`` for any non-2xx response."""
    status = response.status_code
    if status == 401:
        raise HogmanError(
            ErrorKind.UNAUTHORIZED, "Invalid API key — use a personal API key (phx_...)", status
        )
    if status == 403:
        raise HogmanError(ErrorKind.FORBIDDEN, "Access denied to this resource", status)
    if status == 404:
        raise HogmanError(ErrorKind.NOT_FOUND, f"Resource not found: {url}", status)
    if status == 429:
        raise HogmanError(
            ErrorKind.RATE_LIMITED, "Rate limit exceeded (HogQL: 120/hr) — try again later", status
        )
    if status >= 500:
        raise HogmanError(ErrorKind.SERVER_ERROR, f"PostHog server error: {status}", status)
    if not response.is_success:
        raise HogmanError(ErrorKind.API_ERROR, _error_detail(response), status)


class PostHogClient:
    """PostHog API client bound to one API key and host.

    Exposes two primitives, ``fetch_one`` and ``fetch_all_pages``, plus
    typed accessors for each resource built on them. Nothing is retried.
    """

    # HogQL queries may run for up to 10s server-side
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        api_key: str,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._api_key = api_key
        self._host = (host or DEFAULT_HOST).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def host(self) -> str:
        return self._host

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, transport=self._transport)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "PostHogClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # Core request helpers

    def build_url(self, path: str, params: Optional[dict[str, ParamValue]] = None) -> str:
        url = f"{self._host}{path}"
        if params:
            url += "?" + urlencode({key: _param_str(value) for key, value in params.items()})
        return url

    def request(
        self,
        method: str,
        url: str,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send one authenticated request and return the decoded JSON body.

        Extra ``headers`` are merged in, but never replace the
        authorization or content-type headers.
        """
        merged = httpx.Headers(headers or {})
        merged["Authorization"] = f"Bearer {self._api_key}"
        merged["Content-Type"] = "application/json"

        try:
            response = self.client.request(method, url, json=json, headers=merged)
        except httpx.TimeoutException as e:
            raise HogmanError(
                ErrorKind.UNKNOWN, f"Request timed out after {self.timeout:g}s: {url}"
            ) from e
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise HogmanError(
                ErrorKind.UNKNOWN, f"Request failed: {type(e).__name__}: {e}"
            ) from e

        logger.debug("%s %s -> %d", method, url, response.status_code)
        check_response(response, url)

        try:
            return response.json()
        except ValueError as e:
            raise HogmanError(
                ErrorKind.UNKNOWN, f"Invalid JSON in response from {url}", response.status_code
            ) from e

    def fetch_one(self, path: str, params: Optional[dict[str, ParamValue]] = None) -> Any:
        """GET a single resource."""
        return self.request("GET", self.build_url(path, params))

    def post(self, path: str, body: dict[str, Any]) -> Any:
        """POST a JSON body to ``path``."""
        return self.request("POST", self.build_url(path), json=body)

    def fetch_page(self, path: str, params: Optional[dict[str, ParamValue]] = None) -> dict:
        """GET one page of a paginated list endpoint; ``results`` is always a list."""
        url = self.build_url(path, params)
        page = self._as_page(self.request("GET", url), url)
        page["results"] = self._page_results(page, url)
        return page

    def fetch_all_pages(
        self, path: str, params: Optional[dict[str, ParamValue]] = None
    ) -> list[Any]:
        """Follow ``next`` links from ``path`` and concatenate every page's results.

        Pages are fetched one at a time, in server order. Any failure
        propagates, so a partial list is never returned.
        """
        results: list[Any] = []
        url: Optional[str] = self.build_url(path, params)
        pages = 0

        while url:
            page = self._as_page(self.request("GET", url), url)
            results.extend(self._page_results(page, url))
            pages += 1
            # The cursor is opaque; it is requested exactly as given.
            url = page.get("next") or None
            if url:
                logger.debug("Following page cursor %s", url)

        logger.debug("Fetched %d item(s) from %s in %d page(s)", len(results), path, pages)
        return results

    @staticmethod
    def _as_page(data: Any, url: str) -> dict:
        if not isinstance(data, dict):
            raise HogmanError(ErrorKind.UNKNOWN, f"Expected a paginated response from {url}")
        return data

    @staticmethod
    def _page_results(page: dict, url: str) -> list[Any]:
        items = page.get("results") or []
        if not isinstance(items, list):
            raise HogmanError(ErrorKind.UNKNOWN, f"Expected a list of results from {url}")
        return items

    def _parse_all(self, model: type[M], items: list[Any]) -> list[M]:
        return [parse_model(model, item) for item in items]

    # Organizations & projects

    def list_organizations(self) -> list[Organization]:
        return self._parse_all(Organization, self.fetch_all_pages("/api/organizations/"))

    def list_projects(self) -> list[Project]:
        return self._parse_all(Project, self.fetch_all_pages("/api/projects/"))

    # Feature flags

    def list_feature_flags(self, project_id: int) -> list[FeatureFlag]:
        return self._parse_all(
            FeatureFlag, self.fetch_all_pages(f"/api/projects/{project_id}/feature_flags/")
        )

    def get_feature_flag_by_id(self, project_id: int, flag_id: int) -> FeatureFlag:
        return parse_model(
            FeatureFlag, self.fetch_one(f"/api/projects/{project_id}/feature_flags/{flag_id}/")
        )

    def get_feature_flag_by_key(self, project_id: int, key: str) -> FeatureFlag:
        """Look a flag up by key; the API has no key filter, so this lists all flags."""
        for flag in self.list_feature_flags(project_id):
            if flag.key == key:
                return flag
        raise HogmanError(ErrorKind.NOT_FOUND, f'Feature flag not found with key: "{key}"')

    # Insights

    def list_insights(self, project_id: int, favorited: bool = False) -> list[Insight]:
        params: dict[str, ParamValue] = {"saved": True}
        if favorited:
            params["favorited"] = True
        return self._parse_all(
            Insight, self.fetch_all_pages(f"/api/projects/{project_id}/insights/", params)
        )

    def get_insight(self, project_id: int, insight_id: int) -> Insight:
        return parse_model(
            Insight, self.fetch_one(f"/api/projects/{project_id}/insights/{insight_id}/")
        )

    # Dashboards

    def list_dashboards(self, project_id: int) -> list[Dashboard]:
        return self._parse_all(
            Dashboard, self.fetch_all_pages(f"/api/projects/{project_id}/dashboards/")
        )

    def get_dashboard(self, project_id: int, dashboard_id: int) -> Dashboard:
        return parse_model(
            Dashboard, self.fetch_one(f"/api/projects/{project_id}/dashboards/{dashboard_id}/")
        )

    # Error tracking

    def list_error_groups(self, project_id: int, status: Optional[str] = None) -> list[ErrorGroup]:
        params: dict[str, ParamValue] = {}
        if status:
            if status not in ERROR_STATUSES:
                raise HogmanError(
                    ErrorKind.API_ERROR,
                    f'Invalid status "{status}". Use: {" | ".join(ERROR_STATUSES)}',
                )
            params["status"] = status
        return self._parse_all(
            ErrorGroup,
            self.fetch_all_pages(f"/api/projects/{project_id}/error_tracking/groups/", params),
        )

    def get_error_group(self, project_id: int, group_id: str) -> ErrorGroup:
        return parse_model(
            ErrorGroup,
            self.fetch_one(f"/api/projects/{project_id}/error_tracking/groups/{group_id}/"),
        )

    # Persons

    def list_persons(
        self,
        project_id: int,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Person]:
        """List persons; with ``limit`` only the first page is requested."""
        path = f"/api/projects/{project_id}/persons/"
        params: dict[str, ParamValue] = {}
        if search:
            params["search"] = search

        if limit:
            params["limit"] = limit
            page = self.fetch_page(path, params)
            return self._parse_all(Person, page["results"])

        return self._parse_all(Person, self.fetch_all_pages(path, params))

    def get_person_by_distinct_id(self, project_id: int, distinct_id: str) -> Optional[Person]:
        page = self.fetch_page(
            f"/api/projects/{project_id}/persons/", {"distinct_id": distinct_id}
        )
        results = page["results"]
        return parse_model(Person, results[0]) if results else None

    # Property definitions

    def list_property_definitions(
        self, project_id: int, property_type: Optional[str] = None
    ) -> list[PropertyDefinition]:
        params: dict[str, ParamValue] = {}
        if property_type:
            if property_type not in PROPERTY_TYPES:
                raise HogmanError(
                    ErrorKind.API_ERROR,
                    f'Invalid type "{property_type}". Use: {" | ".join(PROPERTY_TYPES)}',
                )
            params["type"] = PROPERTY_TYPES[property_type]
        return self._parse_all(
            PropertyDefinition,
            self.fetch_all_pages(f"/api/projects/{project_id}/property_definitions/", params),
        )
