"""GitLabTracker - Interfaces with the GitLab REST API for issues, wikis and schedules."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from boardkeeper.dates import parse_short_iso, parse_timestamp
from boardkeeper.exceptions import NotFoundError, TransportError
from boardkeeper.logging import sanitize_for_log
from boardkeeper.tracker.models import Issue, IssueState, WikiPage

if TYPE_CHECKING:
    from boardkeeper.config import Settings

logger = logging.getLogger("boardkeeper.tracker")

ISSUES_PER_PAGE = 20
PIPELINES_PER_PAGE = 10
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def issue_from_json(data: dict[str, Any]) -> Issue:
    """Build an Issue from a GitLab issue payload.

    Raises:
        DateParseError: If due_date or updated_at is malformed.
        TransportError: If the payload is missing fields or has the wrong shape.
    """
    try:
        due_date = data.get("due_date")
        return Issue(
            iid=int(data["iid"]),
            id=int(data["id"]),
            title=data["title"],
            url=data.get("web_url") or "",
            updated_at=parse_timestamp(data["updated_at"]),
            state=IssueState(data.get("state", IssueState.OPENED.value)),
            due_date=parse_short_iso(due_date) if due_date else None,
            labels=tuple(data.get("labels") or ()),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise TransportError(f"Malformed issue payload: {e!r}") from e


def _expect(payload: Any, kind: type, path: str) -> Any:
    if not isinstance(payload, kind):
        raise TransportError(
            f"GET {path}: expected a JSON {kind.__name__}, got {type(payload).__name__}"
        )
    return payload


def _successful_pipeline_time(pipeline: Any) -> datetime | None:
    """Creation time of a successful pipeline, None for any other status."""
    try:
        if pipeline.get("status") != "success":
            return None
        return parse_timestamp(pipeline["created_at"])
    except (AttributeError, KeyError, TypeError) as e:
        raise TransportError(f"Malformed pipeline payload: {e!r}") from e


class IssuePages:
    """Lazy, restartable view over a paginated issue listing.

    Each iteration starts again at page 1 and stops after the first page
    holding fewer than `per_page` issues.
    """

    def __init__(
        self,
        tracker: GitLabTracker,
        params: dict[str, Any],
        per_page: int = ISSUES_PER_PAGE,
    ) -> None:
        self._tracker = tracker
        self._params = params
        self._per_page = per_page

    def __iter__(self) -> Iterator[Issue]:
        page = 1
        while True:
            params = {**self._params, "per_page": self._per_page, "page": page}
            path = self._tracker._project_path("issues")
            payload = _expect(self._tracker._get_json(path, params), list, path)
            for item in payload:
                yield issue_from_json(item)
            if len(payload) < self._per_page:
                return
            page += 1


class GitLabTracker:
    """Adapter for a GitLab project: issues, labels, wiki pages, pipeline schedules.

    Uses the GitLab REST API v4. Wiki calls go to the group wiki when a
    group wiki ID is configured, otherwise to the project wiki.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        project_id: str,
        group_wiki_id: str | None = None,
        schedule_id: int | None = None,
        verify_tls: bool = True,
    ) -> None:
        """Initialize the tracker.

        Args:
            api_url: GitLab API v4 base URL (CI_API_V4_URL)
            token: API token with api scope
            project_id: Numeric project ID or URL path
            group_wiki_id: Group whose wiki stores standup notes (optional)
            schedule_id: Pipeline schedule whose successful runs mark the last run
            verify_tls: Whether to verify the server certificate
        """
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.project_id = project_id
        self.group_wiki_id = group_wiki_id
        self.schedule_id = schedule_id
        self.verify_tls = verify_tls
        self._client: httpx.Client | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> GitLabTracker:
        return cls(
            api_url=settings.api_url,
            token=settings.token,
            project_id=settings.project_id,
            group_wiki_id=settings.group_wiki_id,
            schedule_id=settings.schedule_id,
            verify_tls=settings.verify_tls,
        )

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the GitLab API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.api_url,
                headers={"PRIVATE-TOKEN": self.token},
                timeout=30.0,
                verify=self.verify_tls,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _project_path(self, suffix: str) -> str:
        return f"/projects/{quote(str(self.project_id), safe='')}/{suffix}"

    def _wiki_path(self, suffix: str = "") -> str:
        if self.group_wiki_id:
            base = f"/groups/{quote(str(self.group_wiki_id), safe='')}/wikis"
        else:
            base = self._project_path("wikis")
        return f"{base}/{suffix}" if suffix else base

    def _request(
        self, method: str, path: str, not_found: str | None = None, **kwargs: Any
    ) -> httpx.Response:
        """Send a request and map failures onto the error taxonomy.

        Args:
            method: HTTP method
            path: Path below the API base URL
            not_found: What the request looks up; when given, a 404 raises
                NotFoundError instead of TransportError

        Raises:
            NotFoundError: If GitLab answers 404 and `not_found` is set
            TransportError: On any other error status or network failure
        """
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {path} failed: {sanitize_for_log(str(e))}"
            ) from e

        if response.status_code == 404 and not_found is not None:
            raise NotFoundError(f"{not_found} not found ({method} {path})")
        if response.status_code >= 400:
            raise TransportError(
                f"{method} {path} failed: {response.status_code} - "
                f"{sanitize_for_log(response.text)}",
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: httpx.Response, method: str, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned a non-JSON body: "
                f"{sanitize_for_log(response.text[:200])}",
                status_code=response.status_code,
            ) from e

    def _get_json(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return self._decode(self._request("GET", path, params=params, **kwargs), "GET", path)

    def list_issues(
        self, order_by: str, sort: str, state: IssueState | None = None
    ) -> IssuePages:
        """List project issues sorted by a field.

        Args:
            order_by: GitLab sort field (e.g. "due_date", "updated_at")
            sort: "asc" or "desc"
            state: Issue state filter; None lists all states

        Returns:
            Lazy iterable over every matching issue
        """
        params: dict[str, Any] = {"order_by": order_by, "sort": sort}
        if state is not None:
            params["state"] = state.value
        logger.debug("Listing issues (order_by=%s, sort=%s, state=%s)", order_by, sort, state)
        return IssuePages(self, params)

    def set_labels(self, issue_iid: int, labels: Sequence[str]) -> Issue:
        """Replace the labels of an issue.

        Args:
            issue_iid: Project-scoped issue number
            labels: Complete desired label set

        Returns:
            The updated issue as returned by GitLab
        """
        path = self._project_path(f"issues/{issue_iid}")
        response = self._request("PUT", path, json={"labels": ",".join(labels)})
        return issue_from_json(self._decode(response, "PUT", path))

    def list_wiki_pages(self) -> list[WikiPage]:
        """List wiki page metadata (title and slug)."""
        path = self._wiki_path()
        pages = _expect(self._get_json(path), list, path)
        try:
            return [WikiPage(title=page["title"], slug=page["slug"]) for page in pages]
        except (KeyError, TypeError) as e:
            raise TransportError(f"Malformed wiki page payload: {e!r}") from e

    def wiki_page_exists(self, title: str) -> bool:
        """Check whether a wiki page exists, addressing it by its title."""
        try:
            self._request("GET", self._wiki_path(quote(title, safe="")), not_found=title)
        except NotFoundError:
            return False
        return True

    def create_wiki_page(self, title: str, content: str) -> None:
        """Create a markdown wiki page."""
        self._request(
            "POST",
            self._wiki_path(),
            json={"title": title, "content": content, "format": "markdown"},
        )
        logger.info("Created wiki page %s", title)

    def last_run_time(self) -> datetime:
        """Creation time of the newest successful pipeline of the run schedule.

        Walks all pipelines triggered by the schedule, because a schedule's
        last pipeline may have failed. Returns the Unix epoch when no
        schedule is configured or none of its pipelines succeeded.

        Raises:
            NotFoundError: If the configured schedule doesn't exist
        """
        if self.schedule_id is None:
            logger.warning("No pipeline schedule configured, treating every issue as changed")
            return EPOCH

        schedule_path = self._project_path(f"pipeline_schedules/{self.schedule_id}")
        schedule = _expect(
            self._get_json(schedule_path, not_found=f"Pipeline schedule {self.schedule_id}"),
            dict,
            schedule_path,
        )
        if "id" not in schedule:
            raise TransportError(f"GET {schedule_path}: schedule payload has no id")
        path = self._project_path(f"pipeline_schedules/{schedule['id']}/pipelines")

        last_success = EPOCH
        page: str | int = 1
        while page:
            response = self._request(
                "GET", path, params={"page": page, "per_page": PIPELINES_PER_PAGE, "sort": "desc"}
            )
            for pipeline in _expect(self._decode(response, "GET", path), list, path):
                created_at = _successful_pipeline_time(pipeline)
                if created_at is not None and created_at > last_success:
                    last_success = created_at
            page = response.headers.get("X-Next-Page", "")
        return last_success
