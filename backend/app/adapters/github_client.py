"""HTTP adapter for the GitHub REST API v3."""

from typing import TypeVar
from urllib.parse import quote

import httpx
import pydantic
import structlog

from app.adapters.github_models import GitHubIssue, GitHubRepository, GitHubUser, ProfileBundle
from app.schemas.github import IssueCreateRequest

logger = structlog.get_logger(__name__)

_T = TypeVar("_T", bound=pydantic.BaseModel)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 10.0
REPOS_PAGE_SIZE = 100


class GitHubClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubUnavailableError(GitHubClientError):
    """The request never produced a response (DNS, connect, timeout, ...)."""


class GitHubRejectedError(GitHubClientError):
    """GitHub answered with a status code the operation does not accept."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"GitHub API returned status code {status_code}", status_code=status_code)
        self.body = body


class GitHubDecodeError(GitHubClientError):
    """The response body is not JSON or does not have the expected shape."""


class GitHubClient:
    """Talks to GitHub on behalf of a single configured account.

    The token and username are fixed for the lifetime of the client; the
    underlying ``httpx.AsyncClient`` is created once and reused for every call.
    """

    def __init__(
        self,
        token: str,
        username: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._username = username
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "github-proxy",
            "Authorization": f"Bearer {token}",
        }
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._http.is_closed:
            await self._http.aclose()

    @property
    def username(self) -> str:
        return self._username

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_profile(self) -> ProfileBundle:
        """Fetch the account's user resource and its repositories.

        Repositories are the first page (up to 100) of repos the account owns,
        most recently updated first. The repository call is only made once the
        user call has succeeded.
        """
        owner = quote(self._username, safe="")
        resp = await self._send("GET", f"/users/{owner}")
        self._expect_status(resp, ok=resp.is_success)
        user = self._parse(resp, GitHubUser)

        resp = await self._send(
            "GET",
            f"/users/{owner}/repos",
            params={"type": "owner", "sort": "updated", "per_page": REPOS_PAGE_SIZE},
        )
        self._expect_status(resp, ok=resp.is_success)
        repositories = self._parse_list(resp, GitHubRepository)

        return ProfileBundle(user=user, repositories=repositories)

    async def fetch_repository(self, name: str) -> GitHubRepository:
        """Fetch a single repository owned by the configured account.

        Raises:
            GitHubRejectedError: On any non-2xx response, including 404.
        """
        resp = await self._send("GET", self._repo_path(name))
        self._expect_status(resp, ok=resp.is_success)
        return self._parse(resp, GitHubRepository)

    async def create_issue(self, repo_name: str, issue: IssueCreateRequest) -> GitHubIssue:
        """Open a new issue. Only ``201 Created`` counts as success."""
        resp = await self._send("POST", f"{self._repo_path(repo_name)}/issues", json=issue.model_dump())
        self._expect_status(resp, ok=resp.status_code == httpx.codes.CREATED)
        return self._parse(resp, GitHubIssue)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _repo_path(self, name: str) -> str:
        return f"/repos/{quote(self._username, safe='')}/{quote(name, safe='')}"

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("github_api_unreachable", method=method, path=path, error=str(exc))
            raise GitHubUnavailableError(f"GitHub API request failed: {exc}") from exc

    def _expect_status(self, resp: httpx.Response, ok: bool) -> None:
        if ok:
            return
        logger.error(
            "github_api_error",
            method=resp.request.method,
            path=resp.request.url.path,
            status_code=resp.status_code,
            response=resp.text,
        )
        raise GitHubRejectedError(resp.status_code, resp.text)

    def _json(self, resp: httpx.Response) -> object:
        try:
            return resp.json()
        except ValueError as exc:  # JSONDecodeError and UnicodeDecodeError
            raise GitHubDecodeError(
                f"GitHub returned non-JSON body (status {resp.status_code}): {exc}",
                status_code=resp.status_code,
            ) from exc

    def _parse(self, resp: httpx.Response, model: type[_T]) -> _T:
        """Parse the response body as JSON, then validate against a Pydantic model."""
        data = self._json(resp)
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as exc:
            raise GitHubDecodeError(
                f"GitHub response schema mismatch: {exc}",
                status_code=resp.status_code,
            ) from exc

    def _parse_list(self, resp: httpx.Response, model: type[_T]) -> list[_T]:
        """Parse the response body as a JSON array, validating each element."""
        items = self._json(resp)
        if not isinstance(items, list):
            raise GitHubDecodeError(
                f"GitHub returned unexpected shape, expected array, got {type(items).__name__}",
                status_code=resp.status_code,
            )
        try:
            return [model.model_validate(item) for item in items]
        except pydantic.ValidationError as exc:
            raise GitHubDecodeError(
                f"GitHub response schema mismatch: {exc}",
                status_code=resp.status_code,
            ) from exc
