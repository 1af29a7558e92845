import pytest
from httpx import ASGITransport, AsyncClient

from app.adapters.github_client import GitHubClient
from app.adapters.github_models import GitHubIssue, GitHubRepository, GitHubUser, ProfileBundle
from app.main import app
from app.routers.github import get_github_service
from app.schemas.github import IssueCreateRequest
from app.tests.github_payloads import GITHUB_BASE_URL, ISSUE_PAYLOAD, REPOS_PAYLOAD, USER_PAYLOAD


class FakeGitHubService:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.error: Exception | None = None
        self.profile = ProfileBundle(
            user=GitHubUser.model_validate(USER_PAYLOAD),
            repositories=[GitHubRepository.model_validate(r) for r in REPOS_PAYLOAD],
        )
        self.issue = GitHubIssue.model_validate(ISSUE_PAYLOAD)

    def _record(self, *call: object) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def fetch_profile(self) -> ProfileBundle:
        self._record("fetch_profile")
        return self.profile

    async def fetch_repository(self, name: str) -> GitHubRepository:
        self._record("fetch_repository", name)
        return GitHubRepository(name=name, full_name=f"test-user/{name}", description="Test repository")

    async def create_issue(self, repo_name: str, issue: IssueCreateRequest) -> GitHubIssue:
        self._record("create_issue", repo_name, issue)
        return self.issue


@pytest.fixture
def fake_service() -> FakeGitHubService:
    return FakeGitHubService()


@pytest.fixture
async def client(fake_service):
    """App client with the GitHub service swapped for a fake."""
    app.dependency_overrides[get_github_service] = lambda: fake_service
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def github_client():
    async with GitHubClient(token="test-token", username="test-user", base_url=GITHUB_BASE_URL) as gh:
        yield gh


@pytest.fixture
async def client_with_github(github_client):
    """App client wired to a real GitHubClient; mock the remote side with respx."""
    app.state.github_service = github_client
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.state.github_service = None
