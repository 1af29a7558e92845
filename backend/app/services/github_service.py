"""The GitHub capability the /github routes depend on.

``GitHubClient`` satisfies it structurally; tests plug in fakes instead of a
real transport.
"""

from typing import Protocol

from app.adapters.github_models import GitHubIssue, GitHubRepository, ProfileBundle
from app.schemas.github import IssueCreateRequest


class GitHubService(Protocol):
    async def fetch_profile(self) -> ProfileBundle: ...

    async def fetch_repository(self, name: str) -> GitHubRepository: ...

    async def create_issue(self, repo_name: str, issue: IssueCreateRequest) -> GitHubIssue: ...
