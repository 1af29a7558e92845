"""Pydantic models for the GitHub API adapter."""

from pydantic import BaseModel, ConfigDict, Field


class _GitHubModel(BaseModel):
    # The REST API returns far more fields than we expose.
    model_config = ConfigDict(extra="ignore")


class GitHubUser(_GitHubModel):
    login: str
    name: str | None = None
    followers: int = 0
    following: int = 0


class GitHubRepository(_GitHubModel):
    name: str
    full_name: str
    description: str | None = None


class GitHubIssue(_GitHubModel):
    number: int
    title: str
    html_url: str


class ProfileBundle(BaseModel):
    """The account's user resource plus its most recently updated repositories."""

    user: GitHubUser
    repositories: list[GitHubRepository] = Field(default_factory=list)
