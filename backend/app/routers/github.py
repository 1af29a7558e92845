"""REST API router proxying the configured GitHub account."""

import re
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.convertors import Convertor, register_url_convertor

from app.adapters.github_client import GitHubClientError
from app.adapters.github_models import GitHubIssue, GitHubRepository, ProfileBundle
from app.schemas.github import ErrorResponse, IssueCreateRequest
from app.services.github_service import GitHubService

logger = structlog.get_logger(__name__)

_REPO_NAME = re.compile(r"[A-Za-z0-9._-]+")


class RepoNameConvertor(Convertor[str]):
    """Like the default ``str`` convertor but also matches an empty segment.

    Lets ``/github/`` and ``/github//issues`` reach the handlers, which answer
    400 instead of Starlette's redirect or 404.
    """

    regex = "[^/]*"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


register_url_convertor("repo_name", RepoNameConvertor())

router = APIRouter(prefix="/github", tags=["github"])

_ERROR_RESPONSES: dict[int | str, dict] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_github_service(request: Request) -> GitHubService:
    """FastAPI dependency — reads from app.state.github_service."""
    return request.app.state.github_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


def _reject_repo_name(repo: str) -> JSONResponse | None:
    """A 400 response for names that must never reach GitHub, else None.

    Dot segments would be collapsed by the URL join and hit another endpoint.
    """
    if not repo.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Repository name is required")
    if repo in (".", "..") or not _REPO_NAME.fullmatch(repo):
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid repository name")
    return None


@router.get("", response_model=ProfileBundle, responses=_ERROR_RESPONSES)
async def get_profile(
    service: Annotated[GitHubService, Depends(get_github_service)],
):
    try:
        return await service.fetch_profile()
    except GitHubClientError as exc:
        logger.error("github_profile_failed", error=str(exc), status_code=exc.status_code)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve GitHub profile")


@router.get("/{repo:repo_name}", response_model=GitHubRepository, responses=_ERROR_RESPONSES)
async def get_repository(
    repo: str,
    service: Annotated[GitHubService, Depends(get_github_service)],
):
    if (rejection := _reject_repo_name(repo)) is not None:
        return rejection
    try:
        return await service.fetch_repository(repo)
    except GitHubClientError as exc:
        logger.error("github_repository_failed", repo=repo, error=str(exc), status_code=exc.status_code)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve repository information")


@router.post(
    "/{repo:repo_name}/issues",
    response_model=GitHubIssue,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_issue(
    repo: str,
    body: IssueCreateRequest,
    service: Annotated[GitHubService, Depends(get_github_service)],
):
    """Open an issue in one of the account's repositories.

    Title and body are validated before this runs; a bad payload is a 400
    and GitHub is never called.
    """
    if (rejection := _reject_repo_name(repo)) is not None:
        return rejection
    try:
        return await service.create_issue(repo, body)
    except GitHubClientError as exc:
        logger.error("github_create_issue_failed", repo=repo, error=str(exc), status_code=exc.status_code)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create issue")
