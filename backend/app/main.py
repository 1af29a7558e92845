from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from app.adapters.github_client import GitHubClient
from app.config.config import settings
from app.logging_config import configure_logging, parse_level
from app.middleware import install_middleware
from app.routers import github, health

configure_logging(settings.log_level)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = settings.missing_required()
    if missing:
        logger.critical("missing_configuration", settings=missing)
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    github_client = GitHubClient(
        token=settings.github_token,
        username=settings.github_username,
        base_url=settings.github_api_base_url,
        timeout=settings.github_timeout_seconds,
    )
    app.state.github_service = github_client
    logger.info("startup", github_username=settings.github_username, log_level=settings.log_level)

    yield

    await github_client.close()
    logger.info("shutdown")


app = FastAPI(
    title="github-proxy",
    description="Proxies a single GitHub account's profile, repositories and issues",
    version=settings.app_version,
    lifespan=lifespan,
)

install_middleware(app, cors_origins=settings.cors_origins)

app.include_router(health.router)
app.include_router(github.router)


def run() -> None:
    logger.info("starting_server", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=parse_level(settings.log_level))
