import httpx
from loguru import logger
from pydantic import ValidationError
from typing import Any, List, Optional

from ..config import Settings
from ..errors import ErrorKind, GitHubApiError
from .base import DataSource, RemoteRepository


def build_query(query: str, language: Optional[str] = None) -> str:
    """Append GitHub's ``language:<X>`` qualifier when a language is given."""
    if language and language.strip():
        return f"{query} language:{language}"
    return query


class GitHubAdapter(DataSource):
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "GitHub-Searcher",
        }
        if settings.github_token and settings.github_token.strip():
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self.headers = headers
        client_kwargs: dict[str, Any] = {
            "base_url": str(settings.github_base_url),
            "headers": headers,
            "timeout": settings.github_timeout_seconds,
        }
        if settings.github_proxy:
            client_kwargs["proxy"] = settings.github_proxy
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def search_repositories(
        self, query: str, language: Optional[str] = None, sort: Optional[str] = None
    ) -> List[RemoteRepository]:
        params = {"q": build_query(query, language)}
        if sort:
            params["sort"] = sort
        logger.info(f"[github] searching repositories, params={params}")
        try:
            resp = await self.client.get("/search/repositories", params=params)
        except httpx.RequestError as exc:
            raise GitHubApiError(
                f"Error calling GitHub API: {type(exc).__name__}",
                ErrorKind.TRANSPORT_FAILURE,
                exc,
            ) from exc

        status = resp.status_code
        if status == 429:
            logger.warning("[github] rate limit exceeded")
            raise GitHubApiError("GitHub API rate limit exceeded", ErrorKind.RATE_LIMITED)
        if 400 <= status < 500:
            raise GitHubApiError("GitHub API client error", ErrorKind.CLIENT_ERROR)
        if status >= 500:
            raise GitHubApiError("GitHub API server error", ErrorKind.SERVER_ERROR)

        try:
            data = resp.json()
        except ValueError as exc:
            raise GitHubApiError(
                "Error calling GitHub API: malformed response body",
                ErrorKind.TRANSPORT_FAILURE,
                exc,
            ) from exc
        if not isinstance(data, dict):
            raise GitHubApiError(
                "Error calling GitHub API: unexpected response shape",
                ErrorKind.TRANSPORT_FAILURE,
            )
        return parse_items(data.get("items"))


def parse_items(items: Any) -> List[RemoteRepository]:
    if not items:
        return []
    if not isinstance(items, list):
        raise GitHubApiError(
            "Error calling GitHub API: 'items' is not a list",
            ErrorKind.TRANSPORT_FAILURE,
        )
    results: List[RemoteRepository] = []
    for item in items:
        if item is None:
            continue
        try:
            results.append(RemoteRepository.model_validate(item))
        except ValidationError as exc:
            # items missing id, name or updated_at cannot be persisted
            item_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(f"[github] skipping unparseable item id={item_id}: {exc.error_count()} error(s)")
    return results
