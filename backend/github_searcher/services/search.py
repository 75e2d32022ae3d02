from typing import List, Optional

from loguru import logger

from ..datasources.base import DataSource
from ..schemas import RepositoryResponse, SearchRequest, SearchResponse
from . import mapper
from .store import DEFAULT_SORT, RepositoryStore

NO_RESULTS_MESSAGE = "No repositories found"
SAVED_MESSAGE = "Repositories fetched and saved successfully"


class SearchService:
    """Searches GitHub, stores what comes back and serves stored results."""

    def __init__(self, github: DataSource, store: RepositoryStore):
        self.github = github
        self.store = store

    async def search_and_save(self, request: SearchRequest) -> SearchResponse:
        items = await self.github.search_repositories(
            request.query, language=request.language, sort=request.sort
        )
        if not items:
            logger.info(f"[search] no repositories for query={request.query!r}")
            return SearchResponse(message=NO_RESULTS_MESSAGE, repositories=[])

        entities = mapper.to_entity_list(items)
        self.store.upsert_all(entities)
        return SearchResponse(
            message=SAVED_MESSAGE,
            repositories=mapper.to_response_list(entities),
        )

    def list_stored(
        self,
        language: Optional[str] = None,
        min_stars: Optional[int] = None,
        sort: Optional[str] = DEFAULT_SORT,
    ) -> List[RepositoryResponse]:
        entities = self.store.query(language=language, min_stars=min_stars, sort=sort)
        return mapper.to_response_list(entities)
