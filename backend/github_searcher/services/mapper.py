"""Conversions between the GitHub, database and API shapes of a repository."""
from typing import Iterable, List, Optional

from ..datasources.base import RemoteRepository
from ..models import DESCRIPTION_MAX_LENGTH, Repository
from ..schemas import RepositoryResponse


def to_entity(remote: Optional[RemoteRepository]) -> Optional[Repository]:
    if remote is None:
        return None
    description = remote.description
    if description is not None:
        description = description[:DESCRIPTION_MAX_LENGTH]
    return Repository(
        id=remote.id,
        name=remote.name,
        description=description,
        owner=remote.owner.login if remote.owner is not None else None,
        language=remote.language,
        stars=remote.stars,
        forks=remote.forks,
        last_updated=remote.updated_at,
    )


def to_response(entity: Optional[Repository]) -> Optional[RepositoryResponse]:
    if entity is None:
        return None
    return RepositoryResponse(
        id=entity.id,
        name=entity.name,
        description=entity.description,
        owner=entity.owner,
        language=entity.language,
        stars=entity.stars,
        forks=entity.forks,
        last_updated=entity.last_updated,
    )


def to_entity_list(items: Optional[Iterable[Optional[RemoteRepository]]]) -> List[Repository]:
    if items is None:
        return []
    return [to_entity(item) for item in items if item is not None]


def to_response_list(entities: Optional[Iterable[Optional[Repository]]]) -> List[RepositoryResponse]:
    if entities is None:
        return []
    return [to_response(entity) for entity in entities if entity is not None]
