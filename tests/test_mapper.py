from datetime import datetime, timezone

from conftest import github_item
from github_searcher.datasources.base import RemoteRepository
from github_searcher.models import DESCRIPTION_MAX_LENGTH, Repository
from github_searcher.services import mapper

UPDATED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def remote(**kwargs):
    return RemoteRepository.model_validate(github_item(**kwargs))


def test_to_entity_copies_fields_and_owner_login():
    entity = mapper.to_entity(remote(id=3, name="lib", description="a lib", language="Go", stars=9, forks=2))

    assert isinstance(entity, Repository)
    assert (entity.id, entity.name, entity.description) == (3, "lib", "a lib")
    assert entity.owner == "o"
    assert entity.language == "Go"
    assert (entity.stars, entity.forks) == (9, 2)
    assert entity.last_updated == UPDATED


def test_to_entity_without_owner_object():
    assert mapper.to_entity(remote(login=None)).owner is None


def test_to_entity_truncates_long_description():
    entity = mapper.to_entity(remote(description="d" * (DESCRIPTION_MAX_LENGTH + 50)))

    assert len(entity.description) == DESCRIPTION_MAX_LENGTH


def test_to_response_is_field_for_field():
    entity = mapper.to_entity(remote(id=4, description=None, language=None))
    response = mapper.to_response(entity)

    assert response.model_dump() == {
        "id": 4,
        "name": "x",
        "description": None,
        "owner": "o",
        "language": None,
        "stars": 50,
        "forks": 5,
        "last_updated": UPDATED,
    }
    assert "lastUpdated" in response.model_dump(by_alias=True)


def test_none_passes_through():
    assert mapper.to_entity(None) is None
    assert mapper.to_response(None) is None


def test_list_variants_skip_none_and_accept_none():
    assert mapper.to_entity_list(None) == []
    assert mapper.to_response_list(None) == []

    entities = mapper.to_entity_list([remote(id=1), None, remote(id=2)])
    assert [e.id for e in entities] == [1, 2]
    assert [r.id for r in mapper.to_response_list([None, *entities])] == [1, 2]
