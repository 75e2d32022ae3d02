from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SORT_OPTIONS = ("stars", "forks", "updated")


class SearchRequest(BaseModel):
    query: str
    language: Optional[str] = None
    sort: Optional[str] = None

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Query must not be empty")
        return value

    @field_validator("sort")
    @classmethod
    def _sort_is_known(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in SORT_OPTIONS:
            raise ValueError("Sort must be one of: stars, forks, updated")
        return value


class RepositoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: Optional[str] = None
    owner: Optional[str] = None
    language: Optional[str] = None
    stars: int
    forks: int
    last_updated: datetime = Field(alias="lastUpdated")


class SearchResponse(BaseModel):
    message: str
    repositories: List[RepositoryResponse]
