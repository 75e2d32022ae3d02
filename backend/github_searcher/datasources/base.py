from datetime import datetime, timezone
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RemoteOwner(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: Optional[str] = None


class RemoteRepository(BaseModel):
    """One item of the GitHub search response, unknown fields dropped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    name: str
    description: Optional[str] = None
    owner: Optional[RemoteOwner] = None
    language: Optional[str] = None
    stars: int = Field(default=0, alias="stargazers_count")
    forks: int = Field(default=0, alias="forks_count")
    updated_at: datetime

    @field_validator("stars", "forks", mode="before")
    @classmethod
    def _null_count_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DataSource(Protocol):
    async def search_repositories(
        self, query: str, language: Optional[str] = None, sort: Optional[str] = None
    ) -> List[RemoteRepository]:
        ...
