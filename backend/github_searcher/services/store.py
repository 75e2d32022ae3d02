from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Repository

SORT_COLUMNS = {
    "stars": Repository.stars,
    "forks": Repository.forks,
    "updated": Repository.last_updated,
}
DEFAULT_SORT = "stars"


def build_filters(language: Optional[str] = None, min_stars: Optional[int] = None) -> list:
    """Predicates to AND together; an absent filter contributes nothing."""
    filters = []
    if language is not None and language.strip():
        filters.append(Repository.language == language)
    if min_stars is not None:
        filters.append(Repository.stars >= min_stars)
    return filters


def sort_column(sort: Optional[str]):
    return SORT_COLUMNS.get(sort or DEFAULT_SORT, SORT_COLUMNS[DEFAULT_SORT])


class RepositoryStore:
    def __init__(self, db: Session):
        self.db = db

    def upsert_all(self, records: List[Repository]) -> None:
        """Insert or overwrite every record by id in one transaction."""
        try:
            for record in records:
                # a later record with the same id must find the earlier pending one
                self.db.merge(record)
                self.db.flush()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"[store] upsert of {len(records)} repositories rolled back")
            raise
        logger.info(f"[store] upserted {len(records)} repositories")

    def query(
        self,
        language: Optional[str] = None,
        min_stars: Optional[int] = None,
        sort: Optional[str] = DEFAULT_SORT,
    ) -> List[Repository]:
        return (
            self.db.query(Repository)
            .filter(*build_filters(language, min_stars))
            .order_by(sort_column(sort).desc())
            .all()
        )

    def count(self) -> int:
        return self.db.query(Repository).count()
