"""Repository model - a GitHub repository stored from search results."""
from sqlalchemy import BigInteger, Column, Integer, String

from .db import Base, UTCDateTime

DESCRIPTION_MAX_LENGTH = 2000


class Repository(Base):
    """A GitHub repository, keyed by the id GitHub assigned to it."""
    __tablename__ = 'repositories'

    id = Column('repo_id', BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    owner = Column(String(255), nullable=True)
    language = Column(String(100), nullable=True, index=True)
    stars = Column(Integer, nullable=False, index=True)
    forks = Column(Integer, nullable=False, index=True)
    last_updated = Column(UTCDateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Repository(id={self.id}, name='{self.name}', stars={self.stars})>"
