"""
Category repository.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaintdesk.core.exceptions import RepositoryError
from complaintdesk.models.category.category import Category
from complaintdesk.repositories.base.base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):

    def __init__(self, session: Session):
        super().__init__(Category, session)

    def list_ordered(self) -> List[Category]:
        """All categories ordered by name."""
        return self.find_by_criteria({}, order_by=["name"])

    def find_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup by name."""
        try:
            query = select(Category).where(func.lower(Category.name) == name.strip().lower())
            return self.db.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Category lookup failed: {str(e)}") from e

    def find_missing_ids(self, category_ids: Iterable[str]) -> Set[str]:
        """Return the subset of ``category_ids`` that do not exist."""
        wanted = set(category_ids)
        if not wanted:
            return set()
        found = {category.id for category in self.find_by_criteria({"id": wanted})}
        return wanted - found
