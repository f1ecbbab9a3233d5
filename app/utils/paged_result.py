import math
from dataclasses import dataclass, field
from typing import Any, Callable, List


@dataclass
class PagedResult:
    """One page of results plus the paging math the frontend needs"""

    items: List[Any] = field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 50

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @classmethod
    def from_pagination(cls, pagination) -> "PagedResult":
        """Build from a Flask-SQLAlchemy Pagination object"""
        return cls(items=list(pagination.items), total_count=pagination.total or 0,
                   page_number=pagination.page, page_size=pagination.per_page)

    def to_dict(self, serialize: Callable[[Any], Any] = None) -> dict:
        serialize = serialize or (lambda item: item.to_dict())
        return {
            'items': [serialize(item) for item in self.items],
            'total_count': self.total_count,
            'page_number': self.page_number,
            'page_size': self.page_size,
            'total_pages': self.total_pages,
            'has_previous_page': self.has_previous_page,
            'has_next_page': self.has_next_page,
        }
