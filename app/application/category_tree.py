from collections import defaultdict, deque
from typing import Mapping, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.models import Category
from app.errors import CategoryCycleError, NotFoundError


class CategoryTree:
    """Category hierarchy held as ``{category_id: parent_id}``.

    Parent and child links are looked up by id; nothing holds object
    references, so the tree can be rebuilt cheaply from one query.
    """

    def __init__(self, parents: Mapping[int, Optional[int]]):
        self._parent = dict(parents)
        self._children: dict[int, list[int]] = defaultdict(list)
        for node, parent in sorted(self._parent.items()):
            if parent is not None:
                self._children[parent].append(node)

    @classmethod
    def from_session(cls, db: Session) -> "CategoryTree":
        rows = db.execute(select(Category.category_id, Category.parent_id)).all()
        return cls({category_id: parent_id for category_id, parent_id in rows})

    def __contains__(self, node: int) -> bool:
        return node in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def _require(self, node: int) -> None:
        if node not in self._parent:
            raise NotFoundError("Category", node)

    def parent(self, node: int) -> Optional[int]:
        self._require(node)
        return self._parent[node]

    def children(self, node: int) -> list[int]:
        self._require(node)
        return list(self._children.get(node, []))

    def roots(self) -> list[int]:
        # A parent id missing from the arena counts as no parent
        return sorted(n for n, p in self._parent.items() if p is None or p not in self._parent)

    def ancestors(self, node: int) -> list[int]:
        """Nearest first, ending at the root."""
        self._require(node)
        seen = {node}
        found = []
        current = self._parent[node]
        while current is not None and current in self._parent:
            if current in seen:
                raise CategoryCycleError(f"Category {node} is part of a parent cycle")
            seen.add(current)
            found.append(current)
            current = self._parent[current]
        return found

    def descendants(self, node: int) -> list[int]:
        """Breadth-first, excluding ``node`` itself."""
        self._require(node)
        found = []
        seen = {node}
        queue = deque(self._children.get(node, []))
        while queue:
            current = queue.popleft()
            if current in seen:
                raise CategoryCycleError(f"Category {current} is part of a parent cycle")
            seen.add(current)
            found.append(current)
            queue.extend(self._children.get(current, []))
        return found

    def depth(self, node: int) -> int:
        return len(self.ancestors(node))

    def would_create_cycle(self, node: int, new_parent: Optional[int]) -> bool:
        if new_parent is None:
            return False
        self._require(node)
        self._require(new_parent)
        return new_parent == node or node in self.ancestors(new_parent)
