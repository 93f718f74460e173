from __future__ import annotations

import secrets
import threading
import uuid
from collections.abc import Callable
from typing import TypeVar

from ..errors import NotFoundError
from .config import DEFAULT_GROUP_CONFIG, GroupConfig
from .models import Group

T = TypeVar("T")


class GroupStore:
    """In-memory group table indexed by id and by join code."""

    def __init__(self, config: GroupConfig = DEFAULT_GROUP_CONFIG) -> None:
        self.config = config
        self._groups: dict[str, Group] = {}
        self._lock = threading.Lock()

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def _generate_code(self, used: set[str]) -> str:
        alphabet = self.config.join_code_alphabet
        while True:
            code = "".join(secrets.choice(alphabet) for _ in range(self.config.join_code_length))
            if code not in used:
                return code

    def new_join_code(self) -> str:
        """Return a join code not used by any stored group."""
        with self._lock:
            used = {g.join_code for g in self._groups.values()}
        return self._generate_code(used)

    def add(self, group: Group) -> Group:
        """Store *group*, drawing a fresh join code if another group took it meanwhile."""
        with self._lock:
            used = {g.join_code for g in self._groups.values()}
            if group.join_code in used:
                group = group.model_copy(update={"join_code": self._generate_code(used)})
            self._groups[group.id] = group
        return group

    def update(self, group_id: str, mutate: Callable[[Group], T]) -> T:
        """Apply *mutate* to a copy of the group and store it if no error is raised."""
        with self._lock:
            current = self._groups.get(group_id)
            if current is None:
                raise NotFoundError("Group not found")
            draft = current.model_copy(deep=True)
            result = mutate(draft)
            self._groups[group_id] = draft
        return result

    def get(self, group_id: str) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        return group

    def get_by_code(self, join_code: str) -> Group:
        code = join_code.strip().upper()
        for group in list(self._groups.values()):
            if group.join_code == code:
                return group
        raise NotFoundError("Group not found")

    def delete(self, group_id: str) -> None:
        with self._lock:
            if self._groups.pop(group_id, None) is None:
                raise NotFoundError("Group not found")

    def __len__(self) -> int:
        return len(self._groups)
