"""
User repositories.

SupabaseUserRepository reads and writes the `users` table;
InMemoryUserRepository is the development/test counterpart.
"""

import threading
import uuid
from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.repository import BaseRepository
from .models import User

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseUserRepository(BaseRepository[User]):
    """
    Repository for user data access.

    Note: This repository does NOT perform authorization checks.
    The service layer resolves users from verified token subjects.
    """

    TABLE = "users"

    def get_by_id(self, user_id: str) -> Optional[User]:
        result = self._db.table(self.TABLE).select("*").eq("id", user_id).execute()
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    def get_by_union_id(self, union_id: str) -> Optional[User]:
        result = self._db.table(self.TABLE).select("*").eq("union_id", union_id).execute()
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    def create(
        self,
        union_id: str,
        open_id: Optional[str],
        provider: str,
        nickname: str,
    ) -> User:
        """
        Insert a user, or return the existing row if a concurrent login won.
        """
        data = {
            "union_id": union_id,
            "open_id": open_id,
            "provider": provider,
            "nickname": nickname,
        }
        try:
            result = self._db.table(self.TABLE).insert(data).execute()
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
            existing = self.get_by_union_id(union_id)
            if existing is None:
                raise
            return existing
        return self._map_to_user(result.data[0])

    def update(self, user_id: str, **fields: Any) -> Optional[User]:
        """Update columns on a user and return the updated row."""
        result = self._db.table(self.TABLE).update(fields).eq("id", user_id).execute()
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map database row to User model."""
        last_airport = data.get("last_arrival_airport_id")
        return User(
            id=str(data["id"]),
            union_id=data["union_id"],
            open_id=data.get("open_id"),
            provider=data.get("provider") or "huawei",
            nickname=data.get("nickname"),
            last_arrival_airport_id=int(last_airport) if last_airport is not None else None,
        )


class InMemoryUserRepository:
    """
    User storage held in memory.

    For testing and development. Use SupabaseUserRepository for production.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_union_id(self, union_id: str) -> Optional[User]:
        for user in self._users.values():
            if user.union_id == union_id:
                return user
        return None

    def create(
        self,
        union_id: str,
        open_id: Optional[str],
        provider: str,
        nickname: str,
    ) -> User:
        with self._lock:
            existing = self.get_by_union_id(union_id)
            if existing is not None:
                return existing
            user = User(
                id=str(uuid.uuid4()),
                union_id=union_id,
                open_id=open_id,
                provider=provider,
                nickname=nickname,
            )
            self._users[user.id] = user
            return user

    def update(self, user_id: str, **fields: Any) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=fields)
            self._users[user_id] = updated
            return updated
