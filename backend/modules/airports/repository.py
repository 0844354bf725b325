"""
Airport repositories.

SupabaseAirportRepository reads the `airports` table; InMemoryAirportRepository
holds rows in a dict for local runs and tests.
"""

import re
from typing import Optional, Any, Iterable

from shared.repository import BaseRepository
from .models import Airport

# Characters with meaning inside a PostgREST or=(...) filter
_FILTER_UNSAFE = re.compile(r"[,()*%]")


class SupabaseAirportRepository(BaseRepository[Airport]):
    """Airport data access backed by Supabase."""

    TABLE = "airports"
    # Rows requested per list_all page; Supabase caps each response at max_rows
    PAGE_SIZE = 1000

    def get_by_id(self, airport_id: int) -> Optional[Airport]:
        result = self._db.table(self.TABLE).select("*").eq("id", airport_id).execute()
        row = self._first(result.data)
        return self._map_to_airport(row) if row else None

    def get_by_code(self, code: str) -> Optional[Airport]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("code", code)
            .order("id")
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        return self._map_to_airport(row) if row else None

    def get_many_by_ids(self, airport_ids: Iterable[int]) -> dict[int, Airport]:
        ids = sorted(set(airport_ids))
        if not ids:
            return {}
        result = self._db.table(self.TABLE).select("*").in_("id", ids).execute()
        airports = [self._map_to_airport(row) for row in result.data or []]
        return {airport.id: airport for airport in airports}

    def list_all(self) -> list[Airport]:
        """Read the whole table in id order, one PostgREST page at a time."""
        airports: list[Airport] = []
        start = 0
        while True:
            result = (
                self._db.table(self.TABLE)
                .select("*")
                .order("id")
                .range(start, start + self.PAGE_SIZE - 1)
                .execute()
            )
            rows = result.data or []
            airports.extend(self._map_to_airport(row) for row in rows)
            if not rows:
                return airports
            start += len(rows)

    def search(self, code_fragment: str, name_fragment: str) -> list[Airport]:
        code_fragment = _FILTER_UNSAFE.sub("", code_fragment)
        name_fragment = _FILTER_UNSAFE.sub("", name_fragment)
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .or_(f"code.ilike.*{code_fragment}*,name.ilike.*{name_fragment}*")
            .execute()
        )
        return [self._map_to_airport(row) for row in result.data or []]

    def _map_to_airport(self, data: dict[str, Any]) -> Airport:
        """Map database row to Airport model."""
        return Airport(
            id=int(data["id"]),
            code=data["code"],
            name=data["name"],
            city=data["city"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            region=data["region"],
        )


class InMemoryAirportRepository:
    """
    Airport storage held in memory.

    For testing and development. Use SupabaseAirportRepository for production.
    """

    def __init__(self, airports: Optional[Iterable[Airport]] = None):
        self._airports: dict[int, Airport] = {}
        for airport in airports or []:
            self.add(airport)

    def add(self, airport: Airport) -> Airport:
        self._airports[airport.id] = airport
        return airport

    def get_by_id(self, airport_id: int) -> Optional[Airport]:
        return self._airports.get(airport_id)

    def get_by_code(self, code: str) -> Optional[Airport]:
        for airport_id in sorted(self._airports):
            if self._airports[airport_id].code == code:
                return self._airports[airport_id]
        return None

    def get_many_by_ids(self, airport_ids: Iterable[int]) -> dict[int, Airport]:
        return {
            airport_id: self._airports[airport_id]
            for airport_id in set(airport_ids)
            if airport_id in self._airports
        }

    def list_all(self) -> list[Airport]:
        return list(self._airports.values())

    def search(self, code_fragment: str, name_fragment: str) -> list[Airport]:
        code_fragment = code_fragment.casefold()
        name_fragment = name_fragment.casefold()
        return [
            airport
            for airport in self._airports.values()
            if code_fragment in airport.code.casefold()
            or name_fragment in airport.name.casefold()
        ]
