"""
Base repository class for database access.

Provides a common abstraction layer for the Supabase-backed repositories,
encapsulating client access and row-mapping conventions.
"""

from datetime import datetime
from typing import TypeVar, Generic, Optional, Any
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for Supabase repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class AirportRepository(BaseRepository[Airport]):
            def get_by_code(self, code: str) -> Optional[Airport]:
                result = self._db.table("airports").select("*").eq("code", code).limit(1).execute()
                if not result.data:
                    return None
                return self._map_to_airport(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _first(data: Optional[list[dict[str, Any]]]) -> Optional[dict[str, Any]]:
        """Return the first row of a result set, or None."""
        if not data:
            return None
        return data[0]

    @staticmethod
    def _timestamp(value: Optional[datetime]) -> Optional[str]:
        """Serialize a datetime for PostgREST filters and payloads."""
        if value is None:
            return None
        return value.isoformat()
