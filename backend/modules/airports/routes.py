"""
Airport API endpoints.

Public endpoints; no authentication required.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_airport_service

from .interfaces import IAirportService
from .models import Airport

router = APIRouter()


@router.get("/search", response_model=list[Airport])
async def search_airports(
    search_text: Optional[str] = Query(
        default=None,
        alias="searchText",
        description="Airport code or name fragment (at least 2 characters)",
    ),
    service: IAirportService = Depends(get_airport_service),
) -> list[Airport]:
    """
    Search airports by code or name.

    Returns an empty list for queries shorter than two characters.
    """
    return await service.search(search_text)


@router.get("/near-circle", response_model=list[Airport])
async def search_airports_near_circle(
    latitude: Optional[float] = Query(default=None, description="Centre latitude"),
    longitude: Optional[float] = Query(default=None, description="Centre longitude"),
    radius: Optional[float] = Query(default=None, description="Ring radius in km"),
    service: IAirportService = Depends(get_airport_service),
) -> list[Airport]:
    """
    Find airports on a ring around a point.

    Matches airports between radius - 20 km and radius + 20 km from the
    centre.
    """
    return await service.find_near(latitude, longitude, radius)
