"""
Flight record API endpoints.

All endpoints act on the authenticated user's own records.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_flight_service
from shared.models import AuthenticatedUser

from .interfaces import IFlightService
from .models import (
    CreateFlightRequest,
    CreateFlightResponse,
    FlightRecordRef,
    FlightTransitionResponse,
    FlightListResponse,
    FlightStats,
)

router = APIRouter()


@router.post("", response_model=CreateFlightResponse)
async def create_flight(
    request: CreateFlightRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFlightService = Depends(get_flight_service),
) -> CreateFlightResponse:
    """
    Start a new trip.

    Any trip still in flight is canceled; the response reports how many.
    """
    return await service.create_trip(
        user.subject_id,
        departure_code=request.resolved_departure_code,
        arrival_code=request.resolved_arrival_code,
        distance=request.distance,
        flight_number=request.flight_number,
        seat_number=request.seat_number,
    )


@router.post("/complete", response_model=FlightTransitionResponse)
async def complete_flight(
    request: FlightRecordRef,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFlightService = Depends(get_flight_service),
) -> FlightTransitionResponse:
    """Mark an in-flight trip as arrived."""
    record = await service.complete_trip(user.subject_id, request.id)
    return FlightTransitionResponse(record=record)


@router.post("/cancel", response_model=FlightTransitionResponse)
async def cancel_flight(
    request: FlightRecordRef,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFlightService = Depends(get_flight_service),
) -> FlightTransitionResponse:
    """Cancel an in-flight trip."""
    record = await service.cancel_trip(user.subject_id, request.id)
    return FlightTransitionResponse(record=record)


@router.get("", response_model=FlightListResponse)
async def list_flights(
    page: int = Query(default=1, description="Page number (1-indexed)"),
    page_size: int = Query(default=10, alias="pageSize", description="Items per page (max 100)"),
    history_range: str = Query(default="all", alias="range", description="all, day, week or month"),
    status: Optional[str] = Query(default=None, description="Filter by status"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFlightService = Depends(get_flight_service),
) -> FlightListResponse:
    """
    List the current user's trips.

    Returns paginated results, most recent departure first. Out-of-range
    paging values are clamped rather than rejected.
    """
    return await service.list_trips(user.subject_id, page, page_size, history_range, status)


@router.get("/stats", response_model=FlightStats)
async def flight_stats(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFlightService = Depends(get_flight_service),
) -> FlightStats:
    """Total distance and number of arrived trips."""
    return await service.get_stats(user.subject_id)
