"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from techcare.api.routes import access, bookings, technicians

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Technicians
api_router.include_router(technicians.router, prefix="/technicians", tags=["Technicians"])

# Navigation access
api_router.include_router(access.router, prefix="/access", tags=["Access"])
