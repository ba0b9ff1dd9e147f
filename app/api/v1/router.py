"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings, calendar, listings, pricing

api_router = APIRouter()

# Pricing
api_router.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])

# Listing calendars
api_router.include_router(listings.router, prefix="/listings", tags=["Listings"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# External calendars
api_router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
