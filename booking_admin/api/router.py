"""
API router aggregating every endpoint module.
"""
from fastapi import APIRouter

from booking_admin.api.endpoints import activity_logs, auth, bookings, health, roles, rooms, users

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(roles.router)
router.include_router(rooms.router)
router.include_router(bookings.router)
router.include_router(activity_logs.router)
