"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the complaint desk
"""
from fastapi import APIRouter

from complaintdesk.api.v1 import (
    admins,
    analytics,
    auth,
    categories,
    changes,
    complaints,
    notes,
    notifications,
)

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(auth.router)
router.include_router(complaints.router)
router.include_router(changes.router)
router.include_router(notes.router)
router.include_router(categories.router)
router.include_router(admins.router)
router.include_router(notifications.router)
router.include_router(analytics.router)
