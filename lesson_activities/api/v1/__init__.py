"""
API v1 routes.
"""

from fastapi import APIRouter

from lesson_activities.api.v1 import activities, payloads

router = APIRouter()

router.include_router(activities.router, tags=["Activities"])
router.include_router(payloads.router, tags=["Payloads"])
