# attendguard/api/v1/router.py
from fastapi import APIRouter
from attendguard.api.v1 import (
    sessions,
    attendance,
    enrollments,
    audit,
)

api_router = APIRouter()

api_router.include_router(sessions.router,    prefix="/sessions",    tags=["sessions"])
api_router.include_router(attendance.router,  prefix="/sessions",    tags=["attendance"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
api_router.include_router(audit.router,       prefix="/audit",       tags=["audit"])
