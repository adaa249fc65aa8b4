"""
API Router Configuration
"""
from fastapi import APIRouter
from app.api.endpoints import auth, users, doctors, statistics, admin

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(statistics.router, prefix="/stats", tags=["Statistics"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
