"""
API v1 router setup
All routes act for the tenant named in the X-Business-ID header
"""
from fastapi import APIRouter

from bookly.api.v1.dashboard import scheduling, appointments, classes, waitlist, services, staff

api_v1_router = APIRouter()

api_v1_router.include_router(scheduling.router, tags=["Scheduling"])
api_v1_router.include_router(appointments.router, tags=["Appointments"])
api_v1_router.include_router(classes.router, tags=["Classes"])
api_v1_router.include_router(waitlist.router, tags=["Waitlist"])
api_v1_router.include_router(services.router, tags=["Services"])
api_v1_router.include_router(staff.router, tags=["Staff"])
