from fastapi import APIRouter

from app.routers import attendance, auth, export, leaves, notifications, payroll, users

# Routers are aggregated here; main.py mounts this hub under the API prefix.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(attendance.router)
api_router.include_router(leaves.router)
api_router.include_router(payroll.router)
api_router.include_router(notifications.router)
api_router.include_router(users.router)
api_router.include_router(export.router)
