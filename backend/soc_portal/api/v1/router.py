from fastapi import APIRouter
from soc_portal.api.v1.endpoints import auth, notifications, activity_log, roster, users, settings, permissions, welcome

api_router = APIRouter()


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "soc-portal-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(activity_log.router, prefix="/activity_log", tags=["Activity Log"])
api_router.include_router(roster.router, prefix="/roster", tags=["Roster"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["Permissions"])
api_router.include_router(welcome.router, prefix="/welcome_check", tags=["Welcome"])
