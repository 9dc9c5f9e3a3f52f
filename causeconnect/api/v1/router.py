from fastapi import APIRouter
from causeconnect.api.v1.endpoints import (
    auth,
    users,
    events,
    feeds,
    posts,
    comments,
    donations,
    squads,
    notifications,
    chat,
    storage,
)

# ============================================================
# Main API v1 Router
# ============================================================
# Every route keeps its function-style path (/event-list, /user-follow, ...)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(events.router)
api_router.include_router(feeds.router)
api_router.include_router(posts.router)
api_router.include_router(comments.router)
api_router.include_router(donations.router)
api_router.include_router(squads.router)
api_router.include_router(notifications.router)
api_router.include_router(chat.router)
api_router.include_router(storage.router)
