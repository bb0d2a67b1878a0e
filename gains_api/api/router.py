from fastapi import APIRouter

from gains_api.api.routes import ai, influencers, webhooks

api_router = APIRouter(prefix="/api")

api_router.include_router(ai.router)
api_router.include_router(webhooks.router)
api_router.include_router(influencers.router)
