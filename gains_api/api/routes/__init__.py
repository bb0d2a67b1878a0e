from gains_api.api.routes import ai, influencers, webhooks

__all__ = [
    "ai",
    "influencers",
    "webhooks",
]
