from courtside.api.analysis import router as analysis_router
from courtside.api.challenges import router as challenges_router
from courtside.api.health import router as health_router
from courtside.api.library import router as library_router

__all__ = [
    "analysis_router",
    "challenges_router",
    "health_router",
    "library_router",
]
