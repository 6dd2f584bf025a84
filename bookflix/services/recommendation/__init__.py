from .blending import RecommendationBlending, walk_pool
from .engine import RecommendationEngine

__all__ = ["RecommendationBlending", "RecommendationEngine", "walk_pool"]
