from taxengine.recommendation.engine import recommend
from taxengine.recommendation.rules import RECOMMENDATION_RULES

__all__ = ["RECOMMENDATION_RULES", "recommend"]
