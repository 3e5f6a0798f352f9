from .base import Predictor
from .sma_slope import SmaSlopePredictor

__all__ = [
    "Predictor",
    "SmaSlopePredictor",
]
