"""
zamm_pricing: integer-only quoting for ZAMM pools and zCurve sales.
"""

from .config import PricingConfig
from .errors import (
    InvalidAssetPair,
    InvalidCurveParameters,
    OutputExceedsReserves,
    PricingError,
    ToleranceOutOfRange,
)

__version__ = "0.1.0"

__all__ = [
    "PricingConfig",
    "InvalidAssetPair",
    "InvalidCurveParameters",
    "OutputExceedsReserves",
    "PricingError",
    "ToleranceOutOfRange",
    "__version__",
]
