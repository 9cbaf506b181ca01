from .base import RateSource
from .providers import HttpRateSource, StaticRateSource, make_rate_source

__all__ = ["RateSource", "HttpRateSource", "StaticRateSource", "make_rate_source"]
