"""Domain services for UniScout."""

from .freshness_policy import FreshnessPolicy

__all__ = ["FreshnessPolicy"]
