"""Domain services."""

from ricestock.core.services import metrics

__all__ = ["metrics"]
