"""Adapters for external services."""

from .faceit_api import FaceitAPIAdapter, FaceitAPIError, RateLimitError

__all__ = ["FaceitAPIAdapter", "FaceitAPIError", "RateLimitError"]
