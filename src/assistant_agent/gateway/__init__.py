"""Expose the model gateway for the hosted and local-compatible backend dialects."""

from .core import ModelGateway, configure, DEFAULT_MODEL
from .dialects import ApiType, DialectProfile, PROFILES, is_small_model

__all__ = ["ModelGateway", "configure", "DEFAULT_MODEL", "ApiType", "DialectProfile", "PROFILES", "is_small_model"]
