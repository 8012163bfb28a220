"""Utilities package."""

from .money import MAX_CENTS, dollars_to_cents
from .urls import CHECKOUT_SESSION_PLACEHOLDER, build_url

__all__ = [
    "CHECKOUT_SESSION_PLACEHOLDER",
    "MAX_CENTS",
    "build_url",
    "dollars_to_cents",
]
