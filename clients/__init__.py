"""Clients package for external API integrations."""

from .stripe_client import PaymentClient, expandable_id, provider_errors

__all__ = ["PaymentClient", "expandable_id", "provider_errors"]
