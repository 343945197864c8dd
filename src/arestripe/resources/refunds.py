r"""Refund operations."""

from __future__ import annotations

__all__ = ["Refunds"]

from arestripe.resources.base import StripeMethod, StripeResource


class Refunds(StripeResource):
    """Operations on ``/v1/refunds``."""

    create = StripeMethod("POST", "refunds")
    retrieve = StripeMethod("GET", "refunds/{id}")
    update = StripeMethod("POST", "refunds/{id}")
    list = StripeMethod("GET", "refunds")
