r"""Charge operations."""

from __future__ import annotations

__all__ = ["Charges"]

from arestripe.resources.base import StripeMethod, StripeResource


class Charges(StripeResource):
    """Operations on ``/v1/charges``."""

    create = StripeMethod("POST", "charges")
    retrieve = StripeMethod("GET", "charges/{id}")
    update = StripeMethod("POST", "charges/{id}")
    capture = StripeMethod("POST", "charges/{id}/capture")
    list = StripeMethod("GET", "charges")
