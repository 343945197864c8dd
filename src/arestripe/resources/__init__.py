r"""API resources exposed on ``arestripe.Stripe``."""

from __future__ import annotations

__all__ = [
    "Charges",
    "Customers",
    "Refunds",
    "RequestOptions",
    "StripeMethod",
    "StripeResource",
]

from arestripe.resources.base import RequestOptions, StripeMethod, StripeResource
from arestripe.resources.charges import Charges
from arestripe.resources.customers import Customers
from arestripe.resources.refunds import Refunds
