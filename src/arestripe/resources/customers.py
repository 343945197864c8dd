r"""Customer operations."""

from __future__ import annotations

__all__ = ["Customers"]

from arestripe.resources.base import StripeMethod, StripeResource


class Customers(StripeResource):
    """Operations on ``/v1/customers``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arestripe import Stripe
        >>> async def main():
        ...     async with Stripe("sk_test_123") as stripe:
        ...         customer = await stripe.customers.create({"description": "Some customer"})
        ...         return await stripe.customers.retrieve(customer.id)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    create = StripeMethod("POST", "customers")
    retrieve = StripeMethod("GET", "customers/{id}")
    update = StripeMethod("POST", "customers/{id}")
    delete = StripeMethod("DELETE", "customers/{id}")
    list = StripeMethod("GET", "customers")

    create_source = StripeMethod("POST", "customers/{customer}/sources")
    retrieve_source = StripeMethod("GET", "customers/{customer}/sources/{id}")
    delete_source = StripeMethod("DELETE", "customers/{customer}/sources/{id}")
    list_sources = StripeMethod("GET", "customers/{customer}/sources")
