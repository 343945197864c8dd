from __future__ import annotations

import arestripe


def test_version() -> None:
    assert isinstance(arestripe.__version__, str)
    assert arestripe.__version__


def test_all_exports_exist() -> None:
    for name in arestripe.__all__:
        assert hasattr(arestripe, name), name


def test_error_classes_share_base() -> None:
    for name in arestripe.__all__:
        if name.startswith("Stripe") and name.endswith("Error"):
            assert issubclass(getattr(arestripe, name), arestripe.StripeError)
