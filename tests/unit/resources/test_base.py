r"""Unit tests for resource methods and request options."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from arestripe.resources import RequestOptions, StripeMethod, StripeResource


class Widgets(StripeResource):
    create = StripeMethod("post", "widgets")
    retrieve = StripeMethod("GET", "widgets/{id}")
    create_part = StripeMethod("POST", "widgets/{widget}/parts/{id}")


@pytest.fixture
def client() -> Mock:
    return Mock()


#######################################
#     Tests for RequestOptions         #
#######################################


def test_request_options_defaults() -> None:
    options = RequestOptions()
    assert options.api_key is None
    assert options.idempotency_key is None
    assert options.stripe_account is None
    assert options.stripe_version is None
    assert options.max_network_retries is None
    assert options.timeout is None


def test_request_options_coerce_none() -> None:
    assert RequestOptions.coerce(None) == RequestOptions()


def test_request_options_coerce_instance() -> None:
    options = RequestOptions(idempotency_key="order-42")
    assert RequestOptions.coerce(options) is options


def test_request_options_coerce_mapping() -> None:
    options = RequestOptions.coerce({"stripe_account": "acct_1", "max_network_retries": 2})
    assert options == RequestOptions(stripe_account="acct_1", max_network_retries=2)


def test_request_options_coerce_unknown_keys() -> None:
    """Test that misspelled options are reported."""
    with pytest.raises(TypeError, match=r"unknown request options: idempotencyKey"):
        RequestOptions.coerce({"idempotencyKey": "order-42"})


def test_request_options_coerce_invalid_type() -> None:
    with pytest.raises(TypeError, match=r"options must be a RequestOptions or a mapping"):
        RequestOptions.coerce("order-42")  # type: ignore[arg-type]


####################################
#     Tests for StripeMethod        #
####################################


def test_stripe_method_attributes() -> None:
    method = Widgets.create_part
    assert isinstance(method, StripeMethod)
    assert method.method == "POST"
    assert method.url_args == ("widget", "id")
    assert method.name == "Widgets.create_part"
    assert repr(method) == "StripeMethod('POST', 'widgets/{widget}/parts/{id}')"


def test_stripe_method_render_path() -> None:
    assert Widgets.retrieve.render_path("wid_1") == "widgets/wid_1"
    assert Widgets.create_part.render_path("wid_1", "part 2") == "widgets/wid_1/parts/part%202"


def test_stripe_method_render_path_escapes_slashes() -> None:
    assert Widgets.retrieve.render_path("../charges") == "widgets/..%2Fcharges"


def test_stripe_method_missing_url_argument(client: Mock) -> None:
    """Test that a missing URL argument raises synchronously."""
    with pytest.raises(TypeError, match=r"Widgets.create_part\(\) missing required URL argument\(s\): 'id'"):
        Widgets(client).create_part("wid_1")
    client.request.assert_not_called()


@pytest.mark.parametrize("value", [None, ""])
def test_stripe_method_empty_url_argument(client: Mock, value: str | None) -> None:
    with pytest.raises(TypeError, match=r"URL argument 'id' must be a non-empty string"):
        Widgets(client).retrieve(value)


def test_stripe_method_call_keywords(client: Mock) -> None:
    """Test that a call forwards method, path, params and options."""
    callback = Mock()
    result = Widgets(client).retrieve(
        "wid_1", params={"expand": ["parts"]}, options={"stripe_account": "acct_1"}, callback=callback
    )
    assert result is client.request.return_value
    client.request.assert_called_once_with(
        "GET",
        "widgets/wid_1",
        {"expand": ["parts"]},
        {"stripe_account": "acct_1"},
        callback=callback,
    )


def test_stripe_method_call_positional(client: Mock) -> None:
    """Test that params and options may follow the URL arguments."""
    Widgets(client).create_part("wid_1", "part_1", {"size": 3}, {"idempotency_key": "k"})
    client.request.assert_called_once_with(
        "POST", "widgets/wid_1/parts/part_1", {"size": 3}, {"idempotency_key": "k"}, callback=None
    )


def test_stripe_method_call_trailing_callback(client: Mock) -> None:
    """Test that a trailing callable is taken as the callback."""
    callback = Mock()
    Widgets(client).create({"name": "w"}, callback)
    client.request.assert_called_once_with("POST", "widgets", {"name": "w"}, None, callback=callback)


def test_stripe_method_call_without_params(client: Mock) -> None:
    Widgets(client).create()
    client.request.assert_called_once_with("POST", "widgets", None, None, callback=None)


def test_stripe_method_too_many_arguments(client: Mock) -> None:
    with pytest.raises(TypeError, match=r"takes at most 2 arguments after the URL arguments"):
        Widgets(client).create({}, {}, {})


def test_stripe_resource_repr(client: Mock) -> None:
    assert repr(Widgets(client)) == "Widgets(methods=['create', 'create_part', 'retrieve'])"
