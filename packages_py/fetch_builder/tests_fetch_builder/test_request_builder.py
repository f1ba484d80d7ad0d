"""
Tests for RequestBuilder construction and configuration.
"""
from unittest.mock import MagicMock

import httpx
import pytest
from pydantic import BaseModel

from fetch_builder import (
    DEFAULT_CONTENT_TYPE,
    BasicAuth,
    BearerAuth,
    FormField,
    FormFile,
    InvalidURLError,
    MissingTokenError,
    NoAuth,
    NoMethodError,
    SerializationError,
    get,
    get_json,
    new_client,
    post_form,
    post_json,
)
from fetch_builder.core.result import Err, Ok

URL = "https://api.com/api/v1/example/"
BAD_URL = "api.com/api/v1/example/"


def test_get():
    hc = get(URL)
    assert hc.method == "GET"
    assert hc.url == URL
    assert hc.body is None
    assert hc.error is None
    assert isinstance(hc.state, Ok)


def test_get_default_headers():
    assert get(URL).headers == {"Content-Type": DEFAULT_CONTENT_TYPE}
    assert get_json(URL).headers == {"Content-Type": DEFAULT_CONTENT_TYPE}


def test_new_client_has_no_method():
    hc = new_client(URL)
    assert hc.method == ""
    assert hc.headers == {}


def test_post_json():
    body = {"Text": "this is some text", "Token": "mySecretToken"}
    hc = post_json(URL, body)
    assert hc.method == "POST"
    assert hc.url == URL
    assert hc.headers == {"Content-Type": DEFAULT_CONTENT_TYPE}
    assert hc.body == b'{"Text":"this is some text","Token":"mySecretToken"}'


def test_post_json_pydantic_model():
    class RequestBody(BaseModel):
        text: str
        token: str

    hc = post_json(URL, RequestBody(text="hello", token="t"))
    assert hc.body == b'{"text":"hello","token":"t"}'


def test_post_json_serialization_error():
    hc = post_json(URL, {"value": object()})
    assert isinstance(hc.error, SerializationError)
    assert hc.body is None
    # Method was set before the body failed to encode
    assert hc.method == "POST"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_post_json_non_finite_float_is_error(value):
    hc = post_json(URL, {"v": value})
    assert isinstance(hc.error, SerializationError)
    assert hc.body is None


def test_post_json_keeps_non_ascii():
    hc = post_json(URL, {"name": "Zoë"})
    assert hc.body == '{"name":"Zoë"}'.encode("utf-8")


def test_post_error_set():
    hc = post_json(BAD_URL, {"Text": "this is some text"})
    assert isinstance(hc.error, InvalidURLError)
    assert hc.method == ""
    assert hc.body is None
    assert hc.headers == {}
    assert isinstance(hc.state, Err)


def test_add_headers():
    hc = get(URL).add_headers({"X-Auth-Token": "mySecretToken"})
    assert hc.headers == {
        "Content-Type": DEFAULT_CONTENT_TYPE,
        "X-Auth-Token": "mySecretToken",
    }


def test_add_headers_overwrites():
    hc = get(URL).add_headers({"Content-Type": "text/plain"}).add_headers({"Content-Type": "text/csv"})
    assert hc.headers == {"Content-Type": "text/csv"}


def test_add_headers_overwrite_ignores_case():
    hc = get(URL).add_headers({"content-type": "text/plain"})
    assert hc.headers == {"content-type": "text/plain"}


def test_add_headers_error_set():
    hc = get(BAD_URL).add_headers({"X-Auth-Token": "mySecretToken"})
    assert hc.error is not None
    assert hc.headers == {}


def test_basic_auth():
    hc = get(URL).basic_auth("user", "myPassword")
    assert isinstance(hc.auth, BasicAuth)
    assert hc.auth.username == "user"
    assert hc.auth.password.get_secret_value() == "myPassword"


def test_basic_auth_error_set():
    hc = get(BAD_URL).basic_auth("user", "myPassword")
    assert hc.error is not None
    assert isinstance(hc.auth, NoAuth)


@pytest.mark.parametrize("username, password", [("", ""), ("user", ""), ("", "pass")])
def test_basic_auth_empty_args_is_noop(username, password):
    hc = get(URL).basic_auth(username, password)
    assert isinstance(hc.auth, NoAuth)
    assert hc.error is None


def test_bearer_auth():
    hc = get(URL).bearer_auth("someToken")
    assert isinstance(hc.auth, BearerAuth)
    assert hc.auth.token.get_secret_value() == "someToken"


def test_bearer_auth_bad_url():
    hc = get(BAD_URL).bearer_auth("someToken")
    assert isinstance(hc.auth, NoAuth)
    assert isinstance(hc.error, InvalidURLError)


def test_bearer_auth_empty_token():
    hc = get(URL).bearer_auth("")
    assert isinstance(hc.auth, NoAuth)
    assert isinstance(hc.error, MissingTokenError)


def test_failed_state_keeps_first_error():
    hc = get(URL).bearer_auth("").add_headers({"X-Other": "1"}).bearer_auth("")
    assert isinstance(hc.error, MissingTokenError)
    assert "X-Other" not in hc.headers
    first = hc.error
    hc.bearer_auth("")
    assert hc.error is first


def test_secrets_not_in_repr():
    hc = get(URL).basic_auth("user", "myPassword")
    assert "myPassword" not in repr(hc.auth)


def test_post_form(template_csv):
    hc = post_form(
        URL,
        FormFile(file_name="example", file=template_csv),
        FormField(name="project_id", value="123456"),
        FormField(name="token", value="mySecretToken"),
    )
    assert hc.method == "POST"
    assert hc.error is None
    assert hc.body is not None
    assert hc.headers["Content-Type"].startswith("multipart/form-data;")


def test_post_form_content_type_wins_over_default(template_csv):
    hc = post_form(URL, FormFile(file_name="example", file=template_csv))
    assert list(hc.headers) == ["Content-Type"]
    assert DEFAULT_CONTENT_TYPE not in hc.headers.values()


def test_execute_invalid_url_no_network():
    transport = MagicMock(spec=httpx.Client)
    hc = get("api/v1/example", transport=transport)
    with pytest.raises(InvalidURLError):
        hc.execute()
    transport.send.assert_not_called()
    transport.build_request.assert_not_called()


def test_execute_twice_same_error():
    hc = get(BAD_URL)
    with pytest.raises(InvalidURLError) as first:
        hc.execute()
    with pytest.raises(InvalidURLError) as second:
        hc.execute()
    assert first.value is second.value


def test_execute_no_method():
    transport = MagicMock(spec=httpx.Client)
    hc = get(URL, transport=transport).reset_method()
    assert hc.method == ""
    with pytest.raises(NoMethodError) as first:
        hc.execute()
    with pytest.raises(NoMethodError) as second:
        hc.execute()
    assert first.value is second.value
    transport.send.assert_not_called()


def test_new_client_execute_no_method():
    with pytest.raises(NoMethodError):
        new_client(URL, transport=MagicMock(spec=httpx.Client)).execute()


def test_load_invalid_url():
    with pytest.raises(InvalidURLError):
        get("api/v1/example").load()


def test_deferred_error_is_logged(caplog):
    with caplog.at_level("WARNING", logger="fetch_builder"):
        get(BAD_URL)
    assert "deferred error recorded" in caplog.text
