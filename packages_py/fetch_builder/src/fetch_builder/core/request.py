"""
Request builder: accumulate method, URL, headers, body and auth, then execute once.
"""
import base64
import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar, overload

import httpx
from pydantic import ConfigDict, SecretStr, TypeAdapter

from ..config import DEFAULT_CONTENT_TYPE, LOG_PREFIX, SUCCESS_STATUS_CODES, get_default_transport
from ..errors import (
    FormWriteError,
    InvalidURLError,
    MissingTokenError,
    NoMethodError,
    SerializationError,
    StatusError,
)
from ..types import AuthScheme, BasicAuth, BearerAuth, FormField, FormFile, HttpMethod, RequestSpec
from .multipart import encode_form
from .result import BuilderState, Err, Ok
from .validate import check_request, validate_request_uri

logger = logging.getLogger(__name__)

T = TypeVar("T")

# NaN and Infinity pass through as floats so json.dumps can reject them
_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any, config=ConfigDict(ser_json_inf_nan="constants"))


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 4 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 4:
        return "*" * len(val)
    return val[:4] + "*" * (len(val) - 4)


def _format_body(body: Optional[bytes]) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None:
        return "<empty>"
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(body)} bytes>"
    if len(text) > 5000:
        return text[:5000] + "... (truncated)"
    return text


def _encode_json(body: Any) -> bytes:
    """
    Encode ``body`` as compact UTF-8 JSON.

    Pydantic models, dataclasses and datetimes are converted first.
    NaN and Infinity raise ValueError instead of becoming null.
    """
    value = _ANY_ADAPTER.dump_python(body, mode="json")
    return json.dumps(value, allow_nan=False, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _decode_json(content: bytes) -> Any:
    """Decode the first JSON value in ``content``; trailing data is ignored."""
    text = content.decode("utf-8")
    start = len(text) - len(text.lstrip())
    value, _ = json.JSONDecoder().raw_decode(text, start)
    return value


def _fail(error: Exception, spec: RequestSpec) -> Err:
    logger.warning(f"{LOG_PREFIX} deferred error recorded for {spec.url!r}: {error}")
    return Err(error=error, spec=spec)


def _auth_header(auth: AuthScheme) -> Optional[Dict[str, str]]:
    """Authorization header for the configured scheme, if any."""
    if isinstance(auth, BasicAuth):
        credentials = f"{auth.username}:{auth.password.get_secret_value()}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {encoded}"}
    if isinstance(auth, BearerAuth):
        return {"Authorization": f"Bearer {auth.token.get_secret_value()}"}
    return None


class RequestBuilder:
    """
    Fluent builder for a single HTTP request.

    Construction never raises. Validation failures are recorded as a
    deferred error; once recorded, every configuration call is a no-op
    and ``execute()`` raises that error without touching the network.

    Default header policy: GET and JSON POST builders start with
    ``Content-Type: application/json;charset=UTF-8``. ``add_headers`` may
    overwrite it. Multipart builders always carry the multipart boundary
    content type instead.
    """

    def __init__(self, url: str, transport: Optional[httpx.Client] = None):
        self._transport = transport
        spec = RequestSpec(url=url)
        try:
            validate_request_uri(url)
        except InvalidURLError as e:
            self._state: BuilderState = _fail(e, spec)
        else:
            self._state = Ok(spec)
        logger.debug(f"{LOG_PREFIX} RequestBuilder: url={url!r}, valid={not self._state.is_err}")

    # Accessors

    @property
    def url(self) -> str:
        return self._state.spec.url

    @property
    def method(self) -> HttpMethod:
        return self._state.spec.method

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._state.spec.headers)

    @property
    def body(self) -> Optional[bytes]:
        return self._state.spec.body

    @property
    def auth(self) -> AuthScheme:
        return self._state.spec.auth

    @property
    def error(self) -> Optional[Exception]:
        """The deferred error, or None."""
        if isinstance(self._state, Err):
            return self._state.error
        return None

    @property
    def state(self) -> BuilderState:
        return self._state

    # Construction steps used by the entry points

    def _set_method(self, method: HttpMethod) -> "RequestBuilder":
        self._state = self._state.map(lambda spec: Ok(spec.with_method(method)))
        return self

    def _set_json_body(self, body: Any) -> "RequestBuilder":
        def apply(spec: RequestSpec) -> BuilderState:
            try:
                encoded = _encode_json(body)
            except (TypeError, ValueError) as e:
                return _fail(SerializationError(e), spec)
            logger.debug(f"{LOG_PREFIX} json body: {_format_body(encoded)}")
            return Ok(spec.with_body(encoded))

        self._state = self._state.map(apply)
        return self

    def _set_form_body(self, form_file: FormFile, form_fields: tuple) -> "RequestBuilder":
        def apply(spec: RequestSpec) -> BuilderState:
            try:
                body, content_type = encode_form(spec.url, form_file, form_fields)
            except FormWriteError as e:
                return _fail(e, spec)
            # Boundary header always wins over any seeded content type
            return Ok(spec.with_body(body).with_headers({"Content-Type": content_type}))

        self._state = self._state.map(apply)
        return self

    # Configuration

    def add_headers(self, headers: Dict[str, str]) -> "RequestBuilder":
        """Merge headers into the request, overwriting existing keys."""
        def apply(spec: RequestSpec) -> BuilderState:
            logger.debug(f"{LOG_PREFIX} add_headers: keys={sorted(headers)}")
            return Ok(spec.with_headers(headers))

        self._state = self._state.map(apply)
        return self

    def basic_auth(self, username: str, password: str) -> "RequestBuilder":
        """Send HTTP Basic credentials. Ignored if either value is empty."""
        def apply(spec: RequestSpec) -> BuilderState:
            if not username or not password:
                logger.debug(f"{LOG_PREFIX} basic_auth: empty username or password, ignored")
                return Ok(spec)
            logger.debug(
                f"{LOG_PREFIX} basic_auth: username={username}, password={_mask_value(password)}"
            )
            return Ok(spec.with_auth(BasicAuth(username=username, password=SecretStr(password))))

        self._state = self._state.map(apply)
        return self

    def bearer_auth(self, token: str) -> "RequestBuilder":
        """Send a Bearer token. An empty token is a deferred error."""
        def apply(spec: RequestSpec) -> BuilderState:
            if not token:
                return _fail(MissingTokenError(), spec)
            logger.debug(f"{LOG_PREFIX} bearer_auth: token={_mask_value(token)}")
            return Ok(spec.with_auth(BearerAuth(token=SecretStr(token))))

        self._state = self._state.map(apply)
        return self

    def reset_method(self) -> "RequestBuilder":
        """Clear the method. Executing afterwards fails with NoMethodError."""
        return self._set_method("")

    # Execution

    def _transport_or_default(self) -> httpx.Client:
        if self._transport is None:
            self._transport = get_default_transport()
        return self._transport

    def execute(self) -> httpx.Response:
        """
        Send the request and return the response.

        The response is returned unread; the caller must read and close it.
        Only 200, 201, 202 and 204 count as success.

        Raises:
            FetchBuilderError: the deferred error, NoMethodError, or
                StatusError carrying the response body.
            httpx.RequestError: transport failures, unchanged.
        """
        if isinstance(self._state, Err):
            raise self._state.error

        try:
            spec = check_request(self._state.spec)
        except NoMethodError as e:
            self._state = _fail(e, self._state.spec)
            raise

        headers = dict(spec.headers)
        auth_headers = _auth_header(spec.auth)
        if auth_headers:
            headers.update(auth_headers)

        transport = self._transport_or_default()
        request = transport.build_request(spec.method, spec.url, content=spec.body, headers=headers)

        logger.debug(f"{LOG_PREFIX} Request: {spec.method} {spec.url} auth={spec.auth.type}")

        try:
            response = transport.send(request, stream=True)
        except httpx.RequestError as e:
            logger.error(f"{LOG_PREFIX} Request failed: {e}")
            raise

        logger.debug(f"{LOG_PREFIX} Response: {response.status_code} {spec.method} {spec.url}")

        if response.status_code not in SUCCESS_STATUS_CODES:
            try:
                content = response.read()
            finally:
                response.close()
            text = content.decode("utf-8", errors="replace")
            logger.error(f"{LOG_PREFIX} Unexpected status {response.status_code}: {_format_body(content)}")
            raise StatusError(response.status_code, text)

        return response

    @overload
    def load(self) -> Any: ...

    @overload
    def load(self, target: Type[T]) -> T: ...

    def load(self, target: Any = None) -> Any:
        """
        Execute the request and decode the JSON response body.

        Only the first JSON value is decoded; anything after it is ignored.
        With a target type (pydantic model, dataclass, ``list[Model]``...)
        that value is validated into it. The response is always closed.
        """
        response = self.execute()
        try:
            value = _decode_json(response.read())
            if target is None:
                return value
            return TypeAdapter(target).validate_python(value)
        finally:
            response.close()


# Entry points

def new_client(url: str, transport: Optional[httpx.Client] = None) -> RequestBuilder:
    """Builder with no method and no default headers."""
    return RequestBuilder(url, transport)


def get(url: str, transport: Optional[httpx.Client] = None) -> RequestBuilder:
    """Prepare a GET request."""
    return (
        RequestBuilder(url, transport)
        ._set_method("GET")
        .add_headers({"Content-Type": DEFAULT_CONTENT_TYPE})
    )


def get_json(url: str, transport: Optional[httpx.Client] = None) -> RequestBuilder:
    """Prepare a GET request with a JSON content type."""
    return get(url, transport).add_headers({"Content-Type": DEFAULT_CONTENT_TYPE})


def post_json(url: str, body: Any, transport: Optional[httpx.Client] = None) -> RequestBuilder:
    """Prepare a POST request with ``body`` encoded as JSON."""
    return (
        RequestBuilder(url, transport)
        ._set_method("POST")
        .add_headers({"Content-Type": DEFAULT_CONTENT_TYPE})
        ._set_json_body(body)
    )


post = post_json


def post_form(
    url: str,
    form_file: FormFile,
    *form_fields: FormField,
    transport: Optional[httpx.Client] = None,
) -> RequestBuilder:
    """Prepare a multipart POST with text fields and one file part named ``file``."""
    return (
        RequestBuilder(url, transport)
        ._set_method("POST")
        ._set_form_body(form_file, form_fields)
    )
