"""
Fetch Builder - Fluent HTTP request builder
"""

__version__ = "0.1.0"

from .config import (
    DEFAULT_CONTENT_TYPE,
    SUCCESS_STATUS_CODES,
    TransportConfig,
    close_default_transport,
    create_transport,
    get_default_transport,
)
from .errors import (
    FetchBuilderError,
    FormWriteError,
    InvalidURLError,
    MissingTokenError,
    NoMethodError,
    SerializationError,
    StatusError,
)
from .types import AuthScheme, BasicAuth, BearerAuth, FormField, FormFile, HttpMethod, NoAuth, RequestSpec
from .core.request import RequestBuilder, get, get_json, new_client, post, post_form, post_json

__all__ = [
    "RequestBuilder",
    "new_client", "get", "get_json", "post", "post_json", "post_form",
    "FormField", "FormFile",
    "AuthScheme", "NoAuth", "BasicAuth", "BearerAuth", "HttpMethod", "RequestSpec",
    "TransportConfig", "create_transport", "get_default_transport", "close_default_transport",
    "DEFAULT_CONTENT_TYPE", "SUCCESS_STATUS_CODES",
    "FetchBuilderError", "InvalidURLError", "SerializationError", "FormWriteError",
    "NoMethodError", "MissingTokenError", "StatusError",
]
