"""
Request builder core.
"""
from .request import RequestBuilder, get, get_json, new_client, post, post_form, post_json
from .result import BuilderState, Err, Ok
from .validate import validate_request_uri

__all__ = [
    "RequestBuilder",
    "new_client", "get", "get_json", "post", "post_json", "post_form",
    "BuilderState", "Ok", "Err",
    "validate_request_uri",
]
