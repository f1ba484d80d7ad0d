class FetchBuilderError(Exception):
    """Base exception for request builder errors."""
    pass

class InvalidURLError(FetchBuilderError):
    def __init__(self, url: str, reason: str):
        msg = f"invalid request URI {url!r}: {reason}"
        super().__init__(msg)
        self.url = url
        self.reason = reason

class SerializationError(FetchBuilderError):
    def __init__(self, cause: Exception):
        msg = f"failed to encode request body as JSON: {str(cause)}"
        super().__init__(msg)
        self.cause = cause

class FormWriteError(FetchBuilderError):
    def __init__(self, cause: Exception):
        msg = f"failed to build multipart form body: {str(cause)}"
        super().__init__(msg)
        self.cause = cause

class NoMethodError(FetchBuilderError):
    def __init__(self):
        super().__init__("no HTTP method specified")

class MissingTokenError(FetchBuilderError):
    def __init__(self):
        super().__init__("bearer auth requires a non-empty token")

class StatusError(FetchBuilderError):
    """Response status outside the success whitelist. ``str()`` is the response body."""
    def __init__(self, status_code: int, body: str):
        super().__init__(body)
        self.status_code = status_code
        self.body = body
