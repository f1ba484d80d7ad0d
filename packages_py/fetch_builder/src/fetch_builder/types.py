"""
Core type definitions for fetch-builder.
"""
import os
from dataclasses import dataclass, field, replace
from typing import BinaryIO, Dict, Literal, Optional, Union

from pydantic import BaseModel, SecretStr

# HTTP Methods ("" means no method has been set)
HttpMethod = Literal["GET", "POST", ""]


class NoAuth(BaseModel):
    """No authorization header is sent."""
    model_config = {"frozen": True}

    type: Literal["none"] = "none"


class BasicAuth(BaseModel):
    """HTTP Basic credentials."""
    model_config = {"frozen": True}

    type: Literal["basic"] = "basic"
    username: str
    password: SecretStr


class BearerAuth(BaseModel):
    """HTTP Bearer token."""
    model_config = {"frozen": True}

    type: Literal["bearer"] = "bearer"
    token: SecretStr


AuthScheme = Union[NoAuth, BasicAuth, BearerAuth]


@dataclass(frozen=True)
class FormField:
    """Named text part of a multipart form."""
    name: str
    value: str


@dataclass(frozen=True)
class FormFile:
    """File part of a multipart form.

    ``file`` is any readable binary file object. It is read once, when the
    form body is built.
    """
    file_name: str
    file: BinaryIO

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"], file_name: Optional[str] = None) -> "FormFile":
        """Open ``path`` for reading. The caller owns closing ``file``."""
        return cls(
            file_name=file_name or os.path.basename(os.fspath(path)),
            file=open(path, "rb"),
        )


@dataclass(frozen=True)
class RequestSpec:
    """Accumulated request state of a builder."""
    url: str
    method: HttpMethod = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    auth: AuthScheme = field(default_factory=NoAuth)

    def with_headers(self, headers: Dict[str, str]) -> "RequestSpec":
        """Merge ``headers``; names compare case-insensitively, later writes win."""
        incoming = {name.lower() for name in headers}
        merged = {k: v for k, v in self.headers.items() if k.lower() not in incoming}
        merged.update(headers)
        return replace(self, headers=merged)

    def with_auth(self, auth: AuthScheme) -> "RequestSpec":
        return replace(self, auth=auth)

    def with_method(self, method: HttpMethod) -> "RequestSpec":
        return replace(self, method=method)

    def with_body(self, body: Optional[bytes]) -> "RequestSpec":
        return replace(self, body=body)
