"""
Configuration models and defaults for fetch-builder.
"""
import logging
import threading
from typing import Dict, FrozenSet, Optional

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

LOG_PREFIX = "[FetchBuilder]"

# Constants
DEFAULT_CONTENT_TYPE = "application/json;charset=UTF-8"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"
FORM_FILE_FIELD = "file"
SUCCESS_STATUS_CODES: FrozenSet[int] = frozenset({200, 201, 202, 204})


class TransportConfig(BaseModel):
    """Settings for the httpx transport a builder sends through.

    Timeouts are left at the httpx defaults.
    """
    follow_redirects: bool = True
    verify: bool = True
    headers: Dict[str, str] = Field(default_factory=dict)


def create_transport(config: Optional[TransportConfig] = None) -> httpx.Client:
    """Create an httpx client from config."""
    config = config or TransportConfig()
    logger.debug(
        f"{LOG_PREFIX} create_transport: follow_redirects={config.follow_redirects}, "
        f"verify={config.verify}, headers={len(config.headers)}"
    )
    return httpx.Client(
        follow_redirects=config.follow_redirects,
        verify=config.verify,
        headers=config.headers,
    )


_default_transport: Optional[httpx.Client] = None
_default_transport_lock = threading.Lock()


def get_default_transport() -> httpx.Client:
    """Process-wide transport shared by builders created without one."""
    global _default_transport
    with _default_transport_lock:
        if _default_transport is None or _default_transport.is_closed:
            _default_transport = create_transport()
        return _default_transport


def close_default_transport() -> None:
    """Close the shared transport. A new one is created on next use."""
    global _default_transport
    with _default_transport_lock:
        if _default_transport is not None:
            _default_transport.close()
            _default_transport = None
