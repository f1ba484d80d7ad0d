"""
Multipart form body construction.
"""
import logging
from typing import Dict, List, Sequence, Tuple

import httpx

from ..config import DEFAULT_FILE_CONTENT_TYPE, FORM_FILE_FIELD, LOG_PREFIX
from ..errors import FormWriteError
from ..types import FormField, FormFile

logger = logging.getLogger(__name__)


def _group_fields(form_fields: Sequence[FormField]) -> Dict[str, List[str]]:
    """Group values by field name, keeping first-seen name order."""
    grouped: Dict[str, List[str]] = {}
    for field in form_fields:
        grouped.setdefault(field.name, []).append(field.value)
    return grouped


def encode_form(url: str, form_file: FormFile, form_fields: Sequence[FormField]) -> Tuple[bytes, str]:
    """
    Encode text fields followed by one file part named ``file``.

    The file object is read to the end here.

    Returns:
        (body, content_type) where content_type carries the boundary.

    Raises:
        FormWriteError: if any part cannot be written.
    """
    try:
        request = httpx.Request(
            "POST",
            url,
            data=_group_fields(form_fields),
            files={
                FORM_FILE_FIELD: (form_file.file_name, form_file.file, DEFAULT_FILE_CONTENT_TYPE)
            },
        )
        body = request.read()
    except (OSError, ValueError, TypeError, httpx.InvalidURL) as e:
        logger.warning(f"{LOG_PREFIX} encode_form: failed to write form body: {e}")
        raise FormWriteError(e) from e

    content_type = request.headers["Content-Type"]
    logger.debug(
        f"{LOG_PREFIX} encode_form: fields={len(form_fields)}, "
        f"file_name={form_file.file_name}, body=<binary data: {len(body)} bytes>"
    )
    return body, content_type
