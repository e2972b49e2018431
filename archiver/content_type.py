"""Mime type detection from file content."""

from typing import Optional

import filetype

from common.types import FileTypeInfo


def detect_file_type(data: bytes) -> Optional[FileTypeInfo]:
    """
    Guess the mime type of a payload from its magic bytes.

    Returns:
        FileTypeInfo, or None if the type is not recognised
    """
    if not data:
        return None
    kind = filetype.guess(data)
    if kind is None:
        return None
    return FileTypeInfo(mime_type=kind.mime)
