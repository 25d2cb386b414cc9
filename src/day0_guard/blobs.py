"""Fetch the text of one file at one revision, tolerating every flavour of absence."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from .discovery import ContentProvider
from .github import GitHubError

logger = logging.getLogger(__name__)


def _decode(payload: bytes) -> str:
    return payload.decode("utf-8-sig", errors="replace")


def _inline_text(document: dict[str, Any]) -> str | None:
    if document.get("encoding") != "base64":
        return None
    content = document.get("content")
    if not content:
        return None
    return _decode(base64.b64decode(content))


def fetch_text(provider: ContentProvider, revision: str, path: str) -> str | None:
    """Return the text of ``path`` at ``revision`` or None.

    None covers a missing path, a directory, anything that is not a regular
    file and any transport failure (logged). Files too large for inline
    transport are fetched through their ``download_url``, falling back to the
    git blob by SHA.
    """
    try:
        document = provider.get_content(path, revision)
        if document is None or isinstance(document, list):
            return None
        if not isinstance(document, dict) or document.get("type", "file") != "file":
            return None

        text = _inline_text(document)
        if text is not None:
            return text

        download_url = document.get("download_url")
        if download_url:
            return _decode(provider.download(download_url))

        sha = document.get("sha")
        if sha:
            return _inline_text(provider.get_blob(sha))
    except (GitHubError, binascii.Error, ValueError) as exc:
        logger.warning("Could not read %s at %s: %s", path, revision, exc)
    return None
