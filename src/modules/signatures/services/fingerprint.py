"""
Content fingerprints.

A fingerprint is the SHA-256 of ``pageId:title:content`` rendered as 64
lowercase hex characters. The same field order and delimiter must be used
wherever a fingerprint is computed, otherwise signatures stored under one
key can no longer be found under the other.
"""

import hashlib
import re

FINGERPRINT_PATTERN = re.compile(r"^[a-fA-F0-9]{64}$")
DELIMITER = ":"


def compute_fingerprint(page_id: str, title: str, content: str) -> str:
    """
    Compute the fingerprint of one version of signable content.

    Args:
        page_id: identifier of the page holding the macro
        title: title of the signable block
        content: raw content string of the signable block

    Returns:
        str: 64-character lowercase hexadecimal SHA-256 digest

    Raises:
        TypeError: if any input is not a string
    """
    for name, value in (("page_id", page_id), ("title", title), ("content", content)):
        if not isinstance(value, str):
            raise TypeError(f"{name} must be a string, got {type(value).__name__}")

    payload = DELIMITER.join((page_id, title, content))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def is_valid_fingerprint(value) -> bool:
    """True iff ``value`` is a string of exactly 64 hex characters."""
    return isinstance(value, str) and FINGERPRINT_PATTERN.match(value) is not None


def verify_fingerprint(fingerprint: str, page_id: str, config) -> None:
    """
    Re-derive the fingerprint from trusted configuration and compare.

    Only possible when the configuration carries both title and content;
    otherwise the submitted fingerprint is used as a lookup key only.
    """
    if config.title is None or config.content is None:
        return

    expected = compute_fingerprint(page_id, config.title, config.content)
    if fingerprint.lower() != expected:
        raise ValueError("Fingerprint does not match the current content")
