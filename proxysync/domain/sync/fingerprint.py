"""
Content fingerprints.

The remote side runs sha256sum over the stored bytes; the local side hashes
the UTF-8 encoding of the generated text. Both must agree byte for byte.
"""
import hashlib
import re
from typing import Union

from ...core.constants import HASH_LENGTH

_HEX_DIGEST = re.compile(rf"^[0-9a-f]{{{HASH_LENGTH}}}$")


def fingerprint(content: Union[str, bytes]) -> str:
    """SHA256 hex digest of artifact content"""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def parse_remote_fingerprint(output: str) -> str:
    """
    Extract the digest from hash command output ("<digest>  <path>").
    
    Raises:
        ValueError: If the output does not start with a hex digest
    """
    digest = output[:HASH_LENGTH].lower()
    if not _HEX_DIGEST.match(digest):
        raise ValueError(f"Unexpected hash command output: {output!r}")
    return digest
