"""
Deterministic identifiers.
"""

import hashlib


def generate_id(text: str, length: int = 16) -> str:
    """
    Derive a stable id from text.
    
    The same text always yields the same id, across processes.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]
