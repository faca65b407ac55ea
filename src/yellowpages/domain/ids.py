"""Record ID generation.

IDs are short random strings drawn from a url-safe alphabet, so they
can double as file names (``<id>.json``) and shell arguments.

INVARIANT: IDs are permanent. Renaming a record never changes its ID.
"""

from __future__ import annotations

import re
import secrets

ID_ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"
ID_LENGTH = 8
ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def new_id(length: int = ID_LENGTH) -> str:
    """Generate a random record ID of *length* characters."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def is_valid_id(record_id: str) -> bool:
    """Check whether *record_id* is safe to use as a record file name."""
    return ID_PATTERN.match(record_id) is not None
