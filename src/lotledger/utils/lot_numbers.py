"""Natural ordering for lot numbers."""

import re

_CHUNK = re.compile(r"(\d+)")


def lot_number_sort_key(lot_number: str) -> tuple:
    """Sort key that orders "2" before "10" and "3a" before "3b".

    Numeric runs compare as integers, everything else case-insensitively.
    Blank lot numbers sort last.
    """
    text = (lot_number or "").strip()
    if not text:
        return ((2, 0, ""),)
    key = []
    for chunk in _CHUNK.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk.casefold()))
    return tuple(key)
