from __future__ import annotations

import os
import re
from typing import Optional


_QUOTES = "\"'"


def normalize_input_path(raw: object, sep: str = os.sep, altsep: Optional[str] = os.altsep) -> str:
    """Clean a user-supplied path string.

    Surrounding whitespace and quote characters are stripped, and runs of path
    separators collapse into a single `sep`. On Windows (`altsep` set) both
    slash styles count as separators and a leading UNC `\\\\` is kept.

    Never raises: anything that is not a string becomes "".
    """
    if not isinstance(raw, str):
        return ""

    value = raw.strip().strip(_QUOTES).strip()
    if not value:
        return ""

    separators = [sep] + ([altsep] if altsep else [])
    pattern = "[" + "".join(re.escape(s) for s in separators) + "]+"

    prefix = ""
    if altsep and len(value) >= 2 and value[0] in separators and value[1] in separators:
        prefix = sep * 2
        value = value.lstrip("".join(separators))

    return prefix + re.sub(pattern, lambda _m: sep, value)
