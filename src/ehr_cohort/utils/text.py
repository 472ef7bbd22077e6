"""Display-only text cleanup for values read from the extract."""

from __future__ import annotations

import re

# UTF-8 bytes decoded as cp1252 leave these behind (e.g. "â€™" for "’")
_MOJIBAKE_MARKERS = ("â€", "Ã", "Â")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufffd]")


def clean_display_text(text: str) -> str:
    """Repair common mojibake and drop control characters.

    Only for rendering; records and prompts keep the text as read.
    """
    if any(marker in text for marker in _MOJIBAKE_MARKERS):
        try:
            text = text.encode("cp1252").decode("utf-8")
        except UnicodeError:
            # Not mojibake after all; keep the original
            pass
    return _CONTROL_RE.sub("", text).strip()
