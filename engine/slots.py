"""Slot redaction: blank out argument-like spans before intent extraction."""

import re

# Contains no ASCII alphanumerics or CJK, so the bare-run pattern never re-matches it.
# Always a token boundary: the text on either side is never joined.
SLOT_TOKEN = "<_>"

# Quoted or bracketed spans: song titles, names, free arguments
DELIMITED_SPAN = re.compile(r"[《「『\"'](.*?)[》」』\"']")

# Bare runs that look like proper nouns, unless they follow a reserved action
# word or precede a grammatical particle
BARE_RUN = re.compile(
    r"(?<!打开|搜索|播放|查看)([a-zA-Z0-9]{2,}|[一-龥]{3,10})(?!的|了|是|在|有)"
)

SLOT_PATTERNS = (DELIMITED_SPAN, BARE_RUN)


def redact_slots(text: str) -> str:
    """Replace every slot-like span with SLOT_TOKEN, delimited spans first."""
    if not text:
        return ""
    redacted = text
    for pattern in SLOT_PATTERNS:
        redacted = pattern.sub(SLOT_TOKEN, redacted)
    return redacted


def split_on_slots(text: str) -> list:
    """Redact, then split on whitespace and placeholders alike."""
    return redact_slots(text).replace(SLOT_TOKEN, " ").split()


def strip_delimited_spans(text: str) -> str:
    """Remove quoted/bracketed spans outright (no placeholder)."""
    return DELIMITED_SPAN.sub("", text)
