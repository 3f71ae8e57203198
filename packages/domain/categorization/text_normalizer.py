"""
Text normalization applied before any embedding is computed.

Both the remote and the fallback embedding run reports through the same
steps so that category vectors and report vectors live in one space.
Character classes are deliberately ASCII for "word" and "digit": accented
letters outside Latin Extended-A (U+0100-U+017F) become spaces. Changing
that would change every fallback vector already cached.
"""
import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s\u0100-\u017F]")
_DIGITS = re.compile(r"[0-9]+")


def normalize(text: str) -> str:
    """
    Normalize report text for embedding.

    Example:
        "Malaking LUBAK sa kalsada!!  (3 days na)" -> "malaking lubak sa kalsada days na"
    """
    if not text:
        return ""

    text = text.lower().strip()
    text = _WHITESPACE.sub(" ", text)
    text = _DISALLOWED.sub(" ", text)
    text = _DIGITS.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def tokenize(text: str) -> list[str]:
    """Normalize then split into non-empty tokens"""
    return [token for token in normalize(text).split(" ") if token]
