"""String comparison helpers for free-text quiz answers."""
import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str, case_sensitive: bool = False) -> str:
    """Trim, collapse inner whitespace and (optionally) case-fold."""
    cleaned = _WHITESPACE_RE.sub(" ", text or "").strip()
    return cleaned if case_sensitive else cleaned.casefold()


def levenshtein(a: str, b: str) -> int:
    """Edit distance using a single rolling row over the shorter string."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / max(len). Two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def parse_number(text: str) -> float | None:
    try:
        return float((text or "").strip().replace(",", "."))
    except ValueError:
        return None
