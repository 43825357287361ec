"""Novelty filter: keeps the mind from saying the same thing twice.

Four checks, cheapest first, short-circuiting on the first hit:
exact match, edit-distance ratio, shared significant words, and a coarse
topic fingerprint (first two significant words) that recurs too often.
False positives and negatives are expected; this is a heuristic, not dedup.
"""

import re

RECENT_WINDOW = 15
TOPIC_WINDOW = 30
SIMILARITY_THRESHOLD = 0.4
SHARED_WORD_LIMIT = 2
TOPIC_REPEAT_LIMIT = 2

_SPLIT = re.compile(r"\W+")


def _text_of(item) -> str:
    """History items may be MemoryEntry objects, dicts, or bare strings."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return item.get("text", "")
    return getattr(item, "text", "")


def normalize(text: str) -> str:
    return " ".join(text.lower().split())


def significant_tokens(text: str) -> list[str]:
    """Lowercased word tokens longer than two characters, in order."""
    return [t for t in _SPLIT.split(text.lower()) if len(t) > 2]


def levenshtein(a: str, b: str) -> int:
    """Classic dynamic-programming edit distance, two rows at a time."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
        prev = cur
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longest length. Two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def topic_fingerprint(text: str) -> tuple[str, ...]:
    return tuple(significant_tokens(text)[:2])


def is_too_similar(candidate: str, history: list,
                   recent_window: int = RECENT_WINDOW,
                   topic_window: int = TOPIC_WINDOW,
                   threshold: float = SIMILARITY_THRESHOLD) -> bool:
    """True if candidate should be rejected against history (newest first)."""
    cand = normalize(candidate)
    recent = [normalize(_text_of(h)) for h in history[:recent_window]]

    # 1. Exact match, ignoring case and whitespace
    if cand in recent:
        return True

    # 2. Edit-distance ratio
    for prior in recent:
        if similarity(cand, prior) > threshold:
            return True

    # 3. Shared significant words
    cand_words = set(significant_tokens(cand))
    if len(cand_words) >= SHARED_WORD_LIMIT:
        for prior in recent:
            if len(cand_words & set(significant_tokens(prior))) >= SHARED_WORD_LIMIT:
                return True

    # 4. Same opening topic keeps coming back
    fingerprint = topic_fingerprint(cand)
    if len(fingerprint) == 2:
        repeats = sum(
            1 for h in history[:topic_window]
            if topic_fingerprint(_text_of(h)) == fingerprint
        )
        if repeats >= TOPIC_REPEAT_LIMIT:
            return True

    return False
