"""Short rolling memory: newest first, fixed capacity, fading strength."""

import logging
import random
import re

from v0id.models import MemoryEntry

logger = logging.getLogger("v0id.memory")

CAPACITY = 10
DECAY_FLOOR = 0.1

# Retrieval bonus per keyword shared with the current focus
KEYWORD_WEIGHT = 0.2


class MemoryBuffer:
    """Ordered buffer of MemoryEntry, index 0 is the newest."""

    def __init__(self, entries: list[MemoryEntry] | None = None,
                 capacity: int = CAPACITY, decay_floor: float = DECAY_FLOOR):
        self.capacity = capacity
        self.decay_floor = decay_floor
        self.entries: list[MemoryEntry] = list(entries or [])[:capacity]

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def add(self, entry: MemoryEntry, decay_rate: float | None = None) -> MemoryEntry:
        """Prepend entry, fade everything older, drop past capacity."""
        if decay_rate is not None:
            self.decay(decay_rate)
        self.entries.insert(0, entry)
        dropped = self.entries[self.capacity:]
        del self.entries[self.capacity:]
        if dropped:
            logger.debug(f"Forgot {len(dropped)} memories past capacity")
        return entry

    def decay(self, rate: float):
        for mem in self.entries:
            mem.strength = min(1.0, max(self.decay_floor, mem.strength * rate))

    def recent(self, n: int = 10) -> list[MemoryEntry]:
        return self.entries[:n]

    def recent_styles(self, n: int = 5) -> list[str]:
        return [m.style for m in self.entries[:n] if m.style]

    def rank(self, keywords: set[str], top_k: int = 5) -> list[MemoryEntry]:
        """Strength plus keyword overlap; ties go to the newer memory."""
        scored = []
        for mem in self.entries:
            words = set(re.split(r"\W+", mem.text.lower()))
            overlap = len(words & keywords)
            scored.append((mem.strength + KEYWORD_WEIGHT * overlap, mem.created_at, mem))
        scored.sort(key=lambda x: (x[0], x[1]), reverse=True)
        return [mem for _, _, mem in scored[:top_k]]

    def splice(self, rng: random.Random | None = None) -> str | None:
        """Stitch the front half of one memory onto the back half of another."""
        rng = rng or random
        if len(self.entries) < 2:
            return None
        first, second = rng.sample(self.entries, 2)
        head = first.text.split()
        tail = second.text.split()
        if not head or not tail:
            return None
        text = " ".join(head[:max(1, len(head) // 2)] + tail[len(tail) // 2:])
        return text

    def drop_random(self, rng: random.Random | None = None) -> MemoryEntry | None:
        rng = rng or random
        if not self.entries:
            return None
        victim = self.entries.pop(rng.randrange(len(self.entries)))
        logger.info(f"Forgot: {victim.text[:60]}")
        return victim

    def to_list(self) -> list[dict]:
        return [m.to_dict() for m in self.entries]

    @classmethod
    def from_list(cls, items: list[dict], capacity: int = CAPACITY,
                  decay_floor: float = DECAY_FLOOR) -> "MemoryBuffer":
        return cls([MemoryEntry.from_dict(d) for d in items], capacity, decay_floor)
