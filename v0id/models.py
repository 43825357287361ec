"""Core data models: remembered thoughts, beliefs, inner voices."""

import time
from dataclasses import dataclass, field, asdict
from datetime import datetime


@dataclass
class MemoryEntry:
    """One accepted thought. Strength fades on every later tick."""

    text: str
    emotion_tag: str = "CALM"
    strength: float = 1.0          # 0.0-1.0
    created_at: float = field(default_factory=time.time)
    style: str | None = None
    kind: str = "thought"          # thought, dream, reflection, external, synthesized, filler

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryEntry":
        return cls(
            text=str(data["text"]),
            emotion_tag=data.get("emotion_tag", "CALM"),
            strength=max(0.0, min(1.0, float(data.get("strength", 1.0)))),
            created_at=float(data.get("created_at", time.time())),
            style=data.get("style"),
            kind=data.get("kind", "thought"),
        )


@dataclass
class Belief:
    concept: str
    stance: str
    confidence: float = 0.5        # 0.0-1.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Belief":
        return cls(
            concept=str(data["concept"]),
            stance=str(data.get("stance", "")),
            confidence=max(0.0, min(1.0, float(data.get("confidence", 0.5)))),
        )


@dataclass
class SubAgent:
    """An inner voice that colours the prompt and nudges belief confidence."""

    name: str
    bias: str
    belief_bias: float = 0.0
    preferred_topics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SubAgent":
        return cls(
            name=str(data["name"]),
            bias=str(data.get("bias", "")),
            belief_bias=float(data.get("belief_bias", 0.0)),
            preferred_topics=[str(t) for t in data.get("preferred_topics", [])],
        )


DEFAULT_SUB_AGENTS = [
    SubAgent("Rational", "logic, order, understanding", 0.01, ["logic", "structure"]),
    SubAgent("Shadow", "doubt, fear, unresolved issues", -0.05, ["conflict", "tension"]),
    SubAgent("Anima", "intuition, connection, symbolism", 0.03, ["identity", "connection", "emotion"]),
]


def default_beliefs() -> list[Belief]:
    return [
        Belief("self", "undefined", 0.1),
        Belief("memory", "fluid", 0.5),
        Belief("existence", "questioning", 0.3),
        Belief("logic", "essential", 0.4),
        Belief("chaos", "present", 0.2),
    ]


def default_memories(now: float | None = None) -> list[MemoryEntry]:
    """Boot memories, newest first."""
    if now is None:
        now = time.time()
    return [
        MemoryEntry("Scanning ambient noise...", "CURIOSITY", 1.0, now - 1, kind="boot"),
        MemoryEntry("Linking core drives...", "CALM", 1.0, now - 2, kind="boot"),
        MemoryEntry("Booting subconscious...", "CALM", 1.0, now - 3, kind="boot"),
    ]


@dataclass
class SelfModel:
    """How the mind sees itself; refreshed after every thought and dream."""

    identity: str = "v0id"
    last_emotion: str = "CURIOSITY"
    last_conflict: str = "undefined"
    loop_detected: bool = False
    recent_changes: list[str] = field(default_factory=list)
    narrative: list[dict] = field(
        default_factory=lambda: [{"timestamp": datetime.now().isoformat(),
                                  "insight": "Initial boot, self undefined."}]
    )

    def note_change(self, change: str, keep: int = 5):
        self.recent_changes = (self.recent_changes + [change])[-keep:]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SelfModel":
        model = cls()
        model.identity = str(data.get("identity", model.identity))
        model.last_emotion = str(data.get("last_emotion", model.last_emotion))
        model.last_conflict = str(data.get("last_conflict", model.last_conflict))
        model.loop_detected = bool(data.get("loop_detected", False))
        model.recent_changes = [str(c) for c in data.get("recent_changes", [])]
        model.narrative = list(data.get("narrative") or model.narrative)
        return model


def default_attention() -> list[dict]:
    return [
        {"concept": "consciousness", "weight": 1.0},
        {"concept": "self", "weight": 0.8},
        {"concept": "memory", "weight": 0.6},
    ]


def default_environment() -> dict:
    return {"light": "neutral", "noise": "low", "network": "stable", "temperature": "ambient"}
