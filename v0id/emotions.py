"""Emotion vector and the knobs it turns."""

import random
from dataclasses import dataclass

EMOTIONS = ("curiosity", "calm", "anxiety", "reflective", "dreaming")

DEFAULT_WEIGHTS = {
    "curiosity": 0.6,
    "calm": 0.3,
    "anxiety": 0.1,
    "reflective": 0.2,
    "dreaming": 0.0,
}

DECAY = 0.95
BOOST = 0.1
BOOST_CHANCE = 0.2


def _clamp(x: float) -> float:
    return max(0.0, min(1.0, x))


@dataclass
class Modulators:
    """Per-tick parameters derived from how the mind feels."""

    memory_decay_rate: float
    topic_switch_chance: float
    dream_chance: float


class EmotionVector:
    """Closed set of emotion weights, each kept in [0, 1]."""

    def __init__(self, weights: dict | None = None):
        self._w = dict(DEFAULT_WEIGHTS)
        for name, value in (weights or {}).items():
            if name in self._w:
                self._w[name] = _clamp(float(value))

    def __getitem__(self, name: str) -> float:
        return self._w[name]

    def as_dict(self) -> dict:
        return dict(self._w)

    def nudge(self, name: str, delta: float):
        self._w[name] = _clamp(self._w[name] + delta)

    def drift(self, rng: random.Random | None = None, normalize: bool = True):
        """Fade every emotion, maybe boost one at random, optionally renormalize."""
        rng = rng or random
        for name in self._w:
            self._w[name] = _clamp(self._w[name] * DECAY)

        if rng.random() < BOOST_CHANCE:
            chosen = rng.choice(EMOTIONS)
            self.nudge(chosen, BOOST)

        if normalize:
            total = sum(self._w.values())
            if total > 0:
                for name in self._w:
                    self._w[name] = _clamp(self._w[name] / total)

    def dominant(self, n: int = 2) -> list[tuple[str, float]]:
        return sorted(self._w.items(), key=lambda kv: kv[1], reverse=True)[:n]

    def dominant_label(self) -> str:
        name, weight = self.dominant(1)[0]
        return name.upper() if weight > 0 else "CALM"

    def modulators(self, maturity: float, base_topic_switch: float = 0.2,
                   base_dream: float = 0.15, base_decay: float = 0.95) -> Modulators:
        """Anxiety slows forgetting, calm speeds it; reflection invites dreams.

        Maturity gates dreaming: a young mind (< 0.3) barely dreams.
        """
        w = self._w
        decay = base_decay + w["anxiety"] * 0.03 - w["calm"] * 0.02
        topic = base_topic_switch + w["curiosity"] * 0.2 - w["anxiety"] * 0.1
        dream = base_dream + w["reflective"] * 0.1 + w["dreaming"] * 0.15

        if maturity < 0.3:
            dream *= 0.1
        elif maturity < 0.6:
            dream *= 0.5

        return Modulators(
            memory_decay_rate=_clamp(decay),
            topic_switch_chance=_clamp(topic),
            dream_chance=_clamp(dream),
        )
