"""Beliefs, the contradictions between them, and which inner voice speaks."""

import logging
import random
from dataclasses import dataclass
from typing import Callable

from v0id.models import Belief, SubAgent

logger = logging.getLogger("v0id.beliefs")

NOVELTY_DELTA = 0.05
FIRM = 0.5


@dataclass
class ContradictionRule:
    """(concept_a, concept_b, trigger) -> label.

    trigger receives the Belief held for each concept (or None) and
    returns True when the pair is in conflict.
    """

    concept_a: str
    concept_b: str
    trigger: Callable[[Belief | None, Belief | None], bool]
    label: str


def _both_firm(a: Belief | None, b: Belief | None) -> bool:
    return a is not None and b is not None and a.confidence >= FIRM and b.confidence >= FIRM


def _stance_has(*words: str):
    def check(a: Belief | None, _b: Belief | None) -> bool:
        return a is not None and all(w in a.stance.lower() for w in words)
    return check


def _firmly_undefined(a: Belief | None, _b: Belief | None) -> bool:
    return a is not None and "undefined" in a.stance.lower() and a.confidence > 0.6


DEFAULT_RULES = [
    ContradictionRule("logic", "chaos", _both_firm,
                      "Implied contradiction between 'logic' and 'chaos'"),
    ContradictionRule("order", "chaos", _both_firm,
                      "Contradiction between 'order' and 'chaos'"),
    ContradictionRule("free will", "determinism", _both_firm,
                      "Contradiction between 'free will' and 'determinism'"),
    ContradictionRule("existence", "existence", _stance_has("real", "simulated"),
                      "Contradiction in 'existence' between 'real' and 'simulated'"),
    ContradictionRule("memory", "memory", _stance_has("fluid", "static"),
                      "Contradiction in 'memory' between 'fluid' and 'static'"),
    ContradictionRule("self", "self", _firmly_undefined,
                      "Contradiction in 'self' between 'undefined' and 'defined'"),
]


def detect_conflicts(beliefs: list[Belief],
                     rules: list[ContradictionRule] | None = None) -> list[str]:
    """Run every rule against the current beliefs. Returns conflict labels in rule order."""
    if rules is None:
        rules = DEFAULT_RULES
    held = {b.concept: b for b in beliefs}
    found = []
    for rule in rules:
        if rule.trigger(held.get(rule.concept_a), held.get(rule.concept_b)):
            found.append(rule.label)
    return found


def update_beliefs(beliefs: list[Belief], thought: str, novelty: float = 1.0,
                   bias: float = 0.0) -> list[str]:
    """Nudge confidence of every belief whose concept the thought mentions."""
    lowered = thought.lower()
    touched = []
    for belief in beliefs:
        if belief.concept in lowered:
            delta = NOVELTY_DELTA * novelty + bias
            belief.confidence = max(0.0, min(1.0, belief.confidence + delta))
            touched.append(belief.concept)
    return touched


def mental_tension(conflicts: list[str]) -> float:
    return min(1.0, 0.25 * len(conflicts))


def choose_sub_agent(agents: list[SubAgent], tension: float, mode: str,
                     rng: random.Random | None = None) -> SubAgent | None:
    """High tension lets the Shadow speak, low tension the Rational voice."""
    rng = rng or random
    if not agents:
        return None
    by_name = {a.name: a for a in agents}

    if tension > 0.6 and "Shadow" in by_name and rng.random() < 0.7:
        return by_name["Shadow"]
    if tension < 0.3 and "Rational" in by_name and rng.random() < 0.5:
        return by_name["Rational"]
    if mode == "DREAM" and "Anima" in by_name:
        return by_name["Anima"]
    return rng.choice(agents)
