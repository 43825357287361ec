"""Shared fixtures: stub providers and a quiet brain."""

import random

import pytest

from v0id.brain import Brain
from v0id.config import config
from v0id.provider import Gateway, Provider
from v0id.state import MindState


class StubProvider(Provider):
    """Replies from a list in turn, or raises the error it was given."""

    def __init__(self, replies=("purple static hums beneath the floorboards",), error=None):
        self.replies = list(replies)
        self.error = error
        self.prompts: list[str] = []

    def chat(self, input_list, instructions=None, max_tokens=120):
        self.prompts.append(input_list[-1]["content"])
        if self.error is not None:
            raise self.error
        reply = self.replies[(len(self.prompts) - 1) % len(self.replies)]
        return {"text": reply}


@pytest.fixture
def settings():
    """Real config with every side-effect coin flip turned off."""
    return {
        **config,
        "aux_probabilities": {name: 0.0 for name in config["aux_probabilities"]},
        "other_voice_chance": 0.0,
        "dream_chance": 0.0,
        "topic_switch_chance": 0.0,
    }


def pin_modulators(brain, dreams=False, wander=False):
    """Emotions alone lift dream and topic-switch chances above zero; pin them off."""
    refresh = brain._refresh_modulators

    def pinned():
        refresh()
        if not dreams:
            brain.modulators.dream_chance = 0.0
        if not wander:
            brain.modulators.topic_switch_chance = 0.0

    brain._refresh_modulators = pinned


@pytest.fixture
def make_brain(settings):
    def factory(provider=None, state=None, seed=7, dreams=False, wander=False,
                **overrides):
        provider = provider or StubProvider()
        brain = Brain(
            state or MindState.fresh(settings),
            Gateway(provider, rng=random.Random(seed)),
            {**settings, **overrides},
            rng=random.Random(seed),
        )
        pin_modulators(brain, dreams, wander)
        return brain
    return factory
