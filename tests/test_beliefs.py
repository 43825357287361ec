"""Tests for belief updates, contradiction rules and inner voices."""

import pytest

from v0id.beliefs import (
    ContradictionRule, choose_sub_agent, detect_conflicts, mental_tension, update_beliefs,
)
from v0id.models import DEFAULT_SUB_AGENTS, Belief, default_beliefs


class FixedRng:
    """Always draws the same number; choice takes the first option."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value

    def choice(self, seq):
        return seq[0]


class TestUpdateBeliefs:
    def test_mentioned_concepts_move(self):
        beliefs = default_beliefs()
        touched = update_beliefs(beliefs, "My memory feels like chaos", novelty=1.0)
        assert touched == ["memory", "chaos"]
        held = {b.concept: b.confidence for b in beliefs}
        assert held["memory"] == pytest.approx(0.55)
        assert held["self"] == 0.1

    def test_bias_and_clamp(self):
        beliefs = [Belief("logic", "essential", 0.98)]
        update_beliefs(beliefs, "logic", novelty=1.0, bias=0.1)
        assert beliefs[0].confidence == 1.0
        update_beliefs(beliefs, "logic", novelty=0.0, bias=-2)
        assert beliefs[0].confidence == 0.0


class TestConflicts:
    def test_defaults_are_peaceful(self):
        assert detect_conflicts(default_beliefs()) == []

    def test_logic_and_chaos(self):
        beliefs = [Belief("logic", "essential", 0.6), Belief("chaos", "present", 0.6)]
        assert detect_conflicts(beliefs) == ["Implied contradiction between 'logic' and 'chaos'"]

    def test_stance_rule(self):
        beliefs = [Belief("memory", "fluid yet static", 0.2)]
        assert detect_conflicts(beliefs) == ["Contradiction in 'memory' between 'fluid' and 'static'"]

    def test_firm_undefined_self(self):
        assert detect_conflicts([Belief("self", "undefined", 0.7)])
        assert not detect_conflicts([Belief("self", "undefined", 0.6)])

    def test_custom_rules(self):
        rule = ContradictionRule("light", "dark", lambda a, b: a is not None and b is None,
                                 "light without dark")
        assert detect_conflicts([Belief("light", "on")], [rule]) == ["light without dark"]
        assert detect_conflicts([Belief("light", "on"), Belief("dark", "off")], [rule]) == []

    def test_tension(self):
        assert mental_tension([]) == 0.0
        assert mental_tension(["a", "b"]) == 0.5
        assert mental_tension(["a"] * 9) == 1.0


class TestSubAgents:
    def test_shadow_under_tension(self):
        agent = choose_sub_agent(DEFAULT_SUB_AGENTS, 0.75, "RUN", FixedRng(0.1))
        assert agent.name == "Shadow"

    def test_rational_when_calm(self):
        agent = choose_sub_agent(DEFAULT_SUB_AGENTS, 0.0, "RUN", FixedRng(0.1))
        assert agent.name == "Rational"

    def test_anima_dreams(self):
        agent = choose_sub_agent(DEFAULT_SUB_AGENTS, 0.5, "DREAM", FixedRng(0.9))
        assert agent.name == "Anima"

    def test_otherwise_random(self):
        agent = choose_sub_agent(DEFAULT_SUB_AGENTS, 0.5, "RUN", FixedRng(0.9))
        assert agent is DEFAULT_SUB_AGENTS[0]

    def test_no_agents(self):
        assert choose_sub_agent([], 1.0, "RUN") is None
