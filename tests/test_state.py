"""Tests for the mind state helpers and the self-model."""

from v0id.models import SelfModel
from v0id.state import MindState


class TestAttention:
    def test_focus_moves_to_top_and_fades_rest(self):
        state = MindState.fresh()
        state.focus_on("time")
        assert state.attention_concepts() == ["time", "consciousness", "self", "memory"]
        assert state.attention[1]["weight"] == 0.8
        assert state.attention[3]["weight"] == 0.48

    def test_refocus_does_not_duplicate(self):
        state = MindState.fresh()
        state.focus_on("self")
        assert state.attention_concepts() == ["self", "consciousness", "memory"]

    def test_stack_is_bounded(self):
        state = MindState.fresh()
        for word in ("a1", "b2", "c3", "d4", "e5", "f6"):
            state.focus_on(word)
        assert state.attention_concepts() == ["f6", "e5", "d4", "c3", "b2"]


class TestStream:
    def test_keeps_last_three(self):
        state = MindState.fresh()
        for i in range(5):
            state.push_stream(str(i))
        assert state.current_stream == ["2", "3", "4"]

    def test_questions_deduplicated_and_bounded(self):
        state = MindState.fresh()
        state.add_question("what is consciousness?")
        for i in range(12):
            state.add_question(f"question {i}?")
        assert len(state.open_questions) == 10
        assert state.open_questions[-1] == "question 11?"


class TestSelfModel:
    def test_defaults(self):
        model = SelfModel()
        assert model.identity == "v0id"
        assert model.narrative[0]["insight"] == "Initial boot, self undefined."

    def test_recent_changes_bounded(self):
        model = SelfModel()
        for i in range(8):
            model.note_change(f"change {i}")
        assert model.recent_changes == [f"change {i}" for i in range(3, 8)]

    def test_dict_roundtrip(self):
        model = SelfModel(last_conflict="dream-induced conflict", loop_detected=True)
        model.note_change("loop broken")
        again = SelfModel.from_dict(model.to_dict())
        assert again == model
