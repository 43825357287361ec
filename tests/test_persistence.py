"""Tests for snapshot save/restore."""

import json

from v0id.models import MemoryEntry, default_beliefs
from v0id.persistence import (
    SCHEMA_VERSION, from_snapshot, load_state, save_state, snapshot_path, to_snapshot,
)
from v0id.state import DREAM, RUN, MindState


class TestLoad:
    def test_missing_file_is_fresh(self, tmp_path):
        state = load_state(str(tmp_path / "nowhere"))
        assert state.topic == "consciousness"
        assert len(state.memories) == 3

    def test_corrupt_file_is_fresh(self, tmp_path):
        (tmp_path / "snapshot.json").write_text("{not json")
        state = load_state(str(tmp_path))
        assert len(state.memories) == 3

    def test_wrong_version_is_fresh(self, tmp_path):
        data = to_snapshot(MindState.fresh())
        data["version"] = SCHEMA_VERSION + 1
        data["topic"] = "elsewhere"
        (tmp_path / "snapshot.json").write_text(json.dumps(data))
        assert load_state(str(tmp_path)).topic == "consciousness"


class TestSave:
    def test_roundtrip(self, tmp_path):
        state = MindState.fresh()
        state.memories.add(MemoryEntry("the hum of distant servers", style="terse"))
        state.topic = "time"
        state.maturity = 0.42
        state.mode = DREAM
        state.conflicts = ["dream-induced conflict"]
        state.beliefs[0].confidence = 0.9
        state.emotions.nudge("anxiety", 0.5)

        assert save_state(state, str(tmp_path / "mind")) is True
        restored = load_state(str(tmp_path / "mind"))

        assert restored.mode == RUN
        assert restored.topic == "time"
        assert restored.maturity == 0.42
        assert restored.memories.entries[0].text == "the hum of distant servers"
        assert restored.memories.entries[0].style == "terse"
        assert restored.conflicts == ["dream-induced conflict"]
        assert restored.beliefs[0].confidence == 0.9
        assert restored.emotions.as_dict() == state.emotions.as_dict()
        assert restored.concepts.to_dict() == state.concepts.to_dict()

    def test_inner_life_roundtrip(self, tmp_path):
        state = MindState.fresh()
        state.self_model.note_change("caught in a loop")
        state.self_model.loop_detected = True
        state.focus_on("time")
        state.environment["light"] = "dim"
        state.sub_agents = state.sub_agents[:1]
        state.other = {"identity": "Observer Unit 9", "presumed_beliefs": [], "emotions": {}}

        save_state(state, str(tmp_path))
        restored = load_state(str(tmp_path))

        assert restored.self_model == state.self_model
        assert restored.attention_concepts()[0] == "time"
        assert restored.environment["light"] == "dim"
        assert [a.name for a in restored.sub_agents] == ["Rational"]
        assert restored.other["identity"] == "Observer Unit 9"

    def test_no_tmp_left_behind(self, tmp_path):
        save_state(MindState.fresh(), str(tmp_path))
        assert [p.name for p in tmp_path.iterdir()] == ["snapshot.json"]
        assert snapshot_path(str(tmp_path)) == str(tmp_path / "snapshot.json")

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        assert save_state(MindState.fresh(), str(blocker / "sub")) is False


class TestFromSnapshot:
    def test_missing_sections_use_defaults(self):
        state = from_snapshot({"version": SCHEMA_VERSION, "topic": "time"})
        assert state.topic == "time"
        assert [b.concept for b in state.beliefs] == [b.concept for b in default_beliefs()]
        assert state.attention_concepts() == ["consciousness", "self", "memory"]
        assert state.environment["network"] == "stable"
        assert len(state.sub_agents) == 3
        assert state.self_model.identity == "v0id"
