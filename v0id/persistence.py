"""Versioned JSON snapshot of the whole mind."""

import json
import logging
import os
from datetime import datetime

from v0id.concepts import ConceptGraph
from v0id.emotions import EmotionVector
from v0id.memory import MemoryBuffer
from v0id.models import (
    Belief, SelfModel, SubAgent, default_attention, default_beliefs, default_environment,
)
from v0id.state import MindState, RUN

logger = logging.getLogger("v0id.persistence")

SNAPSHOT_FILENAME = "snapshot.json"
SCHEMA_VERSION = 1


def snapshot_path(data_path: str) -> str:
    return os.path.join(data_path, SNAPSHOT_FILENAME)


def to_snapshot(state: MindState) -> dict:
    return {
        "version": SCHEMA_VERSION,
        "saved_at": datetime.now().isoformat(),
        "topic": state.topic,
        "maturity": state.maturity,
        "memories": state.memories.to_list(),
        "emotions": state.emotions.as_dict(),
        "beliefs": [b.to_dict() for b in state.beliefs],
        "internal": {
            "conflicts": state.conflicts,
            "open_questions": state.open_questions,
            "current_stream": state.current_stream,
            "dream_journal": state.dream_journal,
            "insights": state.insights,
            "self_model": state.self_model.to_dict(),
            "attention": state.attention,
            "environment": state.environment,
            "sub_agents": [a.to_dict() for a in state.sub_agents],
            "other": state.other,
        },
        "concepts": state.concepts.to_dict(),
    }


def from_snapshot(data: dict, settings: dict | None = None) -> MindState:
    """Rebuild state from a snapshot dict. Raises ValueError on a schema mismatch."""
    settings = settings or {}
    if data.get("version") != SCHEMA_VERSION:
        raise ValueError(f"unsupported snapshot version {data.get('version')!r}")

    internal = data.get("internal", {})
    state = MindState(
        memories=MemoryBuffer.from_list(
            data.get("memories", []),
            capacity=settings.get("memory_capacity", 10),
            decay_floor=settings.get("memory_decay_floor", 0.1),
        ),
        emotions=EmotionVector(data.get("emotions")),
        concepts=ConceptGraph.from_dict(
            data.get("concepts", {}), settings.get("concept_graph_max_nodes", 500)
        ),
        beliefs=[Belief.from_dict(b) for b in data.get("beliefs") or []] or default_beliefs(),
        topic=data.get("topic") or "consciousness",
        mode=RUN,
        maturity=max(0.0, min(1.0, float(data.get("maturity", 0.1)))),
    )
    state.conflicts = list(internal.get("conflicts", []))
    state.open_questions = list(internal.get("open_questions", state.open_questions))
    state.current_stream = list(internal.get("current_stream", []))
    state.dream_journal = list(internal.get("dream_journal", []))
    state.insights = list(internal.get("insights", []))
    if internal.get("self_model"):
        state.self_model = SelfModel.from_dict(internal["self_model"])
    state.attention = list(internal.get("attention") or default_attention())
    state.environment = {**default_environment(), **internal.get("environment", {})}
    if internal.get("sub_agents"):
        state.sub_agents = [SubAgent.from_dict(a) for a in internal["sub_agents"]]
    if internal.get("other"):
        state.other = dict(internal["other"])
    return state


def load_state(data_path: str, settings: dict | None = None) -> MindState:
    """Read the snapshot once at startup. Anything missing or broken means a fresh mind."""
    path = snapshot_path(data_path)
    if not os.path.isfile(path):
        logger.info("No snapshot found, starting fresh")
        return MindState.fresh(settings)
    try:
        with open(path, "r") as f:
            data = json.load(f)
        state = from_snapshot(data, settings)
    except Exception as e:
        logger.warning(f"Could not restore snapshot, starting fresh: {e}")
        return MindState.fresh(settings)

    logger.info(f"Restored {len(state.memories)} memories, topic={state.topic!r}")
    return state


def save_state(state: MindState, data_path: str) -> bool:
    """Atomic write: tmp file then os.replace."""
    path = snapshot_path(data_path)
    tmp = path + ".tmp"
    try:
        os.makedirs(data_path, exist_ok=True)
        with open(tmp, "w") as f:
            json.dump(to_snapshot(state), f)
        os.replace(tmp, path)
    except Exception as e:
        logger.error(f"Failed to save snapshot: {e}")
        return False
    return True
