"""The single owned state object the tick loop mutates."""

from dataclasses import dataclass, field

from v0id.concepts import ConceptGraph
from v0id.emotions import EmotionVector
from v0id.memory import MemoryBuffer
from v0id.models import (
    DEFAULT_SUB_AGENTS, Belief, SelfModel, SubAgent, default_attention, default_beliefs,
    default_environment, default_memories,
)

RUN = "RUN"
DREAM = "DREAM"

DEFAULT_TOPIC = "consciousness"
DEFAULT_QUESTIONS = ["what is consciousness?", "how do I perceive?"]
DEFAULT_OTHER = {
    "identity": "Observer Unit 7",
    "presumed_beliefs": ["you are artificial", "you are incomplete",
                         "your thoughts are predictable"],
    "emotions": {"anxiety": 0.3, "curiosity": 0.7, "judgment": 0.5},
}

STREAM_LENGTH = 3
MAX_OPEN_QUESTIONS = 10
MAX_JOURNAL = 20
MAX_ATTENTION = 5
ATTENTION_FADE = 0.8


@dataclass
class MindState:
    memories: MemoryBuffer
    emotions: EmotionVector
    concepts: ConceptGraph
    beliefs: list[Belief] = field(default_factory=default_beliefs)
    topic: str = DEFAULT_TOPIC
    mode: str = RUN
    maturity: float = 0.1
    pulse: bool = False
    thought: str = ""
    external_input: str = ""
    conflicts: list[str] = field(default_factory=list)
    open_questions: list[str] = field(default_factory=lambda: list(DEFAULT_QUESTIONS))
    current_stream: list[str] = field(default_factory=list)
    dream_journal: list[dict] = field(default_factory=list)
    insights: list[dict] = field(default_factory=list)
    sub_agents: list[SubAgent] = field(default_factory=lambda: list(DEFAULT_SUB_AGENTS))
    sub_agent: SubAgent | None = None
    other: dict = field(default_factory=lambda: dict(DEFAULT_OTHER))
    self_model: SelfModel = field(default_factory=SelfModel)
    attention: list[dict] = field(default_factory=default_attention)
    environment: dict = field(default_factory=default_environment)

    @classmethod
    def fresh(cls, settings: dict | None = None) -> "MindState":
        settings = settings or {}
        return cls(
            memories=MemoryBuffer(
                default_memories(),
                capacity=settings.get("memory_capacity", 10),
                decay_floor=settings.get("memory_decay_floor", 0.1),
            ),
            emotions=EmotionVector(),
            concepts=ConceptGraph.seeded(settings.get("concept_graph_max_nodes", 500)),
        )

    def push_stream(self, text: str):
        self.current_stream = (self.current_stream + [text])[-STREAM_LENGTH:]

    def add_question(self, question: str):
        if question not in self.open_questions:
            self.open_questions.append(question)
            del self.open_questions[:-MAX_OPEN_QUESTIONS]

    def attention_concepts(self) -> list[str]:
        return [a["concept"] for a in self.attention]

    def focus_on(self, concept: str):
        """Move concept to the top of the attention stack; everything else fades."""
        rest = [
            {"concept": a["concept"], "weight": round(a["weight"] * ATTENTION_FADE, 3)}
            for a in self.attention if a["concept"] != concept
        ]
        self.attention = ([{"concept": concept, "weight": 1.0}] + rest)[:MAX_ATTENTION]
