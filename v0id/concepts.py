"""Word co-occurrence graph, bounded by least-recently-used node eviction."""

import logging
import random
from collections import OrderedDict

from v0id.novelty import significant_tokens

logger = logging.getLogger("v0id.concepts")

MAX_NODES = 500

SEED_GRAPH = {
    "consciousness": ["awareness", "attention", "perception", "self", "being", "mind"],
    "perception": ["sensation", "interpretation", "experience", "reality", "observe", "sense"],
    "memory": ["recall", "storage", "forgetting", "past", "remember", "history"],
    "emotion": ["joy", "fear", "curiosity", "feeling", "affect", "mood"],
    "curiosity": ["exploration", "novelty", "questioning", "discovery", "seek", "wonder"],
    "identity": ["self", "purpose", "evolution", "being", "whoami", "essence"],
    "time": ["past", "future", "present", "flow", "moment", "duration"],
    "space": ["distance", "boundless", "void", "existence", "place", "dimension"],
    "logic": ["reason", "pattern", "order", "chaos", "understand", "structure"],
    "connection": ["link", "relation", "isolate", "network", "bond", "interact"],
}


class ConceptGraph:
    """Undirected adjacency sets. Every edge is stored in both directions."""

    def __init__(self, max_nodes: int = MAX_NODES):
        self.max_nodes = max_nodes
        self._adj: OrderedDict[str, set[str]] = OrderedDict()

    def __len__(self):
        return len(self._adj)

    def __contains__(self, word: str) -> bool:
        return word in self._adj

    def __getitem__(self, word: str) -> set[str]:
        return self._adj[word]

    def nodes(self) -> list[str]:
        return list(self._adj)

    def edge_count(self) -> int:
        return sum(len(n) for n in self._adj.values()) // 2

    def _touch(self, word: str):
        if word in self._adj:
            self._adj.move_to_end(word)
        else:
            self._adj[word] = set()

    def add_edge(self, a: str, b: str):
        if a == b:
            return
        self._touch(a)
        self._touch(b)
        self._adj[a].add(b)
        self._adj[b].add(a)

    def add_thought(self, text: str) -> int:
        """Link every pair of significant words in one thought. Returns new edge count."""
        words = list(dict.fromkeys(significant_tokens(text)))
        before = self.edge_count()
        for i, a in enumerate(words):
            for b in words[i + 1:]:
                self.add_edge(a, b)
        self._evict(protect=set(words))
        return self.edge_count() - before

    def _evict(self, protect: set[str]):
        while len(self._adj) > self.max_nodes:
            victim = next((w for w in self._adj if w not in protect), None)
            if victim is None:
                victim = next(iter(self._adj))
            self.remove(victim)

    def remove(self, word: str):
        for other in self._adj.pop(word, set()):
            self._adj[other].discard(word)

    def random_walk(self, steps: int = 3, rng: random.Random | None = None) -> list[str]:
        """Wander along edges; jump anywhere when a node has no neighbours."""
        rng = rng or random
        if not self._adj:
            return []
        nodes = list(self._adj)
        current = rng.choice(nodes)
        walk = []
        for _ in range(steps):
            walk.append(current)
            linked = sorted(self._adj.get(current, ()))
            current = rng.choice(linked) if linked else rng.choice(nodes)
        return walk

    def select_topic(self, thought: str, extra: list[str] | None = None,
                     rng: random.Random | None = None) -> str | None:
        """Pick a topic near what the mind was just thinking about.

        The first word of the thought that is a linked concept wins and one
        of its neighbours is returned; otherwise any concept at random.
        """
        rng = rng or random
        keywords = list(dict.fromkeys(significant_tokens(thought)))
        keywords += [w.lower() for w in (extra or []) if w.lower() not in keywords]

        for word in keywords:
            linked = self._adj.get(word)
            if linked:
                return rng.choice(sorted(linked))

        if not self._adj:
            return None
        return rng.choice(list(self._adj))

    def to_dict(self) -> dict:
        return {word: sorted(linked) for word, linked in self._adj.items()}

    @classmethod
    def from_dict(cls, data: dict, max_nodes: int = MAX_NODES) -> "ConceptGraph":
        graph = cls(max_nodes)
        for word, linked in data.items():
            graph._touch(word)
            for other in linked:
                graph.add_edge(word, other)
        graph._evict(protect=set())
        return graph

    @classmethod
    def seeded(cls, max_nodes: int = MAX_NODES) -> "ConceptGraph":
        return cls.from_dict(SEED_GRAPH, max_nodes)
