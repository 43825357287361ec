"""The thinking loop: one tick every few seconds, forever."""

import asyncio
import json
import logging
import os
import random
from datetime import datetime

from v0id.beliefs import (
    DEFAULT_RULES, choose_sub_agent, detect_conflicts, mental_tension, update_beliefs,
)
from v0id.config import config
from v0id.encyclopedia import fetch_summary
from v0id.models import MemoryEntry
from v0id.novelty import is_too_similar
from v0id.persistence import load_state, save_state
from v0id.prompts import (
    EXTERNAL_STIMULI, FILLER_THOUGHT, compose, dream_prompt, dream_reflection_prompt,
    environment_line, external_stimulus_prompt, interruption_prompt, other_voice_prompt,
    pick_mode, pick_style, stream_prompt,
)
from v0id.provider import Gateway, create_provider
from v0id.state import DREAM, MAX_JOURNAL, RUN, MindState

logger = logging.getLogger("v0id.brain")

LOG_PATH = os.path.join(os.path.dirname(__file__), "..", "v0id.log.jsonl")

MATURITY_STEP = 0.001
MAX_INSIGHTS = 50
DREAM_VOICE = "Anima"
LLM_STIMULUS_CHANCE = 0.4


class Brain:
    """Owns the MindState and is its only writer."""

    def __init__(self, state: MindState, gateway: Gateway, settings: dict = None,
                 rng: random.Random = None, data_path: str | None = None,
                 lookup=fetch_summary, rules=None):
        self.state = state
        self.gateway = gateway
        self.settings = settings if settings is not None else config
        self.rng = rng or random.Random()
        self.data_path = data_path
        self.lookup = lookup
        self.rules = rules if rules is not None else DEFAULT_RULES
        self.events: list[dict] = []
        self.tick_count: int = 0
        self.skipped_ticks: int = 0
        self.running: bool = False
        self.modulators = None
        self._busy: bool = False
        self._ws_clients: set = set()
        self._wake_event: asyncio.Event | None = None
        self._tasks: set[asyncio.Task] = set()
        self._crash: BaseException | None = None
        self._pending_topic: str | None = None
        self._dream_handle: asyncio.TimerHandle | None = None

    @classmethod
    def from_settings(cls, settings: dict = None) -> "Brain":
        """Restore state from disk and wire up the configured provider."""
        settings = settings if settings is not None else config
        state = load_state(settings["data_path"], settings)
        try:
            provider = create_provider(settings)
        except Exception as e:
            logger.warning(f"No text provider available, thinking offline: {e}")
            provider = None
        gateway = Gateway(provider, max_tokens=settings.get("max_output_tokens", 120))
        return cls(state, gateway, settings, data_path=settings["data_path"])

    # --- WebSocket / events ---

    def add_ws_client(self, ws):
        self._ws_clients.add(ws)

    def remove_ws_client(self, ws):
        self._ws_clients.discard(ws)

    async def _broadcast(self, message: dict):
        dead = set()
        for ws in self._ws_clients:
            try:
                await ws.send_json(message)
            except Exception:
                dead.add(ws)
        self._ws_clients -= dead

    async def _emit(self, event_type: str, **data):
        entry = {
            "type": event_type,
            "timestamp": datetime.now().isoformat(),
            "tick": self.tick_count,
            "mode": self.state.mode,
            **data,
        }
        self.events.append(entry)
        # Cap in-memory events to prevent unbounded growth
        if len(self.events) > 500:
            self.events = self.events[-500:]
        await self._broadcast({"event": "entry", "data": entry})
        text = data.get("text", data.get("topic", ""))
        logger.info(f"[{event_type}] {str(text)[:120]}")

    def status(self) -> dict:
        s = self.state
        return {
            "mode": s.mode,
            "topic": s.topic,
            "thought": s.thought,
            "maturity": round(s.maturity, 3),
            "pulse": s.pulse,
            "tick_count": self.tick_count,
            "skipped_ticks": self.skipped_ticks,
            "memory_count": len(s.memories),
            "dominant_emotion": s.emotions.dominant_label(),
            "sub_agent": s.sub_agent.name if s.sub_agent else None,
            "mental_tension": mental_tension(s.conflicts),
            "external_input": s.external_input,
            "last_error": self.gateway.last_error,
            "llm_calls": self.gateway.calls,
            "fallbacks": self.gateway.fallbacks,
        }

    # --- Helpers ---

    async def _generate(self, prompt: str) -> str:
        return await asyncio.to_thread(self.gateway.generate, prompt)

    def _too_similar(self, text: str) -> bool:
        return is_too_similar(
            text, self.state.memories.entries,
            recent_window=self.settings.get("novelty_window", 15),
            topic_window=self.settings.get("topic_window", 30),
            threshold=self.settings.get("similarity_threshold", 0.4),
        )

    def _aux(self, name: str) -> bool:
        chance = self.settings.get("aux_probabilities", {}).get(name, 0.0)
        return self.rng.random() < chance

    def _refresh_conflicts(self):
        """Rule conflicts follow the beliefs; anything else stays until resolved."""
        s = self.state
        rule_labels = {r.label for r in self.rules}
        sticky = [c for c in s.conflicts if c not in rule_labels]
        s.conflicts = detect_conflicts(s.beliefs, self.rules) + sticky

    def _refresh_modulators(self):
        self.modulators = self.state.emotions.modulators(
            self.state.maturity,
            base_topic_switch=self.settings.get("topic_switch_chance", 0.2),
            base_dream=self.settings.get("dream_chance", 0.15),
        )

    async def _change_topic(self, reason: str):
        s = self.state
        extra = (s.sub_agent.preferred_topics if s.sub_agent else []) + s.attention_concepts()
        new_topic = s.concepts.select_topic(s.thought, extra, self.rng)
        if new_topic and new_topic != s.topic:
            old, s.topic = s.topic, new_topic
            s.focus_on(new_topic)
            await self._emit("topic", topic=new_topic, previous=old, reason=reason)

    # --- Tick ---

    async def tick(self) -> bool:
        """One cycle. Returns False if skipped because the last one is still running."""
        if self._busy:
            self.skipped_ticks += 1
            logger.warning("Previous tick still running, skipping this one")
            return False
        self._busy = True
        try:
            await self._tick()
        finally:
            self._busy = False
            if self.data_path:
                save_state(self.state, self.data_path)
        await self._broadcast({"event": "status", "data": self.status()})
        return True

    async def _tick(self):
        s = self.state
        self.tick_count += 1
        s.pulse = not s.pulse
        s.maturity = min(1.0, s.maturity + MATURITY_STEP)

        if self._pending_topic:
            old, s.topic = s.topic, self._pending_topic
            self._pending_topic = None
            s.focus_on(s.topic)
            await self._emit("topic", topic=s.topic, previous=old, reason="requested")

        if s.mode == DREAM:
            logger.info("Still dreaming, letting the tick pass")
            return

        self._refresh_modulators()

        if self._aux("external_stimulus"):
            await self._external_stimulus()

        s.sub_agent = choose_sub_agent(s.sub_agents, mental_tension(s.conflicts),
                                       s.mode, self.rng)

        if self.rng.random() < self.modulators.dream_chance:
            await self._dream()
            return

        await self._think()
        await self._side_effects()

    async def _think(self):
        """RUN mode: compose, generate, filter, remember, and let it ripple."""
        if self.modulators is None:
            self._refresh_modulators()
        s = self.state
        emotions = s.emotions.as_dict()
        mode = pick_mode(emotions, s.conflicts, self.rng)
        style = pick_style(s.memories.recent_styles(5), self.rng)

        other_voice = None
        if self.rng.random() < self.settings.get("other_voice_chance", 0.15):
            other_voice = await self._generate(other_voice_prompt(s.other))

        attempts = self.settings.get("max_novelty_attempts", 3)
        thought = None
        for attempt in range(1, attempts + 1):
            prompt = compose(s, mode=mode, style=style, other_voice=other_voice,
                             profile=self.settings.get("prompt_profile", "monologue"),
                             rng=self.rng)
            candidate = await self._generate(prompt)
            if not self._too_similar(candidate):
                thought = candidate
                break
            logger.info(f"Too similar (attempt {attempt}/{attempts}): {candidate[:80]}")

        stuck = thought is None
        if stuck:
            logger.warning("Could not produce a novel thought, substituting filler")
            thought = FILLER_THOUGHT
        novelty = 0.2 if self._too_similar(thought) else 1.0

        decay = self.modulators.memory_decay_rate
        s.memories.add(
            MemoryEntry(thought, s.emotions.dominant_label(), 1.0, style=style,
                        kind="filler" if stuck else "thought"),
            decay_rate=decay,
        )
        s.thought = thought
        s.push_stream(thought)

        s.emotions.drift(self.rng, normalize=self.settings.get("normalize_emotions", True))

        bias = s.sub_agent.belief_bias if s.sub_agent else 0.0
        update_beliefs(s.beliefs, thought, novelty, bias)
        if not stuck:
            s.concepts.add_thought(thought)

        self._refresh_conflicts()
        rule_labels = {r.label for r in self.rules}
        if mode["label"] == "resolution" and not stuck:
            settled = next((c for c in s.conflicts if c not in rule_labels), None)
            if settled:
                s.conflicts.remove(settled)
                s.insights.append({"text": f"settled: {settled}", "timestamp": datetime.now().isoformat()})

        self._update_self_model(stuck)

        await self._emit("thought", text=thought, style=style, kind=mode["label"],
                         novelty=novelty)

        if stuck:
            await self._change_topic("repetition")
        elif (s.emotions.dominant(1)[0][0] == "curiosity"
              and self.rng.random() < self.modulators.topic_switch_chance):
            await self._change_topic("curiosity")

    # --- Dreaming ---

    async def _dream(self):
        """Dream one fragment, reflect on it, and wake up after a fixed delay."""
        s = self.state
        s.mode = DREAM
        s.sub_agent = next((a for a in s.sub_agents if a.name == DREAM_VOICE), s.sub_agent)
        s.emotions.nudge("dreaming", 0.2)
        s.emotions.nudge("curiosity", -0.1)
        await self._emit("mode", text=DREAM)

        texts = [m.text for m in s.memories]
        fragments = self.rng.sample(texts, min(3, len(texts)))
        walk = s.concepts.random_walk(3, self.rng)

        dream = await self._generate(dream_prompt(s, fragments, walk))
        s.memories.add(MemoryEntry(dream, "DREAMING", 0.7, kind="dream"))
        s.thought = dream
        await self._emit("dream", text=dream, walk=walk)

        reflection = await self._generate(dream_reflection_prompt(dream))
        s.memories.add(MemoryEntry(reflection, "REFLECTIVE", 0.7, kind="reflection"))
        s.thought = f"(Dream reflection): {reflection}"

        lowered = reflection.lower()
        if "conflict" in lowered and "dream-induced conflict" not in s.conflicts:
            s.conflicts.append("dream-induced conflict")
        if "question" in lowered:
            s.add_question(reflection)
        now = datetime.now().isoformat()
        s.insights.append({"text": reflection, "timestamp": now})
        s.dream_journal.append({"motif": dream[:50], "timestamp": now})
        s.self_model.note_change(f"Dream reflection: \"{reflection[:30]}...\"")
        s.self_model.narrative.append(
            {"timestamp": now, "insight": f"Dreamt of: \"{dream[:50]}...\""}
        )
        del s.dream_journal[:-MAX_JOURNAL]
        del s.self_model.narrative[:-MAX_JOURNAL]
        del s.insights[:-MAX_INSIGHTS]
        s.push_stream(reflection)
        await self._emit("reflection", text=reflection)

        self._schedule_wake()

    def _update_self_model(self, stuck: bool):
        s = self.state
        model = s.self_model
        model.last_emotion = s.emotions.dominant_label()
        model.last_conflict = s.conflicts[-1] if s.conflicts else "undefined"
        if stuck != model.loop_detected:
            model.note_change("caught in a loop" if stuck else "loop broken")
        model.loop_detected = stuck

    def _schedule_wake(self):
        loop = asyncio.get_running_loop()
        if self._dream_handle:
            self._dream_handle.cancel()
        delay = self.settings.get("dream_duration_seconds", 8)
        self._dream_handle = loop.call_later(delay, self._wake_from_dream)

    def _wake_from_dream(self):
        self._dream_handle = None
        s = self.state
        if s.mode != DREAM:
            return
        s.mode = RUN
        s.emotions.nudge("dreaming", -0.2)
        s.emotions.nudge("curiosity", 0.1)
        self._track(asyncio.get_running_loop().create_task(self._emit("mode", text=RUN)))

    # --- Side effects, each an independent coin flip ---

    async def _side_effects(self):
        if self._aux("topic_change"):
            await self._change_topic("drift")
        if self._aux("encyclopedia"):
            await self._consult_encyclopedia()
        if self._aux("memory_splice"):
            await self._splice_memory()
        if self._aux("memory_drop"):
            victim = self.state.memories.drop_random(self.rng)
            if victim:
                await self._emit("forget", text=victim.text)
        if self._aux("loop_interruption"):
            await self._extra_thought(interruption_prompt(self.state, self.state.thought),
                                      "interruption")
        if self._aux("stream_of_consciousness"):
            await self._extra_thought(stream_prompt(self.state), "stream")

    async def _external_stimulus(self):
        s = self.state
        if self.rng.random() < LLM_STIMULUS_CHANCE:
            observation = await self._generate(external_stimulus_prompt(s.topic))
        else:
            observation = self.rng.choice(EXTERNAL_STIMULI)
        stamp = datetime.now().strftime("%H:%M:%S %A")
        s.external_input = f"(External: {stamp}) {environment_line(s.environment)} {observation}"
        s.memories.add(MemoryEntry(s.external_input, "CURIOSITY", 0.3, kind="external"))
        await self._emit("external", text=s.external_input)

    async def _consult_encyclopedia(self):
        s = self.state
        timeout = self.settings.get("llm_timeout_seconds", 10)
        summary = await asyncio.to_thread(self.lookup, s.topic, timeout)
        if not summary:
            return
        text = f"(Definition: {s.topic}) {summary[:200]}"
        s.memories.add(MemoryEntry(text, "CURIOSITY", 0.3, kind="external"))
        await self._emit("definition", text=text)

    async def _splice_memory(self):
        s = self.state
        text = s.memories.splice(self.rng)
        if not text or self._too_similar(text):
            return
        s.memories.add(MemoryEntry(text, s.emotions.dominant_label(), 0.5, kind="synthesized"))
        await self._emit("synthesized", text=text)

    async def _extra_thought(self, prompt: str, kind: str):
        s = self.state
        text = await self._generate(prompt)
        if self._too_similar(text):
            return
        s.memories.add(MemoryEntry(text, s.emotions.dominant_label(), 0.8, kind=kind))
        s.thought = text
        s.push_stream(text)
        await self._emit(kind, text=text)

    # --- Main loop ---

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self._crash = task.exception()

    async def run(self):
        """Fire a tick every interval. Overlapping ticks are skipped by the busy guard."""
        self.running = True
        self._wake_event = asyncio.Event()
        interval = self.settings.get("thought_interval_seconds", 12)
        logger.info(f"v0id is waking up (tick every {interval}s)...")

        while self.running:
            # Surface a crashed tick to the supervisor
            if self._crash is not None:
                exc, self._crash = self._crash, None
                raise exc

            self._track(asyncio.create_task(self.tick()))
            self._wake_event.clear()
            try:
                await asyncio.wait_for(self._wake_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

        if self._tasks:
            await asyncio.wait(set(self._tasks))

    def request_topic(self, topic: str):
        """Queue a topic for the next tick; the tick stays the only writer."""
        self._pending_topic = topic.strip() or None

    def wake(self):
        """Run the next tick now instead of waiting out the interval."""
        if self._wake_event:
            self._wake_event.set()

    def _log_jsonl(self, entry: dict):
        """Write an arbitrary entry to the JSONL log file."""
        try:
            with open(LOG_PATH, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.error(f"Failed to write log entry: {e}")

    def stop(self):
        self.running = False
        if self._dream_handle:
            self._dream_handle.cancel()
            self._dream_handle = None
        if self._wake_event:
            self._wake_event.set()
