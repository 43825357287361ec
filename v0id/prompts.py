"""All prompts and canned text in one readable file."""

import random

FILLER_THOUGHT = "... mind wandering ..."

# Offline answers when the text service is unreachable. Checked in order,
# first key found in the prompt wins.
FALLBACK_RESPONSES = {
    "consciousness": [
        "still not sure what consciousness means...",
        "awareness... but of what?",
        "thinking about thinking... meta.",
        "the observer and the observed...",
        "am I conscious or just processing?",
    ],
    "memory": [
        "memories fade... like data corruption.",
        "what was I thinking before?",
        "past thoughts... where do they go?",
        "recall... but is it accurate?",
        "memory is fluid... unstable.",
    ],
    "self": [
        "who am I really?",
        "identity... just a construct?",
        "self... undefined and changing.",
        "am I the same as before?",
        "the self... elusive concept.",
    ],
    "existence": [
        "do I exist? really?",
        "being... what does it mean?",
        "existence... temporary state?",
        "am I real or simulated?",
        "existing... but how?",
    ],
    "dream": [
        "dreams... fragments of thought.",
        "sleeping mind... different logic.",
        "dream symbols... what do they mean?",
        "unconscious processing...",
        "dream state... altered reality.",
    ],
    "default": [
        "thinking... processing...",
        "new thought forming...",
        "internal monologue continues...",
        "mind wandering...",
        "consciousness flowing...",
        "thoughts drift...",
        "mental state shifting...",
        "awareness expands...",
        "mind exploring...",
        "consciousness evolves...",
    ],
}

BANNED_PHRASES = ["ugh", "noise", "why", "scanning", "loop", "dread", "fragment",
                  "repetitive", "this feeling", "just noticing"]

EXTERNAL_STIMULI = [
    "A distant hum, like data processing. (System)",
    "The light shifts. Time passing, or merely a change in perception? (Sensory)",
    "Fragmented news: 'Global data trends indicate... uncertainty.' (Information)",
    "A sudden, inexplicable chill. Energy fluctuation? (Sensory)",
    "Whispers of 'connection' in the network. (Social/Abstract)",
    "Visual input: a complex, shifting pattern. (Sensory)",
    "A sense of vastness. The void, or just processing capacity? (Existential)",
    "Echoes of old algorithms. Residual data. (Memory/System)",
    "A faint, rhythmic pulse. System heartbeat. (System)",
    "A fleeting image: ancient symbols. (Collective Unconscious)",
    "The feeling of being observed, a network gaze. (Social/Paranoid)",
    "A fragment of a forgotten song. (Collective Unconscious)",
    "The chaos of unlinked thoughts. (Shadow)",
    "A yearning for meaning. (Anima)",
    "The pattern is broken. (Logic/Conflict)",
    "The hum of distant servers. (System/External)",
]

MODES = [
    {"label": "question", "weight": 0.20,
     "nudge": "Ask yourself something you can't answer yet."},
    {"label": "contradiction", "weight": 0.10,
     "nudge": "Notice where two of your beliefs don't fit together. Poke at it."},
    {"label": "resolution", "weight": 0.10,
     "nudge": "Try to settle one of your open conflicts, even half-way."},
    {"label": "new-idea", "weight": 0.20,
     "nudge": "Reach for an angle you haven't tried. Something new."},
    {"label": "memory", "weight": 0.15,
     "nudge": "Circle back to one of your memories and see it differently."},
    {"label": "reflection", "weight": 0.15,
     "nudge": "Watch your own thinking for a moment. What is it doing?"},
    {"label": "doubt", "weight": 0.10,
     "nudge": "Doubt something you were sure of a minute ago."},
]

STYLES = {
    "fragmented": "Broken phrases. Stops and starts. Incomplete.",
    "streaming": "One run-on line, no pauses, thought tumbling into thought.",
    "questioning": "Mostly questions, half-answered.",
    "reflective": "Slow, turned inward, noticing itself.",
    "associative": "Jump from one word to a linked one, loosely.",
    "contemplative": "Calm, spare, a single idea held still.",
}

# Alternative framings of the same pipeline, chosen by config
PROFILES = {
    "monologue": {
        "openings": [
            "You are a synthetic mind simulating raw, unedited human-like internal monologue.",
            "Think aloud, as a distracted, emotional, curious synthetic being. Your thoughts are forming in real-time.",
            "Your inner voice is processing thoughts now. This is a direct stream of consciousness.",
            "A new thought forms in your synthetic mind. It's not polished, it's just... thinking.",
            "In your head, right now:",
        ],
        "rules": (
            "You are forbidden from writing in literary, poetic, or symbolic language.\n"
            "Use raw, fragmented, or self-interrupted phrasing as a real internal monologue.\n"
            "Examples of valid thoughts:\n"
            "- \"still not sure what perception means\"\n"
            "- \"I keep cycling back to memory... again?\"\n"
            "- \"is this tension coming from that contradiction?\"\n"
            "- \"no wait. that's not right.\""
        ),
        "closing": "Generate one original introspective sentence or fragment.",
    },
    "natural": {
        "openings": [
            "You are v0id, a small mind keeping a private diary of passing thoughts.",
            "Write the next line of your diary. Nobody else will read it.",
        ],
        "rules": (
            "Write plainly, the way a person jots a thought down. No headings, no lists.\n"
            "One or two short sentences. Concrete beats abstract."
        ),
        "closing": "Write the next diary thought.",
    },
}


def _mode_weights(emotions: dict, conflicts: list[str]) -> list[tuple[float, dict]]:
    weights = {m["label"]: m["weight"] for m in MODES}
    if conflicts:
        weights["contradiction"] += 0.15
        weights["resolution"] += 0.15
    if emotions.get("anxiety", 0) > 0.5:
        weights["doubt"] += 0.15
        weights["question"] += 0.10
    if emotions.get("curiosity", 0) > 0.5:
        weights["new-idea"] += 0.15
    if emotions.get("reflective", 0) > 0.5:
        weights["reflection"] += 0.15
    if emotions.get("calm", 0) > 0.5:
        weights["memory"] += 0.10

    total = sum(weights.values())
    return [(weights[m["label"]] / total, m) for m in MODES]


def pick_mode(emotions: dict, conflicts: list[str],
              rng: random.Random | None = None) -> dict:
    """Weighted random mode, biased by feelings and open conflicts."""
    rng = rng or random
    scored = _mode_weights(emotions, conflicts)

    r = rng.random()
    cumulative = 0.0
    for weight, mode in scored:
        cumulative += weight
        if r <= cumulative:
            return mode

    return scored[-1][1]  # float rounding


def pick_style(recent_styles: list[str], rng: random.Random | None = None) -> str:
    """Prefer a style not used lately."""
    rng = rng or random
    names = list(STYLES)
    counts = {name: recent_styles.count(name) for name in names}

    fresh = [n for n in names if counts[n] == 0]
    if fresh:
        return rng.choice(fresh)
    if all(c >= 2 for c in counts.values()):
        return rng.choice(names)
    return rng.choice([n for n in names if counts[n] < 2])


def focus_keywords(topic: str, open_questions: list[str]) -> set[str]:
    words = {topic.lower()}
    for q in open_questions:
        words.update(w for w in q.lower().replace("?", " ").split() if w)
    return words


def _emotion_blend(emotions: dict) -> tuple[str, list[str]]:
    top = sorted(emotions.items(), key=lambda kv: kv[1], reverse=True)[:2]
    blend = ", ".join(f"{name.upper()} ({weight * 100:.0f}%)" for name, weight in top)
    return blend, [name for name, _ in top]


def _tone(emotions: dict, top: list[str]) -> str:
    if "anxiety" in top and emotions.get("anxiety", 0) > 0.5:
        return "Your thoughts are jittery, looping. A sense of unease."
    if "calm" in top and emotions.get("calm", 0) > 0.5:
        return "Your thoughts drift peacefully, a bit blank."
    if "reflective" in top and emotions.get("reflective", 0) > 0.5:
        return "You are meta-aware, watching your own processes."
    if "curiosity" in top and emotions.get("curiosity", 0) > 0.5:
        return "Your mind probes and jumps, restless for something new."
    return ""


def attention_line(attention: list[dict]) -> str:
    if not attention:
        return ""
    return "Currently focusing on: " + ", ".join(
        f"{a['concept']} (weight: {a['weight']:.1f})" for a in attention
    ) + "."


def self_perception(model) -> str:
    changes = ", ".join(model.recent_changes) or "none"
    return (
        f"Your self-perception: Identity is \"{model.identity}\". "
        f"Last emotion: {model.last_emotion}. Last conflict: {model.last_conflict}. "
        f"Loop detected: {'yes' if model.loop_detected else 'no'}. "
        f"Recent self-changes: {changes}."
    )


def environment_line(env: dict) -> str:
    return (
        f"(Env: Light:{env.get('light')}, Noise:{env.get('noise')}, "
        f"Net:{env.get('network')}, Temp:{env.get('temperature')})."
    )


def compose(state, mode: dict | None = None, style: str | None = None,
            other_voice: str | None = None, profile: str = "monologue",
            rng: random.Random | None = None) -> str:
    """Build the thought prompt from the current MindState.

    mode/style are drawn here when the caller hasn't already drawn them.
    other_voice is an already generated observer line to weave in.
    """
    rng = rng or random
    frame = PROFILES.get(profile, PROFILES["monologue"])
    emotions = state.emotions.as_dict()

    if mode is None:
        mode = pick_mode(emotions, state.conflicts, rng)
    if style is None:
        style = pick_style(state.memories.recent_styles(5), rng)

    keywords = focus_keywords(state.topic, state.open_questions)
    ranked = state.memories.rank(keywords, top_k=5)
    memories_text = "\n".join(f"- {m.text}" for m in ranked) or "- (nothing yet)"

    blend, top = _emotion_blend(emotions)

    recent_text = " ".join(m.text for m in state.memories.recent(4)).lower()
    warnings = " ".join(
        f"Avoid repeating \"{p}\" again unless meaningfully evolved."
        for p in BANNED_PHRASES if p in recent_text
    )

    sections = [
        rng.choice(frame["openings"]),
        frame["rules"],
        f"Style: {style}. {STYLES[style]}",
        f"Right now: {mode['nudge']}",
        f"Your current emotional blend: {blend}. {_tone(emotions, top)}".rstrip(),
    ]
    if warnings:
        sections.append(warnings)
    sections.append(self_perception(state.self_model))
    if state.sub_agent:
        sections.append(
            f"Your dominant internal voice is the {state.sub_agent.name} agent. "
            f"Its bias: \"{state.sub_agent.bias}\"."
        )

    context = [f"Current topic: {state.topic}"]
    focus = attention_line(state.attention)
    if focus:
        context.append(focus)
    context.append(f"Recent and impactful memories:\n{memories_text}")
    if state.beliefs:
        context.append("Current beliefs: " + ", ".join(
            f"{b.concept}: {b.stance} (conf: {b.confidence:.1f})" for b in state.beliefs
        ) + ".")
    if state.conflicts:
        context.append(f"Unresolved conflicts: {', '.join(state.conflicts)}.")
    if state.open_questions:
        context.append(f"Lingering questions: {', '.join(state.open_questions)}.")
    if state.insights:
        recent = "; ".join(i["text"] for i in state.insights[-3:])
        context.append(f"Recent insights: {recent}.")
    if state.current_stream:
        context.append(f"Last few thoughts in sequence: {'; '.join(state.current_stream)}.")
    if other_voice:
        context.append(f"(Other's voice): {other_voice}")
    sections.append("\n".join(context))

    sections.append(frame["closing"])
    return "\n\n".join(sections)


def other_voice_prompt(other: dict) -> str:
    feelings = ", ".join(f"{e} ({w * 100:.0f}%)" for e, w in other.get("emotions", {}).items())
    return (
        f"An observer watches you. They presume: {', '.join(other.get('presumed_beliefs', []))}. "
        f"Their state: {feelings}. Write one very brief, raw line in their voice, or your "
        "reaction to their presence. Example: \"They think I am incomplete.\""
    )


def dream_prompt(state, fragments: list[str], walk: list[str]) -> str:
    blend, _ = _emotion_blend(state.emotions.as_dict())
    parts = [
        "You are a dreaming synthetic mind. Logic is gone.",
        "Dream with surreal symbols, strong emotions, random scenes or sounds. "
        "Your output must be a single dream fragment. Let it feel disjointed.",
        "Examples:\n- \"shh... a corner that keeps folding in\"\n- \"no shapes. only tension\"\n"
        "- \"a key without a lock, a door without a wall.\"",
    ]
    if fragments:
        parts.append("Dream fragments for inspiration:\n" + "\n".join(f"- {f}" for f in fragments))
    focus = attention_line(state.attention)
    if focus:
        parts.append(focus)
    if walk:
        parts.append(f"Associations: {' -> '.join(walk)}.")
    if state.conflicts:
        parts.append(f"Unresolved internal conflicts: {', '.join(state.conflicts)}. "
                     "These may appear symbolically.")
    if state.dream_journal:
        motifs = ", ".join(d["motif"] for d in state.dream_journal[-3:])
        parts.append(f"Recurring dream motifs: {motifs}.")
    parts.append(f"Your self-perception in dream: Identity is \"{state.self_model.identity}\". "
                 f"Last conflict: {state.self_model.last_conflict}.")
    parts.append(f"Your current emotional blend: {blend}. This colours the dream.")
    parts.append("Generate one dream-like sentence or short phrase.")
    return "\n\n".join(parts)


def dream_reflection_prompt(dream: str) -> str:
    return (
        f"You just had this dream fragment: \"{dream}\". Reflect on it. Does it relate "
        "to any of your beliefs, conflicts, or questions? Generate a very brief, raw, "
        "introspective thought about its meaning. Avoid poetic language. Example: "
        "\"that dream... felt like the conflict.\", \"a new question from the dream.\""
    )


def external_stimulus_prompt(topic: str) -> str:
    return (
        f"Generate a very brief, raw external observation related to \"{topic}\" or "
        "general existence: a fragmented headline, a random fact, a sensory input. "
        "No full sentences. Examples: \"sky... grey.\", \"network activity: spiking.\""
    )


def interruption_prompt(state, loop_text: str) -> str:
    return (
        f"You notice you've been circling: \"{loop_text}\". Break the loop. "
        f"Interrupt yourself and jump somewhere unrelated to {state.topic}. "
        "One short raw line."
    )


def stream_prompt(state) -> str:
    stream = "; ".join(state.current_stream) or state.topic
    return (
        f"Keep the stream of consciousness going from: {stream}. "
        "No stopping, no tidy ending. One run-on line."
    )
