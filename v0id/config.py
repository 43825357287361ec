"""All configuration in one place."""

import os
import yaml

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "..", "config.yaml")

AUX_DEFAULTS = {
    "external_stimulus": 0.2,
    "topic_change": 0.05,
    "encyclopedia": 0.05,
    "memory_splice": 0.05,
    "memory_drop": 0.03,
    "loop_interruption": 0.05,
    "stream_of_consciousness": 0.05,
}


def load_config(path: str = CONFIG_PATH) -> dict:
    """Load config from config.yaml, with env var overrides."""
    config = {}
    if os.path.isfile(path):
        with open(path, "r") as f:
            config = yaml.safe_load(f) or {}

    # Environment variable overrides
    config["api_key"] = (
        os.environ.get("OPENAI_API_KEY")
        or config.get("api_key")
    )
    config["hf_token"] = os.environ.get("HF_API_TOKEN") or config.get("hf_token")
    config["model"] = os.environ.get("V0ID_MODEL") or config.get("model", "gpt-4o-mini")
    config["provider"] = os.environ.get("V0ID_PROVIDER") or config.get("provider", "openai")
    if os.environ.get("V0ID_PORT"):
        config["port"] = int(os.environ["V0ID_PORT"])

    # Defaults for numeric settings
    config.setdefault("thought_interval_seconds", 12)
    config.setdefault("dream_duration_seconds", 8)
    config.setdefault("llm_timeout_seconds", 10)
    config.setdefault("max_output_tokens", 120)
    config.setdefault("memory_capacity", 10)
    config.setdefault("memory_decay_floor", 0.1)
    config.setdefault("novelty_window", 15)
    config.setdefault("topic_window", 30)
    config.setdefault("similarity_threshold", 0.4)
    config.setdefault("max_novelty_attempts", 3)
    config.setdefault("concept_graph_max_nodes", 500)
    config.setdefault("normalize_emotions", True)
    config.setdefault("dream_chance", 0.15)
    config.setdefault("topic_switch_chance", 0.2)
    config.setdefault("other_voice_chance", 0.15)
    config.setdefault("prompt_profile", "monologue")
    config.setdefault("data_path", "./mind_data")
    config.setdefault("port", 8080)

    aux = dict(AUX_DEFAULTS)
    aux.update(config.get("aux_probabilities") or {})
    config["aux_probabilities"] = aux

    # Resolve data_path relative to project root
    project_root = os.path.dirname(os.path.dirname(__file__))
    if not os.path.isabs(config["data_path"]):
        config["data_path"] = os.path.join(project_root, config["data_path"])

    return config


# Global config, loaded once
config = load_config()
