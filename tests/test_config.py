"""Tests for config loading."""

from v0id.config import load_config


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("V0ID_PROVIDER", raising=False)
        cfg = load_config(str(tmp_path / "absent.yaml"))
        assert cfg["provider"] == "openai"
        assert cfg["memory_capacity"] == 10
        assert cfg["aux_probabilities"]["memory_drop"] == 0.03

    def test_yaml_and_env(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(
            "provider: local\n"
            "thought_interval_seconds: 3\n"
            "data_path: /var/lib/v0id\n"
            "aux_probabilities:\n  encyclopedia: 0.5\n"
        )
        monkeypatch.setenv("V0ID_PROVIDER", "huggingface")
        monkeypatch.setenv("V0ID_PORT", "9000")
        cfg = load_config(str(path))
        assert cfg["provider"] == "huggingface"
        assert cfg["port"] == 9000
        assert cfg["thought_interval_seconds"] == 3
        assert cfg["data_path"] == "/var/lib/v0id"
        assert cfg["aux_probabilities"]["encyclopedia"] == 0.5
        assert cfg["aux_probabilities"]["external_stimulus"] == 0.2
