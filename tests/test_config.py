"""Tests for config loading."""

import pytest

from note_enhancer.config import AppConfig, CacheConfig, KnowledgeConfig, LLMConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.llm.max_retries == 0
        assert config.pipeline.simple_word_threshold == 10
        assert config.pipeline.min_tokens == 500
        assert config.pipeline.max_tokens == 2000
        assert config.knowledge.max_terms == 8
        assert config.quota.free_tier_limit == 5
        assert config.cache.ttl_days == 7

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.transcription.model == "whisper-large-v3"

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  model: test-model\npipeline:\n  context_min_words: 40\n"
        )
        config = load_config(yaml_path)
        assert config.llm.model == "test-model"
        assert config.pipeline.context_min_words == 40
        # Defaults for unspecified
        assert config.knowledge.primary_sentences == 4

    def test_specificity_patterns_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("knowledge:\n  specificity_patterns:\n    - '\\d{4}'\n")
        config = load_config(yaml_path)
        assert config.knowledge.specificity_patterns == (r"\d{4}",)

    def test_empty_yaml_uses_defaults(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_cache_resolved_path(self):
        cache = CacheConfig(db_path="~/test.db")
        resolved = cache.resolved_db_path
        assert "~" not in str(resolved)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.model = "changed"

    def test_patterns_default_none(self):
        assert KnowledgeConfig().specificity_patterns is None
