"""Tests for configuration classes."""

import os
from unittest.mock import patch

import pytest


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            from config import CORSConfig

            config = CORSConfig()

            assert config.allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_origins_with_whitespace(self):
        """Test that CORS origins are split and stripped."""
        with patch.dict(os.environ, {"CORS_ORIGINS": "  http://example.com  , http://a.test ,"}):
            from config import _parse_cors_origins

            assert _parse_cors_origins() == ["http://example.com", "http://a.test"]


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_defaults_match_classic_rules(self):
        """Without overrides the server plays classic War."""
        with patch.dict(os.environ, {}, clear=True):
            from config import GameConfig
            from war.game import RuleSet

            config = GameConfig()

            assert config.rules() == RuleSet()
            assert config.strict_invariants is True

    def test_env_overrides(self):
        """Every rule knob can be set from the environment."""
        env = {
            "WAR_SPECIAL_CARDS": "true",
            "WAR_POLICY": "chain",
            "WAR_NUKE_THRESHOLD": "8",
            "WAR_NUKE_CAPTURE": "5",
            "WAR_FORCED_WAR_INTERVAL": "20",
            "WAR_COOLDOWN_MS": "250",
            "STRICT_INVARIANTS": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            from config import GameConfig

            config = GameConfig()
            rules = config.rules()

            assert rules.include_special_cards
            assert rules.war_policy == "chain"
            assert rules.nuke_threshold == 8
            assert rules.nuke_capture == 5
            assert rules.forced_war_interval == 20
            assert rules.cooldown_ms == 250
            assert config.strict_invariants is False

    @pytest.mark.parametrize("value", ["", "0", "  "])
    def test_forced_war_disabled(self, value):
        with patch.dict(os.environ, {"WAR_FORCED_WAR_INTERVAL": value}):
            from config import _parse_forced_war_interval

            assert _parse_forced_war_interval() is None

    def test_invalid_policy_rejected_when_building_rules(self):
        with patch.dict(os.environ, {"WAR_POLICY": "sudden"}):
            from config import GameConfig

            with pytest.raises(ValueError):
                GameConfig().rules()


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_url_with_password(self):
        env = {"REDIS_HOST": "cache", "REDIS_PORT": "6380", "REDIS_DB": "2", "REDIS_PASSWORD": "s3cret"}
        with patch.dict(os.environ, env, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://:s3cret@cache:6380/2"


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "false", "RATE_LIMIT_RPM": "30"}):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is False
            assert config.requests_per_minute == 30
