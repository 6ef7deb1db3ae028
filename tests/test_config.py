"""
Test Suite for Engine Configuration
"""

import pytest

from dxgraph import (
    BaseOrchestrator, EngineConfig, SessionStatus, TraversalLoopError, create_traversal_engine, get_config, set_config,
)
from dxgraph.domains.echo import get_algorithm


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DXGRAPH_* overrides from the environment."""
    for name in [
        "DXGRAPH_MAX_LOGIC_CHAIN", "DXGRAPH_EXHAUSTIVE_VALIDATION", "DXGRAPH_SIMULATION_LIMIT",
        "DXGRAPH_LOG_LEVEL", "DXGRAPH_BURR_TRACKING", "DXGRAPH_BURR_PROJECT",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestEngineConfig:
    """Test configuration defaults and overrides."""

    def test_defaults(self, clean_env):
        """Test default values."""
        cfg = EngineConfig()

        assert cfg.max_logic_chain == 64
        assert cfg.exhaustive_validation is False
        assert cfg.simulation_limit == 500000
        assert cfg.log_level == "WARNING"
        assert cfg.burr_tracking is False
        assert cfg.burr_project == "dxgraph"
        assert cfg.validate()

    def test_environment_overrides(self, clean_env, monkeypatch):
        """Test values read from the environment."""
        monkeypatch.setenv("DXGRAPH_MAX_LOGIC_CHAIN", "8")
        monkeypatch.setenv("DXGRAPH_EXHAUSTIVE_VALIDATION", "yes")
        monkeypatch.setenv("DXGRAPH_BURR_PROJECT", "echo-lab")

        cfg = EngineConfig()

        assert cfg.max_logic_chain == 8
        assert cfg.exhaustive_validation is True
        assert cfg.burr_project == "echo-lab"

    def test_update(self):
        """Test runtime updates and unknown keys."""
        cfg = EngineConfig().update(max_logic_chain=3)
        assert cfg.max_logic_chain == 3

        with pytest.raises(ValueError):
            cfg.update(max_depth=3)

    def test_validate(self):
        """Test that invalid values are rejected."""
        with pytest.raises(ValueError):
            EngineConfig().update(max_logic_chain=0).validate()
        with pytest.raises(ValueError):
            EngineConfig().update(log_level="LOUD").validate()

    def test_global_config(self):
        """Test the shared configuration instance."""
        original = get_config().burr_project
        try:
            assert set_config(burr_project="elsewhere") is get_config()
            assert get_config().burr_project == "elsewhere"
        finally:
            set_config(burr_project=original)


class TestConfigEffects:
    """Test that engines honor their configuration."""

    def test_logic_chain_limit(self):
        """Test that a short chain limit stops two consecutive logic nodes."""
        engine = BaseOrchestrator(get_algorithm("ase2016"), EngineConfig().update(max_logic_chain=1))
        session = engine.start("reduced")
        for value in ["mid_range", "positive", "positive"]:
            engine.answer(session, value)

        # LA volume leads through the PV-need check and the evaluator back to back
        with pytest.raises(TraversalLoopError):
            engine.answer(session, "positive")
        assert session.status == SessionStatus.FAILED

    @pytest.mark.parametrize("kind", ["base", "burr"])
    def test_engines_reject_invalid_config(self, kind):
        """Test that an engine refuses a configuration that fails validation."""
        with pytest.raises(ValueError, match="max_logic_chain"):
            create_traversal_engine(get_algorithm("mayo2025"), kind, EngineConfig().update(max_logic_chain=0))
