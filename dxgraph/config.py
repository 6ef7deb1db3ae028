"""
Engine Configuration Settings

Defaults can be set here or overridden via environment variables, then
adjusted at runtime with ``set_config(...)``.
"""

import os


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class EngineConfig:
    """Configuration for graph loading and traversal."""

    def __init__(self):
        # Longest run of consecutive logic nodes before a loop is reported
        self.max_logic_chain: int = int(os.getenv("DXGRAPH_MAX_LOGIC_CHAIN", "64"))

        # Load-time simulation of every answer combination
        self.exhaustive_validation: bool = _env_bool("DXGRAPH_EXHAUSTIVE_VALIDATION")
        self.simulation_limit: int = int(os.getenv("DXGRAPH_SIMULATION_LIMIT", "500000"))

        self.log_level: str = os.getenv("DXGRAPH_LOG_LEVEL", "WARNING")

        # Burr orchestrator
        self.burr_tracking: bool = _env_bool("DXGRAPH_BURR_TRACKING")
        self.burr_project: str = os.getenv("DXGRAPH_BURR_PROJECT", "dxgraph")

    def update(self, **kwargs) -> 'EngineConfig':
        """Update configuration values at runtime."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration parameter: {key}")
        return self

    def validate(self) -> bool:
        """Validate configuration values."""
        if self.max_logic_chain < 1:
            raise ValueError(f"max_logic_chain must be >= 1, got {self.max_logic_chain}")
        if self.simulation_limit < 1:
            raise ValueError(f"simulation_limit must be >= 1, got {self.simulation_limit}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.log_level}")
        return True


# Global configuration instance
config = EngineConfig()

def set_config(**kwargs) -> EngineConfig:
    """Convenience function to update global configuration."""
    return config.update(**kwargs)

def get_config() -> EngineConfig:
    """Get the global configuration instance."""
    return config
