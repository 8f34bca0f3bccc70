"""Runtime settings for chain traversal and decoding.

Environment variables (all overridable via constructor args):
    ERRCHAIN_MAX_DEPTH   - longest chain walked or decoded (default 10000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 10_000


@dataclass(frozen=True)
class Settings:
    max_chain_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if self.max_chain_depth < 1:
            raise ValueError("max_chain_depth must be positive")

    @classmethod
    def from_env(cls, max_chain_depth: int | None = None) -> "Settings":
        """Build settings from environment variables."""
        if max_chain_depth is None:
            raw = os.environ.get("ERRCHAIN_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))
            try:
                max_chain_depth = int(raw)
            except ValueError as e:
                raise ValueError(
                    f"ERRCHAIN_MAX_DEPTH must be an integer, got {raw!r}"
                ) from e
        return cls(max_chain_depth=max_chain_depth)


_settings = Settings.from_env()


def get_settings() -> Settings:
    return _settings


def configure(settings: Settings) -> Settings:
    """Install *settings* process-wide and return the previous ones."""
    global _settings
    previous, _settings = _settings, settings
    return previous
