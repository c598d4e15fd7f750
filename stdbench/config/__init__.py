"""stdbench.config

YAML configuration loading.
"""

from __future__ import annotations

from .loader import Config, load_config, parse_config

__all__ = ["Config", "load_config", "parse_config"]
