"""
Runtime Configuration Module

Provides configuration loading for the oracle engine.
"""

from .runtime import (
    HttpConfig,
    LLMConfig,
    PipelineConfig,
    ProvidersConfig,
    RuntimeConfig,
    load_runtime_config,
)

__all__ = [
    "HttpConfig",
    "LLMConfig",
    "PipelineConfig",
    "ProvidersConfig",
    "RuntimeConfig",
    "load_runtime_config",
]
