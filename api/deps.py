"""
API Dependencies

The pipeline is built once per process from the runtime config and
shared across requests. Tests replace it through
`app.dependency_overrides[get_pipeline]`.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from core.config import load_runtime_config
from orchestrator import Pipeline, create_pipeline

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_pipeline() -> Pipeline:
    config = load_runtime_config()
    if not config.llm.api_key and config.llm.provider != "mock":
        logger.warning(
            "No API key resolved for LLM provider %r; every market will fail with INFERENCE_UNAVAILABLE. "
            "Set the provider env var (e.g. ANTHROPIC_API_KEY) or llm.api_key in oracle.json.",
            config.llm.provider,
        )
    return create_pipeline(config)
