"""
Runtime Configuration

Process-wide configuration for the resolution pipeline: inference
provider, HTTP behaviour, data-provider credentials and settlement policy.
Built once at startup and passed explicitly into the pipeline.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class LLMConfig:
    """Configuration for the inference provider."""
    provider: str = "anthropic"
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 2048

    def __post_init__(self):
        if self.api_key is None:
            self.api_key = os.getenv(f"{self.provider.upper()}_API_KEY")


_DEFAULT_HTTP_USER_AGENT = "oracle-engine/0.1 (+https://github.com/oracle-engine)"


@dataclass
class HttpConfig:
    """Configuration for outbound HTTP calls to data and news providers."""
    timeout: float = 15.0
    user_agent: str = _DEFAULT_HTTP_USER_AGENT


@dataclass
class ProvidersConfig:
    """Credentials and limits for external data providers."""
    gnews_api_key: Optional[str] = None
    alpha_vantage_api_key: Optional[str] = None
    max_results_per_query: int = 3
    enable_google_news: bool = True


@dataclass
class PipelineConfig:
    """Settlement thresholds and execution switches."""
    settle_threshold: float = 0.85
    defer_threshold: float = 0.70
    low_confidence_threshold: float = 0.60
    execute_deterministic: bool = False
    max_workers: int = 1
    gather_workers: int = 8
    debug: bool = False


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the oracle engine.

    Can be loaded from:
    - Environment variables (and a local .env file)
    - JSON or YAML file
    - Programmatic construction
    """
    llm: LLMConfig = field(default_factory=LLMConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    proxy: Optional[str] = None
    log_level: str = "INFO"

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Collect configuration overrides from environment variables.

        Supported variables:
        - ORACLE_LLM_PROVIDER / ORACLE_LLM_MODEL / ORACLE_LLM_API_KEY
        - ORACLE_EXECUTE_DETERMINISTIC: fetch and resolve data markets (true/false)
        - ORACLE_MAX_WORKERS: batch worker pool size
        - ORACLE_DEBUG: enable debug logging (true/false)
        - ORACLE_HTTP_PROXY: proxy URL for inference calls
        - ORACLE_LOG_LEVEL: log level name
        - GNEWS_API_KEY, ALPHA_VANTAGE_API_KEY: data provider keys
        """
        overrides: dict[str, Any] = {}

        if os.getenv("ORACLE_LLM_PROVIDER"):
            overrides.setdefault("llm", {})["provider"] = os.getenv("ORACLE_LLM_PROVIDER")
        if os.getenv("ORACLE_LLM_MODEL"):
            overrides.setdefault("llm", {})["model"] = os.getenv("ORACLE_LLM_MODEL")
        if os.getenv("ORACLE_LLM_API_KEY"):
            overrides.setdefault("llm", {})["api_key"] = os.getenv("ORACLE_LLM_API_KEY")

        if os.getenv("ORACLE_EXECUTE_DETERMINISTIC"):
            overrides.setdefault("pipeline", {})["execute_deterministic"] = (
                os.getenv("ORACLE_EXECUTE_DETERMINISTIC", "false").lower() == "true"
            )
        if os.getenv("ORACLE_MAX_WORKERS"):
            overrides.setdefault("pipeline", {})["max_workers"] = int(os.getenv("ORACLE_MAX_WORKERS", "1"))
        if os.getenv("ORACLE_DEBUG"):
            overrides.setdefault("pipeline", {})["debug"] = (
                os.getenv("ORACLE_DEBUG", "false").lower() == "true"
            )

        if os.getenv("GNEWS_API_KEY"):
            overrides.setdefault("providers", {})["gnews_api_key"] = os.getenv("GNEWS_API_KEY")
        if os.getenv("ALPHA_VANTAGE_API_KEY"):
            overrides.setdefault("providers", {})["alpha_vantage_api_key"] = os.getenv("ALPHA_VANTAGE_API_KEY")

        if os.getenv("ORACLE_HTTP_PROXY"):
            overrides["proxy"] = os.getenv("ORACLE_HTTP_PROXY")
        if os.getenv("ORACLE_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("ORACLE_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Defaults overlaid with environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        llm_data = data.get("llm", {})
        http_data = data.get("http", {})
        providers_data = data.get("providers", {})
        pipeline_data = data.get("pipeline", {})

        return cls(
            llm=LLMConfig(**llm_data) if llm_data else LLMConfig(),
            http=HttpConfig(**http_data) if http_data else HttpConfig(),
            providers=ProvidersConfig(**providers_data) if providers_data else ProvidersConfig(),
            pipeline=PipelineConfig(**pipeline_data) if pipeline_data else PipelineConfig(),
            proxy=data.get("proxy"),
            log_level=data.get("log_level", "INFO"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        Lets callers load a file first, then overlay env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("llm", "providers", "pipeline"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        llm_overrides = overrides.get("llm", {})
        if "provider" in llm_overrides and "api_key" not in llm_overrides:
            new_config.llm.api_key = os.getenv(f"{new_config.llm.provider.upper()}_API_KEY")
        if "proxy" in overrides:
            new_config.proxy = overrides["proxy"]
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary (secrets omitted)."""
        return {
            "llm": {
                "provider": self.llm.provider,
                "model": self.llm.model,
                "temperature": self.llm.temperature,
                "max_tokens": self.llm.max_tokens,
            },
            "http": {
                "timeout": self.http.timeout,
            },
            "providers": {
                "gnews_configured": bool(self.providers.gnews_api_key),
                "alpha_vantage_configured": bool(self.providers.alpha_vantage_api_key),
                "max_results_per_query": self.providers.max_results_per_query,
                "enable_google_news": self.providers.enable_google_news,
            },
            "pipeline": {
                "settle_threshold": self.pipeline.settle_threshold,
                "defer_threshold": self.pipeline.defer_threshold,
                "execute_deterministic": self.pipeline.execute_deterministic,
                "max_workers": self.pipeline.max_workers,
                "debug": self.pipeline.debug,
            },
            "log_level": self.log_level,
        }


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load config from a file, then overlay environment variables.

    Without an explicit path the search order is:
      1. ./oracle.json
      2. ./.oracle.json
      3. ~/.config/oracle/config.json
    """
    if path is not None:
        return RuntimeConfig.from_file(path).with_env_overrides()

    search_paths = [
        Path.cwd() / "oracle.json",
        Path.cwd() / ".oracle.json",
        Path.home() / ".config" / "oracle" / "config.json",
    ]
    for candidate in search_paths:
        if candidate.exists():
            return RuntimeConfig.from_file(candidate).with_env_overrides()

    return RuntimeConfig().with_env_overrides()
