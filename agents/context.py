"""
Agent Context

Dependency injection for agents:
- LLM client (inference collaborator)
- HTTP client (data and news providers)
- Runtime configuration
- Clock (frozen in tests)
- Logger

Agents receive a context rather than creating their own clients,
so tests can swap in a MockProvider and a stubbed HTTP session.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from core.config import RuntimeConfig
    from core.http import HttpClient
    from core.llm import LLMClient


class Clock(Protocol):
    """Time source; real or frozen."""

    def now(self) -> datetime:
        ...


class RealClock:
    """Real-time UTC clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Frozen clock for deterministic tests.
    """

    def __init__(self, frozen_time: Optional[datetime] = None) -> None:
        self._time = frozen_time or datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        self._time = time


@dataclass
class AgentContext:
    """
    Context providing dependencies to agents.

    Usage:
        ctx = AgentContext.create(config)
        classification = MarketClassifier().classify(ctx, market)
    """

    llm: Optional["LLMClient"] = None
    http: Optional["HttpClient"] = None
    config: Optional["RuntimeConfig"] = None

    clock: Clock = field(default_factory=RealClock)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("oracle.agents"))

    # Set per market by the pipeline
    market_id: Optional[str] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config: "RuntimeConfig",
        *,
        clock: Optional[Clock] = None,
    ) -> "AgentContext":
        """
        Create a fully configured context from runtime config.

        The LLM client is only built when an API key is available
        (or the provider is the mock).
        """
        from core.http import HttpClient
        from core.llm import DecodingPolicy, LLMClient, create_provider

        llm = None
        if config.llm.api_key or config.llm.provider == "mock":
            provider = create_provider(
                config.llm.provider,
                model=config.llm.model,
                proxy=config.proxy,
                api_key=config.llm.api_key,
                base_url=config.llm.base_url,
            )
            llm = LLMClient(
                provider,
                default_policy=DecodingPolicy(
                    temperature=config.llm.temperature,
                    max_tokens=config.llm.max_tokens,
                ),
            )

        http = HttpClient(
            timeout=config.http.timeout,
            default_headers={
                "User-Agent": config.http.user_agent,
                "Accept": "application/json, application/xml;q=0.9, */*;q=0.8",
            },
        )

        logger = logging.getLogger("oracle.agents")
        if config.pipeline.debug:
            logger.setLevel(logging.DEBUG)

        return cls(
            llm=llm,
            http=http,
            config=config,
            clock=clock or RealClock(),
            logger=logger,
        )

    @classmethod
    def create_mock(
        cls,
        *,
        llm_responses: Optional[list[str]] = None,
        http: Optional["HttpClient"] = None,
        config: Optional["RuntimeConfig"] = None,
        now: Optional[datetime] = None,
    ) -> "AgentContext":
        """
        Create a context for tests with a MockProvider-backed LLM.
        """
        from core.config import RuntimeConfig
        from core.llm import LLMClient, MockProvider

        llm = LLMClient(MockProvider(responses=llm_responses or []))
        return cls(
            llm=llm,
            http=http,
            config=config or RuntimeConfig(),
            clock=FrozenClock(now),
        )

    def for_market(self, market_id: str) -> "AgentContext":
        """Shallow copy tagged with the market being processed."""
        ctx = copy.copy(self)
        ctx.market_id = market_id
        return ctx

    def now(self) -> datetime:
        return self.clock.now()

    def today(self) -> str:
        """Current date as YYYY-MM-DD."""
        return self.now().date().isoformat()

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(msg, *args, **kwargs)
