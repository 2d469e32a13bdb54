"""Ordered fallback chain of rendering strategies."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any

from src.errors import RenderError, StepTimeoutError
from src.rendering.base import RenderStrategy
from src.rendering.config import RenderingConfig, get_rendering_config
from src.rendering.markup import MarkupBuilder
from src.rendering.minimal import MinimalStrategy
from src.rendering.models import RenderArtifact, StrategyFailure
from src.rendering.remote import HealthCache, RemoteStrategy
from src.rendering.vector import VectorStrategy
from src.rendering.weasy import MarkupStrategy
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)


class RenderingPipeline:
    """Tries each strategy in order and returns the first artifact.

    A strategy that raises, exceeds its timeout, or yields an empty
    artifact is logged and skipped. RenderError is raised only when the
    last strategy has failed too.
    """

    def __init__(self, strategies: Sequence[RenderStrategy]):
        if not strategies:
            raise ValueError("RenderingPipeline needs at least one strategy")
        self.strategies = list(strategies)
        self.last_failures: list[StrategyFailure] = []

    @classmethod
    def default(
        cls,
        config: RenderingConfig | None = None,
        health_cache: HealthCache | None = None,
    ) -> RenderingPipeline:
        """Build the standard chain: vector, remote, markup, minimal."""
        config = config or get_rendering_config()
        markup = MarkupBuilder(config)
        return cls(
            [
                VectorStrategy(config.strategy_timeout, config.page_size),
                RemoteStrategy(
                    config.remote_url,
                    markup,
                    timeout=config.remote_timeout,
                    health_timeout=config.health_timeout,
                    health_ttl=config.health_ttl,
                    page_size=config.page_size,
                    cache=health_cache,
                ),
                MarkupStrategy(markup, config.strategy_timeout),
                MinimalStrategy(config.strategy_timeout, config.page_size),
            ]
        )

    @property
    def strategy_names(self) -> list[str]:
        return [strategy.name for strategy in self.strategies]

    async def render(self, document: ResumeDocument) -> RenderArtifact:
        """Render the document with the first strategy that succeeds.

        Raises:
            RenderError: If every strategy failed.
        """
        failures: list[StrategyFailure] = []

        for strategy in self.strategies:
            started = time.monotonic()
            try:
                artifact = await asyncio.wait_for(strategy.render(document), strategy.timeout)
            except TimeoutError:
                error = str(StepTimeoutError(strategy.name, strategy.timeout))
            except Exception as e:
                error = f"{type(e).__name__}: {e}"
            else:
                if artifact is not None and artifact.size_bytes > 0:
                    elapsed = time.monotonic() - started
                    logger.info(
                        f"Rendered resume with '{strategy.name}' strategy "
                        f"({artifact.size_bytes} bytes, {elapsed:.2f}s)"
                    )
                    self.last_failures = failures
                    return artifact
                error = "produced an empty artifact"

            elapsed = time.monotonic() - started
            failures.append(StrategyFailure(strategy.name, error, elapsed))
            logger.warning(f"Rendering strategy '{strategy.name}' failed: {error}")

        self.last_failures = failures
        summary = "; ".join(f"{f.strategy}: {f.error}" for f in failures)
        logger.error(f"All rendering strategies failed: {summary}")
        raise RenderError(
            "All rendering strategies failed",
            failures=[(f.strategy, f.error) for f in failures],
        )

    def describe(self) -> list[dict[str, Any]]:
        """Summarize the chain for diagnostics."""
        info = []
        for strategy in self.strategies:
            entry: dict[str, Any] = {"name": strategy.name, "timeout": strategy.timeout}
            if isinstance(strategy, RemoteStrategy):
                entry["service"] = strategy.service_info()
            info.append(entry)
        return info
