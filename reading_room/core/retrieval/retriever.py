"""
Multi-strategy retriever.

Selects the strategy set for a query type, runs the strategies
concurrently under one wall-clock budget and collects their candidates.
A failing strategy contributes nothing; the request fails only when every
selected strategy fails.

Dependencies: asyncio, reading_room.core.retrieval.strategies
System role: Candidate collection stage of the retrieval pipeline
"""

import asyncio
import logging

from pydantic import BaseModel, Field

from reading_room.core.exceptions import AllStrategiesFailedError, StrategyUnavailableError
from reading_room.core.retrieval import text_utils
from reading_room.core.retrieval.strategies import RetrievalStrategy, SearchPlan
from reading_room.models.chunk import ScoredChunk
from reading_room.models.retrieval import QueryClassification, QueryType, StrategyName
from reading_room.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

STRATEGY_SETS: dict[QueryType, tuple[StrategyName, ...]] = {
    QueryType.CATALOG_BROWSE: (StrategyName.CATALOG_SCAN,),
    QueryType.SPECIFIC_SEARCH: (StrategyName.SEMANTIC, StrategyName.METADATA, StrategyName.ENTITY_NAME),
    QueryType.HYBRID: (StrategyName.SEMANTIC, StrategyName.METADATA, StrategyName.ENTITY_NAME),
    QueryType.RECOMMENDATION: (StrategyName.SEMANTIC, StrategyName.METADATA),
    QueryType.DIRECT_QUESTION: (StrategyName.SEMANTIC,),
}

DIFFICULTY_BOOST = 0.05


class RetrievalOutcome(BaseModel):
    """Candidates plus per-strategy status for one request."""

    candidates: list[ScoredChunk] = Field(default_factory=list)
    succeeded: list[StrategyName] = Field(default_factory=list)
    failed: list[StrategyName] = Field(default_factory=list)
    timed_out: list[StrategyName] = Field(default_factory=list)

    @property
    def strategies_run(self) -> list[StrategyName]:
        return self.succeeded + self.failed + self.timed_out


def build_plan(
    search_text: str,
    classification: QueryClassification,
    semantic_caps: dict[str, int],
) -> SearchPlan:
    """
    Derive metadata terms, candidate names and the semantic cap.

    Entities found by query analysis are appended to the semantic text
    and searched as author full names.
    """
    names = text_utils.name_pairs(search_text)
    for entity in classification.entities:
        lowered = entity.lower().strip()
        if len(lowered.split()) >= 2 and lowered not in names:
            names.append(lowered)

    semantic_text = search_text
    missing = [e for e in classification.entities if e.lower() not in search_text.lower()]
    if missing:
        semantic_text = f"{search_text} {' '.join(missing)}"

    return SearchPlan(
        search_text=semantic_text,
        classification=classification,
        terms=text_utils.search_terms(search_text),
        names=names,
        semantic_cap=semantic_caps.get(classification.query_type.value, 20),
    )


def apply_difficulty_boost(candidates: list[ScoredChunk], difficulty: str | None) -> list[ScoredChunk]:
    """Raise the score of chunks whose difficulty matches the hint, capped at 1.0."""
    if not difficulty:
        return candidates
    boosted = []
    for candidate in candidates:
        level = (candidate.chunk.difficulty or "").lower()
        if level and difficulty in level:
            candidate = candidate.model_copy(update={"score": min(1.0, candidate.score + DIFFICULTY_BOOST)})
        boosted.append(candidate)
    return boosted


class MultiStrategyRetriever:
    """
    Enum-dispatched strategy runner.

    Attributes:
        strategies: Strategy instances keyed by name
        timeout_seconds: Budget for all strategies of one request
    """

    def __init__(self, strategies: list[RetrievalStrategy], timeout_seconds: float = 20.0) -> None:
        self.strategies = {strategy.name: strategy for strategy in strategies}
        self.timeout_seconds = timeout_seconds

    def select(self, query_type: QueryType) -> list[RetrievalStrategy]:
        return [self.strategies[name] for name in STRATEGY_SETS[query_type] if name in self.strategies]

    async def retrieve(self, plan: SearchPlan) -> RetrievalOutcome:
        """
        Run the strategies selected for the plan's query type.

        Args:
            plan: Search plan built from the classification

        Returns:
            RetrievalOutcome: Candidates from every strategy that produced any

        Raises:
            AllStrategiesFailedError: If no selected strategy succeeded and nothing was collected
        """
        selected = self.select(plan.classification.query_type)
        if not selected:
            raise AllStrategiesFailedError([])
        outcome = RetrievalOutcome()
        sinks: dict[StrategyName, list[ScoredChunk]] = {s.name: [] for s in selected}

        tasks = {
            asyncio.create_task(strategy.run(plan, sinks[strategy.name])): strategy.name
            for strategy in selected
        }
        done, pending = await asyncio.wait(tasks, timeout=self.timeout_seconds)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        for task, name in tasks.items():
            if task in pending:
                outcome.timed_out.append(name)
                logger.warning(
                    f"{__name__}:retrieve - Strategy '{name.value}' abandoned after {self.timeout_seconds}s, "
                    f"keeping {len(sinks[name])} collected candidates"
                )
                continue
            error = task.exception()
            if error is None:
                outcome.succeeded.append(name)
            elif isinstance(error, StrategyUnavailableError):
                outcome.failed.append(name)
                logger.warning(f"{__name__}:retrieve - {error.message}")
            else:
                outcome.failed.append(name)
                log_exception_with_context(
                    logger,
                    f"{__name__}:retrieve - Strategy '{name.value}' crashed",
                    error,
                    strategy=name.value,
                    query_type=plan.classification.query_type.value,
                )

        for strategy in selected:
            outcome.candidates.extend(sinks[strategy.name])
        if plan.classification.query_type is QueryType.RECOMMENDATION:
            outcome.candidates = apply_difficulty_boost(outcome.candidates, plan.classification.difficulty)
        # Sorted so aggregation does not depend on arrival order
        order = {s.name: i for i, s in enumerate(selected)}
        outcome.candidates.sort(
            key=lambda c: (-c.score, order[c.strategy], c.chunk.chunk_index or 0, c.chunk.id)
        )

        if not outcome.succeeded and not outcome.candidates:
            attempted = [s.name.value for s in selected]
            logger.error(f"{__name__}:retrieve - All strategies failed: {attempted}")
            raise AllStrategiesFailedError(attempted)

        logger.info(
            f"{__name__}:retrieve - {len(outcome.candidates)} candidates "
            f"(ok={[s.value for s in outcome.succeeded]}, failed={[s.value for s in outcome.failed]}, "
            f"timed_out={[s.value for s in outcome.timed_out]})"
        )
        return outcome
