"""
Scheduled job to analyze recent challenges.

Analyzes every recently scraped challenge against the stored card library
and records each run in the analysis history. Can be run as a standalone
script or called from a scheduler.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from courtside.analysis.engine import AnalysisStrategy
from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.config import DEFAULT_CHALLENGE_LIMIT, settings
from courtside.db.database import async_session_factory
from courtside.db.operations import list_challenges
from courtside.models.analysis import AnalysisResult
from courtside.models.failure import KnownError
from courtside.services.analysis_service import (
    analyze_stored_challenge,
    get_strategy,
    load_library_index,
)

logger = logging.getLogger(__name__)


async def analyze_one(
    session_factory: async_sessionmaker[AsyncSession],
    challenge_id: str,
    strategy: AnalysisStrategy,
    index: FuzzyMatchIndex,
    save: bool,
) -> AnalysisResult | None:
    """
    Analyze and store a single challenge.

    Returns:
        The analysis result, or None if the challenge could not be analyzed
    """
    try:
        async with session_factory() as session:
            run = await analyze_stored_challenge(
                session, challenge_id, strategy, save=save, index=index
            )
            await session.commit()
    except KnownError as e:
        logger.error("Could not analyze %s: %s", challenge_id, e.message)
        return None
    except Exception as e:
        logger.error("Error analyzing %s: %s", challenge_id, e)
        return None

    result = run.result
    logger.info(
        "%s: %d%% complete (%s)",
        result.challenge_title,
        result.completion_percentage,
        "can complete" if result.can_complete else "cannot complete",
    )
    return result


async def run_challenge_analysis(
    strategy_name: str | None = None,
    limit: int = DEFAULT_CHALLENGE_LIMIT,
    save: bool | None = None,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> list[AnalysisResult]:
    """
    Analyze the most recent challenges.

    The library is parsed once and shared by every analysis.

    Args:
        strategy_name: Strategy to use. Defaults to settings.default_strategy.
        limit: Max number of challenges to analyze
        save: Store each result. Defaults to settings.save_analysis_results.
        session_factory: Session factory, mainly for tests

    Returns:
        Results of the challenges that were analyzed
    """
    strategy = get_strategy(strategy_name or settings.default_strategy)
    should_save = settings.save_analysis_results if save is None else save

    async with session_factory() as session:
        challenge_ids = [row.id for row in await list_challenges(session, limit=limit)]
        index = await load_library_index(session)

    if not challenge_ids:
        logger.info("No challenges to analyze")
        return []

    logger.info(
        "Analyzing %d challenges with %s against %d library cards",
        len(challenge_ids),
        strategy.name,
        len(index),
    )

    results: list[AnalysisResult] = []
    for challenge_id in challenge_ids:
        result = await analyze_one(session_factory, challenge_id, strategy, index, should_save)
        if result is not None:
            results.append(result)

    if results:
        completable = sum(1 for result in results if result.can_complete)
        average = sum(result.completion_percentage for result in results) / len(results)
        logger.info(
            "Analysis complete. %d/%d challenges can be completed, average completion %d%%",
            completable,
            len(results),
            round(average),
        )
    else:
        logger.warning("Analysis complete. No challenge could be analyzed")

    return results


def main() -> None:
    """CLI entry point for running challenge analysis."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_challenge_analysis())


if __name__ == "__main__":
    main()
