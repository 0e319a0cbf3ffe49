"""Tests for analysis orchestration and the fallback chain."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.analysis.engine import RuleBasedStrategy
from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.db.operations import get_analysis_history, replace_library, upsert_challenge
from courtside.models.analysis import AnalysisResult
from courtside.models.card import LibraryRecord
from courtside.models.challenge import Challenge
from courtside.models.failure import (
    ChallengeNotFoundError,
    FailureKind,
    KnownError,
    SemanticAnalyzerError,
)
from courtside.parsers.library import parse_library
from courtside.semantic import ClaudeAnalyzer, HuggingFaceAnalyzer, OllamaAnalyzer
from courtside.services.analysis_service import (
    FALLBACK_METHOD,
    analyze_stored_challenge,
    get_strategy,
    run_analysis,
)


class FailingStrategy:
    """Strategy whose model is unreachable."""

    name = "claude"

    async def analyze(self, challenge: Challenge, index: FuzzyMatchIndex) -> AnalysisResult:
        raise SemanticAnalyzerError(self.name, "connection refused")


@pytest.fixture
def index(sample_library_records: list[LibraryRecord]) -> FuzzyMatchIndex:
    return FuzzyMatchIndex(parse_library(sample_library_records))


class TestGetStrategy:
    def test_known_strategies(self) -> None:
        """Each registered name builds its strategy."""
        assert isinstance(get_strategy("rule_based"), RuleBasedStrategy)
        assert isinstance(get_strategy("claude"), ClaudeAnalyzer)
        assert isinstance(get_strategy("ollama"), OllamaAnalyzer)
        assert isinstance(get_strategy("huggingface"), HuggingFaceAnalyzer)

    def test_unknown_strategy(self) -> None:
        """Unknown names are rejected as invalid input."""
        with pytest.raises(KnownError) as exc_info:
            get_strategy("openai")

        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert exc_info.value.status_code == 400


class TestRunAnalysis:
    async def test_successful_strategy(
        self, sample_challenge: Challenge, index: FuzzyMatchIndex
    ) -> None:
        """A working strategy's result is returned unchanged."""
        result = await run_analysis(sample_challenge, index, RuleBasedStrategy())

        assert result.analysis_method == "rule_based"

    async def test_falls_back_to_rule_engine(
        self, sample_challenge: Challenge, index: FuzzyMatchIndex
    ) -> None:
        """A failing model strategy is replaced by the rule engine."""
        result = await run_analysis(sample_challenge, index, FailingStrategy())

        expected = await RuleBasedStrategy().analyze(sample_challenge, index)
        assert result.analysis_method == FALLBACK_METHOD
        assert result.completion_percentage == expected.completion_percentage
        assert result.per_requirement == expected.per_requirement

    async def test_unconfigured_claude_falls_back(
        self, sample_challenge: Challenge, index: FuzzyMatchIndex
    ) -> None:
        """Claude without an API key falls back."""
        result = await run_analysis(sample_challenge, index, ClaudeAnalyzer(api_key=""))

        assert result.analysis_method == FALLBACK_METHOD


class TestAnalyzeStoredChallenge:
    async def test_analyzes_and_saves(
        self,
        session: AsyncSession,
        sample_challenge: Challenge,
        sample_library_records: list[LibraryRecord],
    ) -> None:
        """Stored challenges are analyzed against the stored library and saved."""
        await upsert_challenge(session, sample_challenge)
        await replace_library(session, [record.content for record in sample_library_records])

        run = await analyze_stored_challenge(session, sample_challenge.id, RuleBasedStrategy())

        assert run.result.completion_percentage == 67
        assert run.result.library_size == 4
        assert run.record_id is not None
        assert run.previous_percentage is None
        assert run.duration_ms >= 0

    async def test_reports_previous_run(
        self,
        session: AsyncSession,
        sample_challenge: Challenge,
        sample_library_records: list[LibraryRecord],
    ) -> None:
        """A second run sees the first run's completion."""
        await upsert_challenge(session, sample_challenge)
        await replace_library(session, [record.content for record in sample_library_records])

        await analyze_stored_challenge(session, sample_challenge.id, RuleBasedStrategy())
        run = await analyze_stored_challenge(session, sample_challenge.id, RuleBasedStrategy())

        assert run.previous_percentage == 67
        assert run.previous_analyzed_at is not None

    async def test_without_saving(self, session: AsyncSession, sample_challenge: Challenge) -> None:
        """Analyses can skip persistence."""
        await upsert_challenge(session, sample_challenge)

        run = await analyze_stored_challenge(
            session, sample_challenge.id, RuleBasedStrategy(), save=False
        )

        assert run.record_id is None
        assert await get_analysis_history(session) == []

    async def test_uses_given_index(
        self, session: AsyncSession, sample_challenge: Challenge, index: FuzzyMatchIndex
    ) -> None:
        """A prebuilt index replaces the stored library."""
        await upsert_challenge(session, sample_challenge)

        run = await analyze_stored_challenge(
            session, sample_challenge.id, RuleBasedStrategy(), save=False, index=index
        )

        assert run.result.library_size == len(index)

    async def test_fallback_is_saved_under_fallback_method(
        self, session: AsyncSession, sample_challenge: Challenge
    ) -> None:
        """Fallback runs are stored with their own method label."""
        await upsert_challenge(session, sample_challenge)

        run = await analyze_stored_challenge(session, sample_challenge.id, FailingStrategy())

        history = await get_analysis_history(session)
        assert run.result.analysis_method == FALLBACK_METHOD
        assert [record.analysis_method for record in history] == [FALLBACK_METHOD]

    async def test_unknown_challenge(self, session: AsyncSession) -> None:
        """Unknown challenge ids raise."""
        with pytest.raises(ChallengeNotFoundError):
            await analyze_stored_challenge(session, "missing", RuleBasedStrategy())
