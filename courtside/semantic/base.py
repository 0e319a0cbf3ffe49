"""
Shared plumbing for language-model analyzers.

Each analyzer renders the same prompt, sends it to its model, and parses
a JSON reply into the AnalysisResult shape. Claims are verified against
the library: a model may say a card is owned, but a match without a
library card behind it is reported as missing, and a claimed exact match
or upgrade whose owned cards fail the tier or series rules is reported as
a potential match.

Expected reply:
    {
        "requirements": [
            {"index": 1, "status": "exact_match", "player_name": "Pascal Siakam", "notes": "..."}
        ],
        "summary": "...",
        "recommendations": ["..."]
    }
"""

import json
import logging
from typing import Any

from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.analysis.matcher import is_rarity_upgrade, satisfies_requirement
from courtside.analysis.scorer import build_summary, generate_recommendations, score_results
from courtside.models.analysis import AnalysisResult, MatchResult, MatchStatus
from courtside.models.card import Card
from courtside.models.challenge import Challenge, RequiredCard
from courtside.models.failure import FailureKind, SemanticAnalyzerError

logger = logging.getLogger(__name__)

# Distinct (player, series, rarity) lines sent to the model
MAX_PROMPT_LIBRARY_ENTRIES = 200

NOT_ASSESSED_REASON = "Not assessed by model"
UNVERIFIED_CLAIM_REASON = "Model claimed a match that is not in the library"
UNQUALIFIED_CLAIM_NOTES = "Model claimed a match but no owned card meets the tier or series"
MODEL_MISSING_REASON = "Not found in collection according to model"
MODEL_ALTERNATIVES = ("Check marketplace", "Look for pack drops")

SYSTEM_PROMPT = (
    "You are an NBA Top Shot collection analyst. "
    "Always respond with a single valid JSON object and nothing else."
)

_PROMPT_TEMPLATE = """Decide whether this card library can complete an NBA Top Shot challenge.

CHALLENGE: {title}

REQUIRED CARDS:
{requirements}

LIBRARY (player | series | rarity):
{library}

Rules:
- Match by player name, allowing for common spelling variations
- Tier order is Common < Rare < Legendary
- A higher tier may fulfil a lower tier requirement (status "rarity_upgrade")
- Respect series qualifiers such as "2025 NBA Playoffs"

Respond with JSON:
{{"requirements": [{{"index": <requirement number>, "status": "exact_match|rarity_upgrade|potential_match|missing", "player_name": "<library player or null>", "notes": "<short reason>"}}], "summary": "<one sentence>", "recommendations": ["<suggestion>"]}}"""


def build_prompt(challenge: Challenge, index: FuzzyMatchIndex) -> str:
    """Render the analysis prompt for a challenge and library."""
    requirements = "\n".join(
        f"{position}. {required.title} ({required.rarity_text or 'any tier'})"
        for position, required in enumerate(challenge.required_cards, start=1)
    )

    entries: dict[str, None] = {}
    for card in index.cards:
        rarity = card.rarity.value if card.rarity else "Unknown"
        entries.setdefault(f"{card.player_name} | {card.series or 'Unknown'} | {rarity}", None)
        if len(entries) >= MAX_PROMPT_LIBRARY_ENTRIES:
            break

    return _PROMPT_TEMPLATE.format(
        title=challenge.title,
        requirements=requirements or "(none)",
        library="\n".join(entries) or "(empty)",
    )


def _extract_json_object(text: str) -> dict[str, Any] | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        payload = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _missing(requirement: RequiredCard, reason: str, notes: str = "") -> MatchResult:
    return MatchResult(
        requirement=requirement,
        status=MatchStatus.MISSING,
        notes=notes or reason,
        reason=reason,
        alternatives=MODEL_ALTERNATIVES,
    )


def _owned_cards(index: FuzzyMatchIndex, player_name: str) -> list[Card]:
    exact = index.lookup(player_name)
    return list(exact) if exact else index.search(player_name)


def _verify_entry(
    requirement: RequiredCard,
    entry: dict[str, Any],
    index: FuzzyMatchIndex,
    analyzer: str,
) -> MatchResult:
    try:
        status = MatchStatus(entry.get("status"))
    except ValueError as e:
        raise SemanticAnalyzerError(
            analyzer,
            f"unknown status {entry.get('status')!r}",
            kind=FailureKind.UNPARSEABLE_RESPONSE,
        ) from e

    notes = str(entry.get("notes") or "")
    player_name = entry.get("player_name")
    owned = _owned_cards(index, player_name) if isinstance(player_name, str) else []

    if status == MatchStatus.MISSING:
        return _missing(requirement, MODEL_MISSING_REASON, notes)

    if not owned:
        return _missing(requirement, UNVERIFIED_CLAIM_REASON, notes)

    if status == MatchStatus.EXACT_MATCH:
        qualifies = satisfies_requirement
    elif status == MatchStatus.RARITY_UPGRADE:
        qualifies = is_rarity_upgrade
    else:
        qualifies = None

    if qualifies is not None:
        matched = next((card for card in owned if qualifies(card, requirement)), None)
        if matched is not None:
            return MatchResult(
                requirement=requirement,
                status=status,
                matched_card=matched,
                notes=notes,
            )
        logger.info(
            "%s claimed %s for %r without a qualifying card",
            analyzer,
            status.value,
            requirement.title,
        )
        notes = UNQUALIFIED_CLAIM_NOTES

    unique = {card.id: card for card in owned}
    return MatchResult(
        requirement=requirement,
        status=MatchStatus.POTENTIAL_MATCH,
        candidates=tuple(unique.values()),
        notes=notes,
    )


def parse_semantic_response(
    text: str,
    challenge: Challenge,
    index: FuzzyMatchIndex,
    method: str,
) -> AnalysisResult:
    """
    Convert a model reply to an AnalysisResult.

    Requirements the model did not mention are reported as missing.
    Completion is scored with the same rules as the rule-based engine.

    Raises:
        SemanticAnalyzerError: If the reply has no usable JSON payload
    """
    payload = _extract_json_object(text)
    if payload is None or not isinstance(payload.get("requirements"), list):
        raise SemanticAnalyzerError(
            method,
            "reply is not a JSON object with a requirements list",
            kind=FailureKind.UNPARSEABLE_RESPONSE,
        )

    by_index: dict[int, dict[str, Any]] = {}
    for entry in payload["requirements"]:
        if isinstance(entry, dict) and isinstance(entry.get("index"), int):
            by_index.setdefault(entry["index"], entry)

    results = tuple(
        _verify_entry(required, by_index[position], index, method)
        if position in by_index
        else _missing(required, NOT_ASSESSED_REASON)
        for position, required in enumerate(challenge.required_cards, start=1)
    )
    score = score_results(results)

    recommendations = payload.get("recommendations")
    if not (
        isinstance(recommendations, list)
        and recommendations
        and all(isinstance(item, str) for item in recommendations)
    ):
        recommendations = generate_recommendations(results)

    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = build_summary(results)

    return AnalysisResult(
        challenge_id=challenge.id,
        challenge_title=challenge.title,
        analysis_method=method,
        library_size=len(index),
        completion_percentage=score.completion_percentage,
        can_complete=score.can_complete,
        per_requirement=results,
        recommendations=tuple(recommendations),
        summary=summary,
        raw_response=text,
    )


class SemanticAnalyzer:
    """
    Base class for analyzers delegating to a language model.

    Subclasses implement _complete(); every failure surfaces as
    SemanticAnalyzerError so callers can fall back to the rule engine.
    """

    name = "semantic"

    async def analyze(self, challenge: Challenge, index: FuzzyMatchIndex) -> AnalysisResult:
        prompt = build_prompt(challenge, index)
        logger.info("Sending challenge %s to %s", challenge.id, self.name)
        text = await self._complete(prompt)
        return parse_semantic_response(text, challenge, index, method=self.name)

    async def _complete(self, prompt: str) -> str:
        raise NotImplementedError
