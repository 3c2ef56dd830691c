"""Heuristic quality scoring for enhanced prompts.

The score is a surface-level lexical proxy: it checks for the structural
markers an enhanced prompt is expected to carry, nothing more. Each rule is a
named predicate with a high and a low value so the rules can be tested on
their own and shared by both delivery modes.

Note: `ambiguity_control` drops when the text contains a question mark. A
prompt that legitimately asks clarifying questions is penalised too; the rule
is kept as-is for compatibility with existing clients.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from schemas.enhancement import QualityScore
from services.enhancement.prompts import CATALOGUES


SPECIFICITY_MIN_LENGTH = 500
STRUCTURE_MIN_MARKERS = 5

# Every locale's marker is accepted so the score does not depend on which
# language the remote model answered in.
OBJECTIVE_MARKERS: tuple[str, ...] = tuple(
    sorted({f"# {c.objective}" for c in CATALOGUES.values()})
)
# The Portuguese rule matched only the first word of the header.
EXECUTION_MARKERS: tuple[str, ...] = ("# EXECUTION STEPS", "# PASSOS")


@dataclass(frozen=True)
class ScoringRule:
    name: str
    predicate: Callable[[str], bool]
    high: float
    low: float

    def evaluate(self, text: str) -> float:
        return self.high if self.predicate(text) else self.low


def has_objective_header(text: str) -> bool:
    return any(marker in text for marker in OBJECTIVE_MARKERS)


def is_long_enough(text: str) -> bool:
    return len(text) > SPECIFICITY_MIN_LENGTH


def has_execution_steps_header(text: str) -> bool:
    return any(marker in text for marker in EXECUTION_MARKERS)


def has_no_open_questions(text: str) -> bool:
    return "?" not in text


def has_enough_structure(text: str) -> bool:
    return text.count("#") >= STRUCTURE_MIN_MARKERS


SCORING_RULES: tuple[ScoringRule, ...] = (
    ScoringRule("clarity", has_objective_header, high=9, low=6),
    ScoringRule("specificity", is_long_enough, high=8, low=5),
    ScoringRule("executability", has_execution_steps_header, high=9, low=5),
    ScoringRule("ambiguity_control", has_no_open_questions, high=8, low=6),
    ScoringRule("structure", has_enough_structure, high=9, low=5),
)


def score(text: str | None) -> QualityScore:
    """Score `text`; never raises, empty input takes every low branch."""
    text = text or ""
    return QualityScore(**{rule.name: rule.evaluate(text) for rule in SCORING_RULES})
