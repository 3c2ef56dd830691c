"""Tests for the heuristic quality scorer."""

from __future__ import annotations

import pytest

from services.enhancement.scoring import SCORING_RULES, score
from services.enhancement.template import generate_template


def test_empty_text_takes_every_low_branch():
    result = score("")

    assert result.clarity == 6
    assert result.specificity == 5
    assert result.executability == 5
    assert result.ambiguity_control == 8
    assert result.structure == 5
    assert result.final_score == pytest.approx(5.8)


def test_none_is_scored_like_empty_text():
    assert score(None) == score("")


def test_template_output_scores_high():
    result = score(generate_template("design a REST API for a library", "coding"))

    assert result.clarity == 9
    assert result.specificity == 8
    assert result.executability == 9
    assert result.ambiguity_control == 8
    assert result.structure == 9
    assert result.final_score == pytest.approx(8.6)


def test_portuguese_markers_are_recognised():
    text = "# OBJETIVO\nalgo\n# PASSOS DE EXECUÇÃO\n1. fazer"
    result = score(text)

    assert result.clarity == 9
    assert result.executability == 9


def test_question_mark_lowers_ambiguity_control():
    assert score("What should I do?").ambiguity_control == 6


def test_specificity_requires_more_than_500_characters():
    assert score("a" * 500).specificity == 5
    assert score("a" * 501).specificity == 8


def test_structure_counts_hash_characters():
    assert score("####").structure == 5
    assert score("#####").structure == 9


def test_final_score_is_mean_of_sub_scores():
    result = score("# OBJECTIVE?")
    parts = [
        result.clarity,
        result.specificity,
        result.executability,
        result.ambiguity_control,
        result.structure,
    ]
    assert result.final_score == pytest.approx(sum(parts) / 5)
    assert "final_score" in result.model_dump()


def test_rules_cover_each_sub_score_once():
    names = [rule.name for rule in SCORING_RULES]
    assert names == [
        "clarity",
        "specificity",
        "executability",
        "ambiguity_control",
        "structure",
    ]
