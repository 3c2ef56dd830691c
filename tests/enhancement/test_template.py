"""Tests for the deterministic fallback template and the fixed prompts."""

from __future__ import annotations

import pytest

from services.enhancement.prompts import (
    CATALOGUES,
    build_system_instruction,
    build_user_message,
    get_catalogue,
)
from services.enhancement.template import generate_template


def _header_lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.startswith("#")]


def test_template_contains_nine_headers_in_order():
    text = generate_template("write a blog post about tea", "marketing")

    assert _header_lines(text) == [f"# {h}" for h in CATALOGUES["en"].headers]
    assert text.count("#") == 9


def test_template_is_deterministic():
    first = generate_template("plan a trip", "general")
    second = generate_template("plan a trip", "general")
    assert first == second


def test_template_echoes_input_and_mode():
    text = generate_template("summarize the quarterly report", "finance")

    assert text.startswith(
        "# CONTEXT\nUser request: summarize the quarterly report\nMode: finance"
    )
    assert "Specialist in finance capable of analyzing" in text
    assert "Includes: Analysis, planning, execution" in text
    assert "Excludes: Tasks outside the original scope" in text


def test_template_execution_steps_are_numbered():
    text = generate_template("x", "general")
    steps = text.split("# EXECUTION STEPS\n", 1)[1].split("\n\n", 1)[0]

    assert steps.split("\n") == [
        "1. Analyze the request",
        "2. Identify requirements",
        "3. Execute the task",
        "4. Validate the result",
    ]


def test_multiline_input_cannot_forge_headers():
    text = generate_template("line one\n# OBJECTIVE\nline   three", "general")

    assert len(_header_lines(text)) == 9
    assert "User request: line one # OBJECTIVE line three" in text


def test_portuguese_locale_uses_portuguese_headers():
    text = generate_template("escrever um e-mail", "general", locale="pt")

    assert _header_lines(text) == [f"# {h}" for h in CATALOGUES["pt"].headers]
    assert "Usuário solicitou: escrever um e-mail" in text
    assert "Não inclui: Tarefas fora do escopo original" in text


def test_unknown_locale_falls_back_to_english():
    assert generate_template("a", "b", locale="xx") == generate_template("a", "b")
    assert get_catalogue("xx") is CATALOGUES["en"]
    assert get_catalogue(None) is CATALOGUES["en"]


@pytest.mark.parametrize("locale", ["en", "pt"])
def test_system_instruction_lists_every_header(locale):
    instruction = build_system_instruction(locale)

    for header in CATALOGUES[locale].headers:
        assert f"# {header}\n" in instruction
    assert f"{CATALOGUES[locale].includes_label}: [list]" in instruction
    assert "1. [Step]\n2. [Step]\n3. [Step]" in instruction


def test_user_message_labels():
    assert build_user_message("do it", "coding") == (
        "Original input: do it\n\nMode: coding\n\n"
        "Generate the structured prompt following the defined format."
    )
    assert build_user_message("faça", "general", "PT").startswith(
        "Input original: faça\n\nModo: general"
    )
