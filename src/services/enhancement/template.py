"""Deterministic fallback template for prompt enhancement."""

from __future__ import annotations

from services.enhancement.prompts import DEFAULT_LOCALE, get_catalogue


_BODIES: dict[str, dict[str, str]] = {
    "en": {
        "context": "User request: {input}\nMode: {mode}",
        "agent_role": (
            "Specialist in {mode} capable of analyzing and executing complex tasks."
        ),
        "objective": "Carry out the user's request efficiently and effectively.",
        "scope": (
            "{includes}: Analysis, planning, execution\n"
            "{excludes}: Tasks outside the original scope"
        ),
        "restrictions": (
            "- Keep the original objective\n- Do not add unrequested assumptions"
        ),
        "output_format": "Structured response with explanations",
        "quality_criteria": "- Clarity\n- Precision\n- Completeness",
        "execution_steps": (
            "1. Analyze the request\n"
            "2. Identify requirements\n"
            "3. Execute the task\n"
            "4. Validate the result"
        ),
        "edge_cases": "- Ambiguous requests: ask for clarification",
    },
    "pt": {
        "context": "Usuário solicitou: {input}\nModo: {mode}",
        "agent_role": (
            "Especialista em {mode} com capacidade de análise e execução de "
            "tarefas complexas."
        ),
        "objective": "Executar a solicitação do usuário de forma eficiente e otimizada.",
        "scope": (
            "{includes}: Análise, planejamento, execução\n"
            "{excludes}: Tarefas fora do escopo original"
        ),
        "restrictions": (
            "- Manter o objetivo original\n- Não adicionar suposições não solicitadas"
        ),
        "output_format": "Resposta estruturada com explicações",
        "quality_criteria": "- Clareza\n- Precisão\n- Completeza",
        "execution_steps": (
            "1. Analisar a solicitação\n"
            "2. Identificar requisitos\n"
            "3. Executar tarefa\n"
            "4. Validar resultado"
        ),
        "edge_cases": "- Solicitações ambíguas: pedir esclarecimento",
    },
}

_SECTION_ORDER = (
    "context",
    "agent_role",
    "objective",
    "scope",
    "restrictions",
    "output_format",
    "quality_criteria",
    "execution_steps",
    "edge_cases",
)


def _single_line(text: str) -> str:
    # Echoed user text never starts a line, so it cannot forge a header.
    return " ".join(text.split())


def generate_template(input_text: str, mode: str, locale: str = DEFAULT_LOCALE) -> str:
    """Build the nine-section fallback prompt for `input_text`.

    Pure and deterministic: identical arguments always yield identical text.
    """
    catalogue = get_catalogue(locale)
    key = (locale or DEFAULT_LOCALE).lower()
    bodies = _BODIES.get(key, _BODIES[DEFAULT_LOCALE])
    values = {
        "input": _single_line(input_text),
        "mode": _single_line(mode),
        "includes": catalogue.includes_label,
        "excludes": catalogue.excludes_label,
    }

    sections = []
    for name, header in zip(_SECTION_ORDER, catalogue.headers, strict=True):
        body = bodies[name].format(**values)
        sections.append(f"# {header}\n{body}")
    return "\n\n".join(sections)
