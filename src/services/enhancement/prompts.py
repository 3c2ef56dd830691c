"""Section catalogue and fixed instructions for prompt enhancement.

Every enhanced prompt, whether produced by the remote model or by the
template, follows the same nine `#` sections. The header text is localised;
`en` is the default and `pt` reproduces the headers the service first shipped
with.
"""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class SectionCatalogue:
    """Localised header text plus the labels used inside sections."""

    context: str
    agent_role: str
    objective: str
    scope: str
    restrictions: str
    output_format: str
    quality_criteria: str
    execution_steps: str
    edge_cases: str
    includes_label: str
    excludes_label: str

    @property
    def headers(self) -> tuple[str, ...]:
        return (
            self.context,
            self.agent_role,
            self.objective,
            self.scope,
            self.restrictions,
            self.output_format,
            self.quality_criteria,
            self.execution_steps,
            self.edge_cases,
        )


CATALOGUES: dict[str, SectionCatalogue] = {
    "en": SectionCatalogue(
        context="CONTEXT",
        agent_role="AGENT ROLE",
        objective="OBJECTIVE",
        scope="SCOPE",
        restrictions="RESTRICTIONS",
        output_format="OUTPUT FORMAT",
        quality_criteria="QUALITY CRITERIA",
        execution_steps="EXECUTION STEPS",
        edge_cases="EDGE CASES",
        includes_label="Includes",
        excludes_label="Excludes",
    ),
    "pt": SectionCatalogue(
        context="CONTEXTO",
        agent_role="PAPEL DO AGENTE",
        objective="OBJETIVO",
        scope="ESCOPO",
        restrictions="RESTRIÇÕES",
        output_format="FORMATO DE SAÍDA",
        quality_criteria="CRITÉRIOS DE QUALIDADE",
        execution_steps="PASSOS DE EXECUÇÃO",
        edge_cases="EDGE CASES",
        includes_label="Inclui",
        excludes_label="Não inclui",
    ),
}


def get_catalogue(locale: str | None) -> SectionCatalogue:
    """Return the catalogue for `locale`, falling back to English."""
    return CATALOGUES.get((locale or DEFAULT_LOCALE).lower(), CATALOGUES[DEFAULT_LOCALE])


_USER_MESSAGE_LABELS: dict[str, tuple[str, str, str]] = {
    "en": (
        "Original input",
        "Mode",
        "Generate the structured prompt following the defined format.",
    ),
    "pt": (
        "Input original",
        "Modo",
        "Gere o prompt estruturado seguindo o formato definido.",
    ),
}


def build_system_instruction(locale: str = DEFAULT_LOCALE) -> str:
    """Fixed behavioural contract sent as the system message."""
    c = get_catalogue(locale)
    return f"""You are a Prompt Enhancement Engine. Transform vague inputs into highly structured, executable prompts for AI agents.

Output format (MUST follow exactly):

# {c.context}
[Background and context]

# {c.agent_role}
[Detailed role description]

# {c.objective}
[Clear, measurable objective]

# {c.scope}
{c.includes_label}: [list]
{c.excludes_label}: [list]

# {c.restrictions}
[Clear limitations]

# {c.output_format}
[Expected output format]

# {c.quality_criteria}
[Measurable success criteria]

# {c.execution_steps}
1. [Step]
2. [Step]
3. [Step]

# {c.edge_cases}
[How to handle edge cases]"""


def build_user_message(input_text: str, mode: str, locale: str = DEFAULT_LOCALE) -> str:
    """User message carrying the request and mode under explicit labels."""
    key = (locale or DEFAULT_LOCALE).lower()
    if key not in _USER_MESSAGE_LABELS:
        key = DEFAULT_LOCALE
    input_label, mode_label, instruction = _USER_MESSAGE_LABELS[key]
    return f"{input_label}: {input_text}\n\n{mode_label}: {mode}\n\n{instruction}"
