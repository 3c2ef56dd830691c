"""Prompt enhancement pipeline: template, remote client, scorer, orchestrator."""

from .orchestrator import PromptEnhancementOrchestrator, build_orchestrator
from .scoring import score
from .template import generate_template


__all__ = [
    "PromptEnhancementOrchestrator",
    "build_orchestrator",
    "generate_template",
    "score",
]
