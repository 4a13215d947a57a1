"""Prompt builders for backendforge."""

from backendforge.prompts.generation import (
    RESPONSE_SCHEMA,
    PromptBuildError,
    PromptBundle,
    build_generation_prompt,
    build_system_prompt,
)

__all__ = [
    "RESPONSE_SCHEMA",
    "PromptBuildError",
    "PromptBundle",
    "build_generation_prompt",
    "build_system_prompt",
]
