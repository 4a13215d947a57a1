"""One generation turn: prompt, provider call, reconciliation."""

from __future__ import annotations

import logging
from typing import Callable

from backendforge.config import ProviderConfig
from backendforge.llm import ResultGenerator, create_generator
from backendforge.models.generation import GeneratedResult
from backendforge.models.stack import TechStack
from backendforge.prompts.generation import build_generation_prompt
from backendforge.reconcile.merge import merge_results

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[ProviderConfig], ResultGenerator]


def generate(
    request: str,
    stack: TechStack,
    previous: GeneratedResult | None,
    provider_config: ProviderConfig,
    *,
    generator_factory: GeneratorFactory = create_generator,
) -> GeneratedResult:
    """Run one turn and return the result merged against ``previous``.

    Errors propagate unchanged and nothing is retried; callers keep their
    previous result when this raises.
    """
    provider_config.require_credentials()
    prompt = build_generation_prompt(request, stack, previous=previous)
    generator = generator_factory(provider_config)

    logger.info(
        "Generating with provider=%s model=%s (previous result: %s)",
        provider_config.provider,
        provider_config.model_name,
        "yes" if previous is not None else "no",
    )
    result = generator.generate(prompt)
    merged = merge_results(result, previous)
    logger.info(
        "Generation finished: %d table(s), %d snippet(s)",
        len(merged.tables),
        len(merged.snippets),
    )
    return merged
