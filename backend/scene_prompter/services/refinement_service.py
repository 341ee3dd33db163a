import logging
from typing import Optional

from scene_prompter.core.config import settings
from scene_prompter.core.errors import (
    GenerationServiceError,
    RefinementBusyError,
    RefinementError,
    StoreValidationError,
    describe_generation_failure,
)
from scene_prompter.core.prompts import templates
from scene_prompter.services.entity_store import EntityStore
from scene_prompter.services.llm_service import LLMService, llm_service

logger = logging.getLogger(__name__)


def build_refinement_instruction(prompt: str) -> str:
    return templates.REFINEMENT_TEMPLATE.format(
        source_language=settings.SOURCE_LANGUAGE,
        target_language=settings.TARGET_LANGUAGE,
        target_model=settings.TARGET_MODEL_NAME,
        prompt=prompt,
    )


class RefinementService:
    """Rewrites the composed narrative into the target language.

    Only one refinement may be outstanding per store. The refined prompt in
    the store is replaced on success and left as it was on failure.
    """

    def __init__(self, store: EntityStore, llm: Optional[LLMService] = None):
        self.store = store
        self.llm = llm or llm_service
        self._in_flight = False

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    async def refine(self, composed_text: Optional[str] = None) -> str:
        if self._in_flight:
            raise RefinementBusyError("Prompt sedang dioptimalkan. Tunggu hingga selesai.")

        prompt = composed_text if composed_text is not None else self.store.snapshot().composed_prompt
        if not prompt or not prompt.strip():
            raise StoreValidationError("Generate the Indonesian prompt first.")

        self._in_flight = True
        try:
            text = await self.llm.generate_text(build_refinement_instruction(prompt), purpose="refine")
        except GenerationServiceError as e:
            logger.error(f"Refinement failed: {e}")
            raise RefinementError(describe_generation_failure("mengoptimalkan prompt", e)) from e
        finally:
            self._in_flight = False

        refined = text.strip()
        self.store.set_refined_prompt(refined)
        logger.info("Prompt refined: input_chars=%s output_chars=%s", len(prompt), len(refined))
        return refined
