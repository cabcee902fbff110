"""Drive the blend and swap workflows against the Gemini collaborator.

Blend is a two-step call:

1. Ask the text model to describe the uploaded images as one prompt.
2. Hand that prompt to Imagen and wrap the returned JPEG bytes.

Swap is a single multimodal edit whose first inline image part is the result.

Every attempt ends in ``SUCCEEDED`` or ``FAILED``. Failures are converted to
``ResultStore.error`` here and never propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from image_fusion.gemini_config import GENERATED_IMAGE_MIME_TYPE
from image_fusion.images import EmbeddedImage
from image_fusion.prompts import compose_blend_prompt, compose_swap_prompt
from image_fusion.shared import Collaborator, extract_text_responses, first_inline_image
from image_fusion.state import GenerationPhase, WorkflowMode, WorkflowState

logger = logging.getLogger(__name__)

BLEND_VALIDATION_MESSAGE = "Please upload at least two images and select a blend style."
SWAP_VALIDATION_MESSAGE = "Please upload both a face reference and a scene image."
EMPTY_DESCRIPTION_MESSAGE = "Could not generate a descriptive prompt."
NO_IMAGE_DATA_MESSAGE = "Image generation failed. The response did not contain image data."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred during image generation."

PhaseCallback = Callable[[GenerationPhase], None]


class GenerationError(Exception):
    """Base class for failures the workflows report to the user."""


class InputValidationError(GenerationError, ValueError):
    """Required inputs are missing; raised before any network call."""


class EmptyResultError(GenerationError, RuntimeError):
    """The service answered but without the expected payload."""


def describe_failure(exc: BaseException) -> str:
    """Return the message to display for ``exc``."""

    message = getattr(exc, "message", None) or str(exc)
    return message or UNKNOWN_ERROR_MESSAGE


class GenerationOrchestrator:
    def __init__(
        self,
        collaborator: Collaborator,
        state: WorkflowState,
        *,
        on_phase: Optional[PhaseCallback] = None,
    ) -> None:
        self.collaborator = collaborator
        self.state = state
        self.on_phase = on_phase

    def _enter(self, phase: GenerationPhase) -> None:
        logger.info("%s workflow -> %s", self.state.active_mode.value, phase.value)
        self.state.phase = phase
        if self.on_phase is not None:
            self.on_phase(phase)

    def _fail(self, message: str) -> GenerationPhase:
        self.state.loading = False
        self.state.results.publish_error(message)
        self._enter(GenerationPhase.FAILED)
        return GenerationPhase.FAILED

    def _succeed(self, image: EmbeddedImage) -> GenerationPhase:
        self.state.loading = False
        self.state.results.publish_result(image)
        self._enter(GenerationPhase.SUCCEEDED)
        return GenerationPhase.SUCCEEDED

    def generate(self) -> GenerationPhase:
        """Run the workflow for the active mode."""

        if self.state.active_mode is WorkflowMode.SWAP:
            return self.generate_swap()
        return self.generate_blend()

    # -----------------------------------------------------------------------
    # Blend

    def _validated_blend_images(self) -> List[EmbeddedImage]:
        if not self.state.blend.is_complete():
            raise InputValidationError(BLEND_VALIDATION_MESSAGE)
        return self.state.blend.valid_images()

    def generate_blend(self) -> GenerationPhase:
        if self.state.loading:
            logger.warning("Ignoring blend trigger while a generation is in flight.")
            return self.state.phase

        self._enter(GenerationPhase.VALIDATING)
        try:
            images = self._validated_blend_images()
        except InputValidationError as exc:
            return self._fail(str(exc))

        self.state.loading = True
        self.state.results.begin_attempt()
        try:
            result = self._run_blend(images)
        except Exception as exc:  # noqa: BLE001 - any failure becomes the displayed error.
            logger.exception("Blend generation failed")
            return self._fail(describe_failure(exc))
        finally:
            self.state.loading = False

        return self._succeed(result)

    def _run_blend(self, images: List[EmbeddedImage]) -> EmbeddedImage:
        blend = self.state.blend

        self._enter(GenerationPhase.DESCRIBING_IMAGES)
        vision_prompt = compose_blend_prompt(len(images), blend.blend_mode, blend.prompt)
        description = self.collaborator.describe(vision_prompt, images)
        if not description or not description.strip():
            raise EmptyResultError(EMPTY_DESCRIPTION_MESSAGE)

        self._enter(GenerationPhase.GENERATING_IMAGE)
        image_bytes = self.collaborator.generate_image(
            description,
            model=blend.model,
            aspect_ratio=blend.aspect_ratio,
        )
        if not image_bytes:
            raise EmptyResultError(NO_IMAGE_DATA_MESSAGE)

        return EmbeddedImage(mime_type=GENERATED_IMAGE_MIME_TYPE, data=image_bytes)

    # -----------------------------------------------------------------------
    # Swap

    def _validated_swap_images(self) -> List[EmbeddedImage]:
        swap = self.state.swap
        if swap.scene is None or swap.face_reference is None:
            raise InputValidationError(SWAP_VALIDATION_MESSAGE)
        # Scene first, face reference second; the instruction text refers to this order.
        return [swap.scene, swap.face_reference]

    def generate_swap(self) -> GenerationPhase:
        if self.state.loading:
            logger.warning("Ignoring swap trigger while a generation is in flight.")
            return self.state.phase

        self._enter(GenerationPhase.VALIDATING)
        try:
            images = self._validated_swap_images()
        except InputValidationError as exc:
            return self._fail(str(exc))

        self.state.loading = True
        self.state.results.begin_attempt()
        try:
            self._enter(GenerationPhase.GENERATING)
            parts = self.collaborator.edit(images, compose_swap_prompt(self.state.swap.prompt))
            result = first_inline_image(parts)
            if result is None:
                replies = extract_text_responses(parts)
                if replies:
                    logger.warning("Edit model answered without an image: %s", " ".join(replies))
                raise EmptyResultError(NO_IMAGE_DATA_MESSAGE)
        except Exception as exc:  # noqa: BLE001 - any failure becomes the displayed error.
            logger.exception("Face swap generation failed")
            return self._fail(describe_failure(exc))
        finally:
            self.state.loading = False

        return self._succeed(result)
