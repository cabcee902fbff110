"""In-memory session state for the blend and swap workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from image_fusion.gemini_config import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_GENERATION_MODEL,
    generation_model_ids,
)
from image_fusion.images import EmbeddedImage

MIN_BLEND_IMAGES: int = 2
MAX_BLEND_SLOTS: int = 5


class WorkflowMode(str, Enum):
    BLEND = "blend"
    SWAP = "swap"


class GenerationPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    DESCRIBING_IMAGES = "describing_images"
    GENERATING_IMAGE = "generating_image"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _initial_slots() -> List[Optional[EmbeddedImage]]:
    return [None] * MIN_BLEND_IMAGES


@dataclass(slots=True)
class BlendInputs:
    """Image slots and settings for the blend workflow."""

    slots: List[Optional[EmbeddedImage]] = field(default_factory=_initial_slots)
    blend_mode: str = ""
    prompt: str = ""
    model: str = DEFAULT_GENERATION_MODEL
    aspect_ratio: str = DEFAULT_ASPECT_RATIO

    def upload_image(self, slot_index: int, image: Optional[EmbeddedImage]) -> None:
        if image is None:
            return
        self.slots[slot_index] = image

    def remove_image(self, slot_index: int) -> None:
        # Slots keep their positions; the sequence stays sparse.
        self.slots[slot_index] = None

    def add_slot(self) -> bool:
        if len(self.slots) >= MAX_BLEND_SLOTS:
            return False
        self.slots.append(None)
        return True

    def set_aspect_ratio(self, aspect_ratio: str) -> None:
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio '{aspect_ratio}'.")
        self.aspect_ratio = aspect_ratio

    def set_model(self, model: str) -> None:
        if model not in generation_model_ids():
            raise ValueError(f"Unsupported generation model '{model}'.")
        self.model = model

    def valid_images(self) -> List[EmbeddedImage]:
        return [image for image in self.slots if image is not None]

    def is_complete(self) -> bool:
        return len(self.valid_images()) >= MIN_BLEND_IMAGES and bool(self.blend_mode)

    def reset(self) -> None:
        self.slots = _initial_slots()
        self.blend_mode = ""
        self.prompt = ""
        self.aspect_ratio = DEFAULT_ASPECT_RATIO


@dataclass(slots=True)
class SwapInputs:
    """The scene and face-reference slots for the swap workflow."""

    scene: Optional[EmbeddedImage] = None
    face_reference: Optional[EmbeddedImage] = None
    prompt: str = ""

    def upload_scene(self, image: Optional[EmbeddedImage]) -> None:
        if image is not None:
            self.scene = image

    def upload_face_reference(self, image: Optional[EmbeddedImage]) -> None:
        if image is not None:
            self.face_reference = image

    def remove_scene(self) -> None:
        self.scene = None

    def remove_face_reference(self) -> None:
        self.face_reference = None

    def is_complete(self) -> bool:
        return self.scene is not None and self.face_reference is not None


@dataclass(slots=True)
class ResultStore:
    """Latest result or error, plus the images the user chose to keep."""

    result: Optional[EmbeddedImage] = None
    error: Optional[str] = None
    gallery: List[EmbeddedImage] = field(default_factory=list)

    def begin_attempt(self) -> None:
        self.result = None
        self.error = None

    def publish_result(self, image: EmbeddedImage) -> None:
        self.result = image
        self.error = None

    def publish_error(self, message: str) -> None:
        self.error = message

    def save_to_gallery(self) -> bool:
        if self.result is None or self.result in self.gallery:
            return False
        self.gallery.insert(0, self.result)
        return True


@dataclass(slots=True)
class WorkflowState:
    active_mode: WorkflowMode = WorkflowMode.BLEND
    blend: BlendInputs = field(default_factory=BlendInputs)
    swap: SwapInputs = field(default_factory=SwapInputs)
    results: ResultStore = field(default_factory=ResultStore)
    loading: bool = False
    phase: GenerationPhase = GenerationPhase.IDLE

    def switch_mode(self, mode: WorkflowMode | str) -> None:
        self.active_mode = WorkflowMode(mode)

    def reset(self) -> None:
        """Clear blend inputs and the current outcome; swap inputs and the gallery stay."""

        self.blend.reset()
        self.results.result = None
        self.results.error = None
        self.loading = False
        self.phase = GenerationPhase.IDLE
