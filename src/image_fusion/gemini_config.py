"""Helpers for constructing Gemini and Imagen request configurations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from google.genai import types as genai_types

# ---------------------------------------------------------------------------
# Model identifiers. Adjust these if Google changes the model names.

# Text model that turns the uploaded images into one descriptive prompt.
DESCRIBE_MODEL_NAME: str = "gemini-2.5-flash"

# Image-capable Gemini variant used for face swaps.
EDIT_MODEL_NAME: str = "gemini-2.5-flash-image-preview"


@dataclass(frozen=True, slots=True)
class BlendMode:
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class GenerationModel:
    id: str
    name: str


BLEND_MODES: List[BlendMode] = [
    BlendMode("Fusion", "Smoothly merges concepts and aesthetics into a cohesive whole."),
    BlendMode("Surreal Collage", "Creates a dreamlike composition with artistic juxtapositions."),
    BlendMode("Painterly Blend", "Reimagines inputs with classical brushwork and texture."),
    BlendMode(
        "Photorealistic Composite",
        "Seamlessly integrates elements into a single, believable photograph.",
    ),
    BlendMode("Graphic Mashup", "Bold, pop-art style with sharp lines and vibrant colors."),
]

GENERATION_MODELS: List[GenerationModel] = [
    GenerationModel("imagen-4.0-generate-001", "Imagen 4"),
]

ASPECT_RATIOS: List[str] = ["1:1", "16:9", "9:16", "4:3", "3:4"]

DEFAULT_GENERATION_MODEL: str = GENERATION_MODELS[0].id
DEFAULT_ASPECT_RATIO: str = ASPECT_RATIOS[0]

GENERATED_IMAGE_MIME_TYPE: str = "image/jpeg"


def blend_mode_names() -> List[str]:
    return [mode.name for mode in BLEND_MODES]


def generation_model_ids() -> List[str]:
    return [model.id for model in GENERATION_MODELS]


def build_generate_images_config(*, aspect_ratio: str) -> genai_types.GenerateImagesConfig:
    """Return the Imagen config used for every blend: one JPEG at ``aspect_ratio``."""

    if aspect_ratio not in ASPECT_RATIOS:
        raise ValueError(
            f"Unsupported aspect ratio '{aspect_ratio}'. Choose one of: {', '.join(ASPECT_RATIOS)}"
        )

    return genai_types.GenerateImagesConfig(
        number_of_images=1,
        output_mime_type=GENERATED_IMAGE_MIME_TYPE,
        aspect_ratio=aspect_ratio,
    )


def build_edit_config() -> genai_types.GenerateContentConfig:
    """Ask the edit model for image and text parts in a single candidate."""

    return genai_types.GenerateContentConfig(
        response_modalities=["IMAGE", "TEXT"],
        candidate_count=1,
    )
