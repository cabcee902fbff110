"""Unit tests for the request configuration helpers."""

from __future__ import annotations

import pytest

from image_fusion.gemini_config import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_GENERATION_MODEL,
    blend_mode_names,
    build_edit_config,
    build_generate_images_config,
)


def test_blend_modes_are_fixed() -> None:
    assert blend_mode_names() == [
        "Fusion",
        "Surreal Collage",
        "Painterly Blend",
        "Photorealistic Composite",
        "Graphic Mashup",
    ]


def test_defaults() -> None:
    assert DEFAULT_ASPECT_RATIO == "1:1"
    assert DEFAULT_GENERATION_MODEL == "imagen-4.0-generate-001"


@pytest.mark.parametrize("aspect_ratio", ASPECT_RATIOS)
def test_generate_images_config_requests_one_jpeg(aspect_ratio: str) -> None:
    config = build_generate_images_config(aspect_ratio=aspect_ratio)

    assert config.number_of_images == 1
    assert config.output_mime_type == "image/jpeg"
    assert config.aspect_ratio == aspect_ratio


def test_generate_images_config_rejects_unknown_ratio() -> None:
    with pytest.raises(ValueError):
        build_generate_images_config(aspect_ratio="2:1")


def test_edit_config_requests_image_and_text() -> None:
    config = build_edit_config()

    assert [str(getattr(m, "value", m)) for m in config.response_modalities] == ["IMAGE", "TEXT"]
