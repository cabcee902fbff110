from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Protocol, Sequence

from dotenv import load_dotenv
from google import genai
from google.genai import types as genai_types

from image_fusion.gemini_config import (
    DESCRIBE_MODEL_NAME,
    EDIT_MODEL_NAME,
    build_edit_config,
    build_generate_images_config,
)
from image_fusion.images import EmbeddedImage

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Basic environment helpers


def load_api_key() -> str:
    """Fetch the Gemini API key from the environment (via .env)."""

    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not api_key:
        raise RuntimeError(
            "GEMINI_API_KEY was not found. Set it in your .env file before running."
        )
    return api_key


def build_client(api_key: Optional[str] = None) -> genai.Client:
    return genai.Client(api_key=api_key or load_api_key())


# ---------------------------------------------------------------------------
# Collaborator: the three Gemini capabilities the workflows consume


class Collaborator(Protocol):
    def describe(self, instruction: str, images: Sequence[EmbeddedImage]) -> Optional[str]: ...

    def generate_image(self, prompt: str, *, model: str, aspect_ratio: str) -> Optional[bytes]: ...

    def edit(self, images: Sequence[EmbeddedImage], instruction: str) -> List[genai_types.Part]: ...


class GeminiCollaborator:
    """Thin wrapper over ``genai.Client`` exposing describe, generate and edit."""

    def __init__(
        self,
        client: genai.Client,
        *,
        describe_model: str = DESCRIBE_MODEL_NAME,
        edit_model: str = EDIT_MODEL_NAME,
    ) -> None:
        self.client = client
        self.describe_model = describe_model
        self.edit_model = edit_model

    @classmethod
    def from_environment(cls) -> "GeminiCollaborator":
        return cls(build_client())

    def describe(self, instruction: str, images: Sequence[EmbeddedImage]) -> Optional[str]:
        parts = [genai_types.Part(text=instruction), *(image.to_part() for image in images)]
        logger.info("Requesting description of %d image(s) from %s", len(images), self.describe_model)

        response = self.client.models.generate_content(
            model=self.describe_model,
            contents=[genai_types.Content(role="user", parts=parts)],
        )
        return response.text

    def generate_image(self, prompt: str, *, model: str, aspect_ratio: str) -> Optional[bytes]:
        logger.info("Generating image with %s at %s", model, aspect_ratio)

        response = self.client.models.generate_images(
            model=model,
            prompt=prompt,
            config=build_generate_images_config(aspect_ratio=aspect_ratio),
        )

        generated = response.generated_images or []
        if not generated or generated[0].image is None:
            return None
        return generated[0].image.image_bytes

    def edit(self, images: Sequence[EmbeddedImage], instruction: str) -> List[genai_types.Part]:
        parts = [*(image.to_part() for image in images), genai_types.Part(text=instruction)]
        logger.info("Requesting edit of %d image(s) from %s", len(images), self.edit_model)

        response = self.client.models.generate_content(
            model=self.edit_model,
            contents=[genai_types.Content(role="user", parts=parts)],
            config=build_edit_config(),
        )

        if not response.candidates:
            return []
        content = response.candidates[0].content
        if not content or not content.parts:
            return []
        return list(content.parts)


# ---------------------------------------------------------------------------
# Response helpers


def first_inline_image(parts: Iterable[genai_types.Part]) -> Optional[EmbeddedImage]:
    """Return the first part carrying inline image data, keeping its MIME type."""

    for part in parts:
        inline = getattr(part, "inline_data", None)
        if not inline or not getattr(inline, "data", None):
            continue

        mime_type = getattr(inline, "mime_type", None) or "image/png"
        return EmbeddedImage(mime_type=mime_type, data=inline.data)
    return None


def extract_text_responses(parts: Iterable[genai_types.Part]) -> List[str]:
    """Collect any textual explanations returned alongside an edit."""

    texts: List[str] = []
    for part in parts:
        text = getattr(part, "text", None)
        if text:
            texts.append(text)
    return texts
