"""Test configuration for pytest."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import pytest
from google.genai import types as genai_types
from PIL import Image

from image_fusion.images import EmbeddedImage
from image_fusion.state import WorkflowState


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "ai: real API tests that may cost money")
    config.addinivalue_line("markers", "slow: tests expected to run longer than ~1 second")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_ai = os.getenv("RUN_AI_TESTS") == "1"
    skip_marker = pytest.mark.skip(reason="Set RUN_AI_TESTS=1 to run AI integration tests.")

    if run_ai:
        return

    for item in items:
        if "ai" in item.keywords:
            item.add_marker(skip_marker)


@dataclass
class FakeCollaborator:
    """Records every call and replays canned answers (or raises ``error``)."""

    description: Optional[str] = "A luminous fusion of both photos."
    image_bytes: Optional[bytes] = b"\xff\xd8\xff-jpeg-bytes"
    edit_parts: List[genai_types.Part] = field(default_factory=list)
    error: Optional[BaseException] = None
    calls: List[tuple[str, Any]] = field(default_factory=list)
    state: Optional[WorkflowState] = None
    loading_seen: List[bool] = field(default_factory=list)

    def _record(self, name: str, payload: Any) -> None:
        self.calls.append((name, payload))
        if self.state is not None:
            self.loading_seen.append(self.state.loading)
        if self.error is not None:
            raise self.error

    def describe(self, instruction: str, images: Sequence[EmbeddedImage]) -> Optional[str]:
        self._record("describe", (instruction, list(images)))
        return self.description

    def generate_image(self, prompt: str, *, model: str, aspect_ratio: str) -> Optional[bytes]:
        self._record("generate_image", (prompt, model, aspect_ratio))
        return self.image_bytes

    def edit(self, images: Sequence[EmbeddedImage], instruction: str) -> List[genai_types.Part]:
        self._record("edit", (list(images), instruction))
        return self.edit_parts


@pytest.fixture
def png_image() -> EmbeddedImage:
    return EmbeddedImage(mime_type="image/png", data=b"\x89PNG-first")


@pytest.fixture
def other_png_image() -> EmbeddedImage:
    return EmbeddedImage(mime_type="image/png", data=b"\x89PNG-second")


@pytest.fixture
def jpeg_image() -> EmbeddedImage:
    return EmbeddedImage(mime_type="image/jpeg", data=b"\xff\xd8\xff-scene")


@pytest.fixture
def state() -> WorkflowState:
    return WorkflowState()


@pytest.fixture
def collaborator(state: WorkflowState) -> FakeCollaborator:
    return FakeCollaborator(state=state)


def encode_image(fmt: str, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def real_png() -> EmbeddedImage:
    return EmbeddedImage(mime_type="image/png", data=encode_image("PNG"))


@pytest.fixture
def other_real_png() -> EmbeddedImage:
    return EmbeddedImage(mime_type="image/png", data=encode_image("PNG", "blue"))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode_image("JPEG", "green")
