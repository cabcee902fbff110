"""Unit tests for ``EmbeddedImage``."""

from __future__ import annotations

import io
from pathlib import Path
from types import SimpleNamespace

import pytest

from image_fusion.images import EmbeddedImage, verify_image_bytes


def test_rejects_partial_construction() -> None:
    with pytest.raises(ValueError):
        EmbeddedImage(mime_type="", data=b"abc")
    with pytest.raises(ValueError):
        EmbeddedImage(mime_type="image/png", data=b"")
    with pytest.raises(ValueError):
        EmbeddedImage(mime_type="text/plain", data=b"abc")


def test_value_equality_compares_type_and_bytes() -> None:
    assert EmbeddedImage("image/png", b"abc") == EmbeddedImage("image/png", b"abc")
    assert EmbeddedImage("image/png", b"abc") != EmbeddedImage("image/jpeg", b"abc")


def test_from_upload_returns_none_without_file() -> None:
    assert EmbeddedImage.from_upload(None) is None


def test_from_upload_prefers_declared_type(real_png) -> None:
    upload = SimpleNamespace(name="photo.jpg", type="image/png", getvalue=lambda: real_png.data)

    image = EmbeddedImage.from_upload(upload)

    assert image == real_png


def test_from_upload_guesses_type_from_name(jpeg_bytes) -> None:
    upload = io.BytesIO(jpeg_bytes)
    upload.name = "portrait.jpg"

    image = EmbeddedImage.from_upload(upload)

    assert image.mime_type == "image/jpeg"
    assert image.data == jpeg_bytes


def test_from_upload_rejects_bytes_that_are_not_an_image() -> None:
    upload = SimpleNamespace(name="broken.png", type="image/png", getvalue=lambda: b"not really a png")

    with pytest.raises(ValueError, match="broken.png"):
        EmbeddedImage.from_upload(upload)


def test_verify_image_bytes_accepts_real_images(real_png, jpeg_bytes) -> None:
    verify_image_bytes(real_png.data)
    verify_image_bytes(jpeg_bytes)


def test_from_path_reads_bytes(tmp_path: Path, real_png) -> None:
    path = tmp_path / "scene.png"
    path.write_bytes(real_png.data)

    assert EmbeddedImage.from_path(path) == real_png


def test_from_path_rejects_unreadable_image(tmp_path: Path) -> None:
    path = tmp_path / "scene.png"
    path.write_bytes(b"\x89PNG")

    with pytest.raises(ValueError):
        EmbeddedImage.from_path(path)


def test_to_part_carries_inline_data() -> None:
    part = EmbeddedImage("image/png", b"\x89PNG").to_part()

    assert part.inline_data.mime_type == "image/png"
    assert part.inline_data.data == b"\x89PNG"


def test_extension_follows_mime_type() -> None:
    assert EmbeddedImage("image/png", b"x").extension == ".png"
    assert EmbeddedImage("image/jpeg", b"x").extension in {".jpg", ".jpeg"}
