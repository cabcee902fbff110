"""Embedded image values passed between uploads, the Gemini API and the UI."""

from __future__ import annotations

import io
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from google.genai import types as genai_types
from PIL import Image, UnidentifiedImageError


def verify_image_bytes(data: bytes, name: str = "upload") -> None:
    """Raise ``ValueError`` unless ``data`` decodes as an image."""

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError(f"'{name}' is not a readable image file.") from exc


@dataclass(frozen=True, slots=True)
class EmbeddedImage:
    """An image carried as its MIME type and raw bytes."""

    mime_type: str
    data: bytes

    def __post_init__(self) -> None:
        if not self.mime_type or not self.mime_type.startswith("image/"):
            raise ValueError(f"'{self.mime_type}' is not an image MIME type.")
        if not self.data:
            raise ValueError("Image data is empty.")

    @classmethod
    def from_path(cls, path: Path) -> "EmbeddedImage":
        mime_type, _ = mimetypes.guess_type(path.as_posix())
        if not mime_type:
            raise ValueError(
                f"Could not infer a MIME type for '{path.name}'. Rename it with a known extension."
            )
        data = path.read_bytes()
        verify_image_bytes(data, path.name)
        return cls(mime_type=mime_type, data=data)

    @classmethod
    def from_upload(cls, upload: Any) -> Optional["EmbeddedImage"]:
        """Decode a user-selected file, or return ``None`` when nothing was picked.

        Accepts a Streamlit ``UploadedFile`` or any file-like object exposing
        ``getvalue()`` or ``read()``. The declared ``type`` wins over a guess
        from the file name. Bytes that Pillow cannot open raise ``ValueError``.
        """

        if upload is None:
            return None

        name = getattr(upload, "name", "") or "upload"
        getter = getattr(upload, "getvalue", None) or upload.read
        data = getter()

        mime_type = getattr(upload, "type", None)
        if not mime_type:
            mime_type, _ = mimetypes.guess_type(name)
        if not mime_type:
            raise ValueError(f"Could not infer a MIME type for '{name}'.")

        image = cls(mime_type=mime_type, data=data)
        verify_image_bytes(image.data, name)
        return image

    def to_part(self) -> genai_types.Part:
        return genai_types.Part(
            inline_data=genai_types.Blob(
                mime_type=self.mime_type,
                data=self.data,
            )
        )

    @property
    def extension(self) -> str:
        return mimetypes.guess_extension(self.mime_type) or ".png"
