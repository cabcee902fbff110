"""Instruction text sent alongside the uploaded images."""

from __future__ import annotations

DEFAULT_BLEND_GUIDANCE: str = "Create a visually stunning masterpiece."
DEFAULT_SWAP_GUIDANCE: str = "Blend them seamlessly and realistically."


def _guidance_or_default(guidance: str | None, default: str) -> str:
    if guidance is None or not guidance.strip():
        return default
    return guidance


def compose_blend_prompt(image_count: int, blend_mode: str, guidance: str | None = None) -> str:
    """Ask the captioning model for one image-generator prompt fusing the images."""

    user_guidance = _guidance_or_default(guidance, DEFAULT_BLEND_GUIDANCE)
    return (
        "You are an expert art director. Your task is to create a detailed, vivid, and "
        "descriptive prompt for an AI image generator. The prompt should combine the "
        f"elements of the {image_count} provided images in a style described as "
        f"'{blend_mode}'. Also incorporate the user's guidance: '{user_guidance}'. "
        "Generate only the descriptive prompt for the image generator and nothing else. "
        "Be creative and concise."
    )


def compose_swap_prompt(guidance: str | None = None) -> str:
    user_guidance = _guidance_or_default(guidance, DEFAULT_SWAP_GUIDANCE)
    return (
        "The first image is the scene. The second image contains the face to use as a "
        "reference. Modify the scene to replace a face with the reference face. Also "
        f'incorporate this user guidance: "{user_guidance}"'
    )
