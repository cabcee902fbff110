# app.py

import logging
from typing import Optional

import streamlit as st

from image_fusion.gemini_config import (
    ASPECT_RATIOS,
    BLEND_MODES,
    GENERATION_MODELS,
    blend_mode_names,
)
from image_fusion.generation import GenerationOrchestrator
from image_fusion.images import EmbeddedImage
from image_fusion.shared import GeminiCollaborator
from image_fusion.state import MAX_BLEND_SLOTS, GenerationPhase, WorkflowMode, WorkflowState

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PHASE_LABELS = {
    GenerationPhase.VALIDATING: "Checking inputs…",
    GenerationPhase.DESCRIBING_IMAGES: "Analyzing your images with Gemini…",
    GenerationPhase.GENERATING_IMAGE: "🎨 Generating the blended image with Imagen…",
    GenerationPhase.GENERATING: "🎨 Swapping the face with Gemini…",
    GenerationPhase.SUCCEEDED: "✅ Done",
    GenerationPhase.FAILED: "❌ Generation failed",
}

MODE_LABELS = {
    WorkflowMode.BLEND: "🧪 Image Blend",
    WorkflowMode.SWAP: "🙂 Face Reference",
}

# -----------------------------------------------------------------------------
# Session helpers
# -----------------------------------------------------------------------------


@st.cache_resource
def get_collaborator() -> GeminiCollaborator:
    """
    Create a single Gemini collaborator for the app.
    Uses GEMINI_API_KEY from the environment (or .env).
    """
    return GeminiCollaborator.from_environment()


def get_state() -> WorkflowState:
    if "workflow_state" not in st.session_state:
        st.session_state.workflow_state = WorkflowState()
        st.session_state.uploader_epoch = 0
    return st.session_state.workflow_state


def uploader_key(name: str) -> str:
    # Bumping the epoch gives every file uploader a fresh, empty widget.
    return f"{name}_{st.session_state.uploader_epoch}"


def clear_uploaders() -> None:
    st.session_state.uploader_epoch += 1


# -----------------------------------------------------------------------------
# Callbacks
# -----------------------------------------------------------------------------


def read_upload(upload) -> Optional[EmbeddedImage]:
    """Decode ``upload``; an unreadable file is reported and leaves the slot as it was."""

    try:
        return EmbeddedImage.from_upload(upload)
    except ValueError as exc:
        logger.warning("Rejected upload: %s", exc)
        st.session_state.upload_error = str(exc)
        clear_uploaders()
        return None


def on_blend_upload(index: int, key: str) -> None:
    blend = get_state().blend
    upload = st.session_state.get(key)
    if upload is None:
        blend.remove_image(index)
        return
    blend.upload_image(index, read_upload(upload))


def on_blend_remove(index: int) -> None:
    get_state().blend.remove_image(index)
    clear_uploaders()


def on_swap_upload(role: str, key: str) -> None:
    swap = get_state().swap
    upload = st.session_state.get(key)
    if upload is None:
        on_swap_remove(role)
    elif role == "scene":
        swap.upload_scene(read_upload(upload))
    else:
        swap.upload_face_reference(read_upload(upload))


def on_swap_remove(role: str) -> None:
    swap = get_state().swap
    if role == "scene":
        swap.remove_scene()
    else:
        swap.remove_face_reference()
    clear_uploaders()


def on_reset() -> None:
    get_state().reset()
    clear_uploaders()


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------


def show_image(image: EmbeddedImage) -> None:
    # A preview that cannot be decoded must not stop the rest of the page from rendering.
    try:
        st.image(image.data, width="stretch")
    except (OSError, ValueError) as exc:
        logger.warning("Could not preview %s image: %s", image.mime_type, exc)
        st.warning("⚠️ This image could not be previewed.")


def render_slot(label: str, image: Optional[EmbeddedImage], key: str, on_upload, on_remove, args) -> None:
    st.file_uploader(
        label,
        type=["png", "jpg", "jpeg", "webp"],
        key=key,
        on_change=on_upload,
        args=(*args, key),
    )
    if image is not None:
        show_image(image)
        st.button("Remove", key=f"remove_{key}", on_click=on_remove, args=args)


def render_blend_inputs(state: WorkflowState) -> None:
    blend = state.blend

    st.subheader("1. Upload images")
    columns = st.columns(len(blend.slots))
    for index, column in enumerate(columns):
        with column:
            render_slot(
                f"Image {index + 1}",
                blend.slots[index],
                uploader_key(f"blend_slot_{index}"),
                on_blend_upload,
                on_blend_remove,
                (index,),
            )

    if len(blend.slots) < MAX_BLEND_SLOTS:
        st.button("➕ Add image", key="add_slot", on_click=blend.add_slot)

    st.subheader("2. Choose a blend style")
    names = blend_mode_names()
    descriptions = {mode.name: mode.description for mode in BLEND_MODES}
    selected = st.radio(
        "Blend style",
        names,
        index=names.index(blend.blend_mode) if blend.blend_mode in names else None,
        captions=[descriptions[name] for name in names],
        key=uploader_key("blend_mode"),
    )
    blend.blend_mode = selected or ""

    st.subheader("3. Settings")
    model_ids = [model.id for model in GENERATION_MODELS]
    model_names = {model.id: model.name for model in GENERATION_MODELS}
    model_col, ratio_col = st.columns(2)
    with model_col:
        blend.set_model(
            st.selectbox(
                "Model",
                model_ids,
                index=model_ids.index(blend.model),
                format_func=model_names.get,
            )
        )
    with ratio_col:
        blend.set_aspect_ratio(
            st.selectbox(
                "Aspect ratio",
                ASPECT_RATIOS,
                index=ASPECT_RATIOS.index(blend.aspect_ratio),
                key=uploader_key("aspect_ratio"),
            )
        )

    blend.prompt = st.text_area(
        "Guidance (optional)",
        value=blend.prompt,
        placeholder="e.g. a neon-lit city at dusk",
        key=uploader_key("blend_prompt"),
    )


def render_swap_inputs(state: WorkflowState) -> None:
    swap = state.swap

    scene_col, face_col = st.columns(2)
    with scene_col:
        render_slot(
            "Scene image",
            swap.scene,
            uploader_key("swap_scene"),
            on_swap_upload,
            on_swap_remove,
            ("scene",),
        )
    with face_col:
        render_slot(
            "Face reference",
            swap.face_reference,
            uploader_key("swap_face"),
            on_swap_upload,
            on_swap_remove,
            ("face",),
        )

    swap.prompt = st.text_area(
        "Guidance (optional)",
        value=swap.prompt,
        placeholder="e.g. at a beach",
        key="swap_prompt",
    )


def run_generation(state: WorkflowState) -> None:
    try:
        collaborator = get_collaborator()
    except RuntimeError as exc:
        st.error(f"❌ {exc}")
        st.stop()

    with st.status("Starting generation…", expanded=False) as status:
        orchestrator = GenerationOrchestrator(
            collaborator,
            state,
            on_phase=lambda phase: status.update(label=PHASE_LABELS.get(phase, phase.value)),
        )
        phase = orchestrator.generate()
        status.update(state="complete" if phase is GenerationPhase.SUCCEEDED else "error")


def render_result(state: WorkflowState) -> None:
    results = state.results

    if results.error:
        st.error(results.error)

    if results.result is None:
        return

    st.subheader("Result")
    show_image(results.result)

    save_col, download_col = st.columns(2)
    with save_col:
        if st.button("💾 Save to session gallery", key="save_to_gallery"):
            if results.save_to_gallery():
                st.toast("Saved to the session gallery.")
    with download_col:
        st.download_button(
            "⬇️ Download",
            data=results.result.data,
            file_name=f"image-fusion{results.result.extension}",
            mime=results.result.mime_type,
        )


def render_gallery(state: WorkflowState) -> None:
    gallery = state.results.gallery
    if not gallery:
        return

    st.subheader(f"Session gallery ({len(gallery)})")
    columns = st.columns(4)
    for index, image in enumerate(gallery):
        with columns[index % 4]:
            show_image(image)


def main() -> None:
    st.set_page_config(page_title="Image Fusion", page_icon="🧪", layout="wide")
    st.title("Image Fusion")
    st.caption("Blend images into something new, or swap a face into a scene, with Gemini.")

    state = get_state()

    upload_error = st.session_state.pop("upload_error", None)
    if upload_error:
        st.error(f"❌ {upload_error}")

    mode = st.radio(
        "Workflow",
        list(WorkflowMode),
        index=list(WorkflowMode).index(state.active_mode),
        format_func=MODE_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
        key="workflow_mode",
    )
    state.switch_mode(mode)

    if state.active_mode is WorkflowMode.BLEND:
        render_blend_inputs(state)
        ready = state.blend.is_complete()
    else:
        render_swap_inputs(state)
        ready = state.swap.is_complete()

    generate_col, reset_col = st.columns([3, 1])
    with generate_col:
        generate_btn = st.button(
            "✨ Generate",
            key="generate",
            type="primary",
            disabled=state.loading or not ready,
            width="stretch",
        )
    with reset_col:
        st.button("Reset", key="reset", on_click=on_reset, width="stretch")

    if generate_btn:
        run_generation(state)

    render_result(state)
    render_gallery(state)


if __name__ == "__main__":
    main()
