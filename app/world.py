from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from dataclasses import dataclass
from typing import Any, Coroutine, Dict, List, Optional, Tuple, TypeVar

import streamlit as st

from squad_token.config import DEFAULT_ASSET_ROOT, DEFAULT_BACKGROUND, configure_logging
from squad_token.entity import Token, new_token_id
from squad_token.hooks import Hooks, register_hooks
from squad_token.module import SquadToken
from squad_token.renderer.texture import TextureRenderer, list_textures_in_directory
from squad_token.stores import Canvas, DirectoryFilePicker, MemoryFlagStore, MemorySettings
from squad_token.types import HookName
from squad_token.utils.image import make_disc_image, make_frame_image

T = TypeVar("T")

# (actor, icon width, icon height, RGBA)
DEMO_ACTORS: List[Tuple[str, int, int, Tuple[int, int, int, int]]] = [
    ("goblin", 48, 64, (96, 168, 72, 255)),
    ("orc", 64, 64, (168, 72, 56, 255)),
    ("knight", 64, 40, (120, 140, 200, 255)),
]


@dataclass
class DemoWorld:
    flags: MemoryFlagStore
    settings: MemorySettings
    canvas: Canvas
    hooks: Hooks
    squad: SquadToken
    frames_dir: str
    errors: List[str]


def run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


def frame_choices(world: DemoWorld) -> List[str]:
    return list_textures_in_directory(world.frames_dir)


def make_world() -> DemoWorld:
    frames_dir = tempfile.mkdtemp(prefix="squad-frames-")
    shutil.copy(os.path.join(DEFAULT_ASSET_ROOT, DEFAULT_BACKGROUND), frames_dir)
    make_frame_image(128, border=(72, 160, 196, 255)).save(
        os.path.join(frames_dir, "blue_frame.png")
    )

    errors: List[str] = []
    flags = MemoryFlagStore()
    settings = MemorySettings()
    canvas = Canvas()
    hooks = Hooks()
    squad = SquadToken(
        flags,
        settings,
        canvas,
        TextureRenderer(),
        picker=DirectoryFilePicker(frames_dir, pick_from_session),
        on_error=lambda message, exc: errors.append(f"{message}: {exc}"),
    )
    register_hooks(hooks, squad)
    run(hooks.call_all(HookName.SETUP))

    for actor_id, width, height, color in DEMO_ACTORS:
        canvas.add_token(
            Token(id=new_token_id(), actor_id=actor_id),
            make_disc_image(width, height, color),
        )
    return DemoWorld(flags, settings, canvas, hooks, squad, frames_dir, errors)


def pick_from_session(paths: List[str], initial_path: Optional[str]) -> Optional[str]:
    # The selectbox stands in for the file picker dialog.
    choice: Optional[str] = st.session_state.get("frame_choice")
    return choice if choice in paths else None


def set_default_world() -> DemoWorld:
    if "world" not in st.session_state:
        configure_logging()
        st.session_state["world"] = make_world()
    return st.session_state["world"]


def token_images(world: DemoWorld) -> Dict[str, Any]:
    return {
        token.actor_id: world.canvas.get_displayed_image(token)
        for token in world.canvas.tokens()
    }
