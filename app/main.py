import os
import streamlit as st

from world import DemoWorld, frame_choices, run, set_default_world, token_images
from squad_token.membership import ToggleError

st.set_page_config(layout="wide", page_title="Squad Token")


def display_token(world: DemoWorld, actor_id: str) -> None:
    visual = token_images(world)[actor_id]
    st.image(visual.image, caption=actor_id, use_container_width=True)
    st.caption(f"{visual.kind} · {visual.image.width}x{visual.image.height}")
    is_squad = world.squad.is_squad(actor_id)
    label = "Disband squad" if is_squad else "Make squad"
    if st.button(label, key=f"toggle_{actor_id}", use_container_width=True):
        try:
            world.squad.toggle([actor_id])
        except ToggleError as e:
            st.error(str(e))
        st.rerun()


# --------- Main App ---------

world = set_default_world()
tab_canvas, tab_background, tab_state = st.tabs(["Canvas", "Background", "State"])

with tab_background:
    choices = frame_choices(world)
    current = world.squad.background
    st.selectbox(
        "Frame",
        choices,
        index=choices.index(current) if current in choices else 0,
        format_func=os.path.basename,
        key="frame_choice",
    )
    uploaded = st.file_uploader("Upload a frame", type=["png", "jpg", "jpeg", "webp"])
    if uploaded is not None:
        target = os.path.join(world.frames_dir, os.path.basename(uploaded.name))
        with open(target, "wb") as f:
            f.write(uploaded.getbuffer())
        st.success(f"Saved {os.path.basename(target)}")
    if st.button("Use frame", key="set_background_btn", use_container_width=True):
        path = run(world.squad.select_background(world.frames_dir))
        if path is None:
            st.warning("No frame selected")
        else:
            st.rerun()
    st.text(f"Current frame: {current}")

with tab_canvas:
    # Every rerun is one host render pass.
    run(world.canvas.draw(world.hooks))
    for message in world.errors:
        st.error(message)
    columns = st.columns(len(world.canvas.tokens()))
    for column, token in zip(columns, world.canvas.tokens()):
        with column:
            display_token(world, token.actor_id)

with tab_state:
    st.json(
        {
            "background": world.squad.background,
            "squad": {
                token.actor_id: world.squad.is_squad(token.actor_id)
                for token in world.canvas.tokens()
            },
            "redraws": dict(world.canvas.redraws),
        },
        expanded=1,
    )
