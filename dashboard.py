# dashboard.py
# streamlit run dashboard.py
import logging

import numpy as np
import streamlit as st
import matplotlib.pyplot as plt

import pong_core
from pong_core import EventKind, Inputs

logger = logging.getLogger(__name__)

# -----------------------------
# Frame rendering (no pygame)
# -----------------------------
def render_rgb(state, scale=1):
    # Return an RGB image of the table
    cfg = state.config
    W, H = int(cfg.width), int(cfg.height)
    img = np.zeros((H, W, 3), dtype=np.uint8)
    img[:] = (189, 189, 189)  # grey table
    img[3:5, :] = 0; img[H-5:H-3, :] = 0; img[:, 3:5] = 0; img[:, W-5:W-3] = 0
    for y in range(0, H, 26):  # dashed net
        img[y:y+12, W//2-1:W//2+2] = 0
    for paddle, color in ((state.human, (25, 118, 210)), (state.computer, (211, 47, 47))):
        x0, y0 = int(paddle.x), int(paddle.y)
        img[y0:y0+int(paddle.height), x0:x0+int(paddle.width)] = color
    # ball
    ball = state.ball
    ys, xs = np.ogrid[:H, :W]
    img[(xs - ball.x) ** 2 + (ys - ball.y) ** 2 <= ball.radius ** 2] = 0
    if scale != 1:
        img = np.repeat(np.repeat(img, scale, axis=0), scale, axis=1)
    return img

# -----------------------------
# Stand-in for the pointer
# -----------------------------
def autopilot_y(state, rng):
    # simple tracker with noise
    paddle, ball = state.human, state.ball
    y = paddle.y
    if paddle.center_y < ball.y - 4:
        y += paddle.speed * 0.9
    elif paddle.center_y > ball.y + 4:
        y -= paddle.speed * 0.9
    return y + rng.uniform(-0.5, 0.5)

# -----------------------------
# Streamlit App
# -----------------------------
st.set_page_config(layout="wide", page_title="Table Tennis Pong")
st.title("Table Tennis Pong — Live Table")

# Session boot
if "rng" not in st.session_state:
    st.session_state.rng = np.random.default_rng()
    st.session_state.noise_rng = np.random.default_rng()
if "state" not in st.session_state:
    st.session_state.state = pong_core.new_game(rng=st.session_state.rng)
if "speeds" not in st.session_state:
    st.session_state.speeds = []
    st.session_state.bounces = 0

# Sidebar controls
st.sidebar.header("Controls")
col1, col2 = st.sidebar.columns(2)
reset = col1.button("⟲ Reset")
pause = col2.button("⏸ Pause/Resume")
steps = st.sidebar.slider("Ticks per refresh", 1, 60, 10, 1)

rng = st.session_state.rng
if reset:
    st.session_state.state = pong_core.reset_match(st.session_state.state, rng)
    st.session_state.speeds = []
    st.session_state.bounces = 0
if pause:
    st.session_state.state = pong_core.toggle_pause(st.session_state.state)

state = st.session_state.state
for _ in range(steps):
    if state.match.paused:
        break
    human_y = autopilot_y(state, st.session_state.noise_rng)
    state, events = pong_core.tick(state, Inputs(human_y=human_y), rng)
    st.session_state.speeds.append(state.ball.speed)
    del st.session_state.speeds[:-2000]
    for ev in events:
        if ev.kind is EventKind.POINT_SCORED:
            logger.info("scoreboard %d-%d", ev.score_human, ev.score_computer)
        else:
            st.session_state.bounces += 1
st.session_state.state = state

left, right = st.columns([2, 1])

with left:
    st.subheader("Table")
    caption = "Paused" if state.match.paused else "blue = you (autopilot), red = computer"
    st.image(render_rgb(state), channels="RGB", caption=caption)

with right:
    st.subheader("Scoreboard")
    m1, m2 = st.columns(2)
    m1.metric("You", f"{state.match.score_human}")
    m2.metric("Computer", f"{state.match.score_computer}")
    st.metric("Bounces", f"{st.session_state.bounces}")

    st.caption("Ball speed (units/tick)")
    fig, ax = plt.subplots()
    ax.plot(st.session_state.speeds)
    ax.set_xlabel("Tick"); ax.set_ylabel("Speed")
    st.pyplot(fig, clear_figure=True)

    with st.expander("Snapshot"):
        st.json(pong_core.snapshot(state))

st.caption("Each refresh advances the table. Use ⏸ to pause/resume and ⟲ to zero the scores.")
