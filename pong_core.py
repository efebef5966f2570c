"""
Simulation core for the table tennis pong game.

Everything that moves lives in a ``GameState`` owned by the driver (the pygame
loop in ``pong.py`` or the streamlit page in ``dashboard.py``). Drivers call
``tick`` once per frame with an ``Inputs`` snapshot and get back the next state
plus the events (bounces, points) their audio/scoreboard code reacts to.

    rng = np.random.default_rng(7)
    state = new_game(rng=rng)
    state, events = tick(state, Inputs(human_y=120), rng)
"""
import copy
import logging
import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# -----------------------------
# Config dataclass
# -----------------------------
@dataclass(frozen=True)
class GameConfig:
    width: float = 800
    height: float = 500

    paddle_w: float = 12
    paddle_h: float = 90
    paddle_offset: float = 30
    human_speed: float = 7         # keyboard step per tick
    computer_speed: float = 5.0    # AI max step per tick
    dead_zone: float = 2

    ball_radius: float = 9
    ball_speed: float = 5.3        # serve speed, units/tick
    serve_angle_deg: float = 30
    max_bounce_deg: float = 75
    speedup: float = 1.05
    speed_cap: float = 16
    min_vx: float = 1.2

    def __post_init__(self):
        if self.paddle_h > self.height:
            raise ValueError(f"paddle_h={self.paddle_h} does not fit a table of height {self.height}")
        if 2 * self.ball_radius >= self.height:
            raise ValueError(f"ball_radius={self.ball_radius} does not fit a table of height {self.height}")
        if 2 * (self.paddle_offset + self.paddle_w) >= self.width:
            raise ValueError(f"paddles overlap on a table of width {self.width}")


# -----------------------------
# Geometry
# -----------------------------
def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def circle_rect_collision(cx, cy, radius, rect):
    """True if the circle touches or overlaps ``rect`` given as (x, y, w, h)."""
    x, y, w, h = rect
    nearest_x = clamp(cx, x, x + w)
    nearest_y = clamp(cy, y, y + h)
    dx = cx - nearest_x
    dy = cy - nearest_y
    return dx * dx + dy * dy <= radius * radius


# -----------------------------
# Entities
# -----------------------------
class Side(Enum):
    HUMAN = "human"
    COMPUTER = "computer"
    RANDOM = "random"


@dataclass
class Paddle:
    x: float
    y: float
    width: float
    height: float
    speed: float

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def move_to(self, y: float, table_h: float):
        self.y = clamp(y, 0, table_h - self.height)


@dataclass
class Ball:
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    speed: float


@dataclass
class Match:
    score_human: int = 0
    score_computer: int = 0
    paused: bool = False
    # side the next serve launches away from; the point winner
    serving_side: Side = Side.RANDOM

    @property
    def serve_direction(self) -> Optional[bool]:
        """True serves rightward, None leaves it to the RNG."""
        if self.serving_side is Side.RANDOM:
            return None
        return self.serving_side is Side.HUMAN


class EventKind(Enum):
    WALL_BOUNCE = "wall_bounce"
    PADDLE_BOUNCE = "paddle_bounce"
    POINT_SCORED = "point_scored"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    side: Optional[Side] = None     # paddle hit, or the point winner
    score_human: int = 0
    score_computer: int = 0


@dataclass(frozen=True)
class Inputs:
    """Intents captured once per frame by the input collaborator."""
    human_y: Optional[float] = None
    toggle_pause: bool = False


@dataclass
class GameState:
    config: GameConfig
    human: Paddle
    computer: Paddle
    ball: Ball
    match: Match = field(default_factory=Match)

    def copy(self) -> "GameState":
        return copy.deepcopy(self)


# -----------------------------
# Ball motion
# -----------------------------
def serve(config: GameConfig, rng: np.random.Generator, direction_right: Optional[bool] = None) -> Ball:
    if direction_right is None:
        direction_right = rng.random() < 0.5
    angle = math.radians(rng.uniform(-config.serve_angle_deg, config.serve_angle_deg))
    sign = 1 if direction_right else -1
    speed = config.ball_speed
    logger.debug("serve %s at %.1f deg", "right" if direction_right else "left", math.degrees(angle))
    return Ball(
        x=config.width / 2,
        y=config.height / 2,
        vx=sign * speed * math.cos(angle),
        vy=speed * math.sin(angle),
        radius=config.ball_radius,
        speed=speed,
    )


def integrate(ball: Ball):
    ball.x += ball.vx
    ball.y += ball.vy


# -----------------------------
# Computer paddle policy
# -----------------------------
def track_ball(paddle: Paddle, ball: Ball, config: GameConfig):
    # bang-bang: full step or nothing, never scaled by frame time
    target_y = ball.y - paddle.height / 2
    if abs(target_y - paddle.y) > config.dead_zone:
        step = paddle.speed if target_y > paddle.y else -paddle.speed
        paddle.move_to(paddle.y + step, config.height)


# -----------------------------
# Collisions
# -----------------------------
def bounce_off_walls(ball: Ball, config: GameConfig) -> bool:
    if ball.y - ball.radius <= 0:
        ball.y = ball.radius
    elif ball.y + ball.radius >= config.height:
        ball.y = config.height - ball.radius
    else:
        return False
    ball.vy = -ball.vy
    return True


def paddle_hit(ball: Ball, paddle: Paddle) -> bool:
    return circle_rect_collision(ball.x, ball.y, ball.radius, paddle.rect)


def reflect_off_paddle(ball: Ball, paddle: Paddle, config: GameConfig) -> float:
    """
    Send the ball back at an angle set by where it met the paddle and speed it
    up. Returns the bounce angle in radians (0 for a centre hit).

    The new horizontal direction depends on which half of the table the ball is
    in, not on which paddle was hit; the incoming-velocity gate in
    ``collide_paddles`` is what keeps that consistent.
    """
    half_h = paddle.height / 2
    normalized = (ball.y - paddle.center_y) / half_h
    bounce_angle = normalized * math.radians(config.max_bounce_deg)

    ball.speed = min(ball.speed * config.speedup, config.speed_cap)

    direction = 1 if ball.x < config.width / 2 else -1
    ball.vx = direction * ball.speed * math.cos(bounce_angle)
    ball.vy = ball.speed * math.sin(bounce_angle)

    # near-vertical returns would rattle between the walls forever
    if abs(ball.vx) < config.min_vx:
        ball.vx = direction * config.min_vx
    return bounce_angle


def collide_paddles(state: GameState) -> List[Event]:
    ball, human, computer = state.ball, state.human, state.computer
    events = []
    if ball.vx < 0 and paddle_hit(ball, human):
        ball.x = human.x + human.width + ball.radius
        reflect_off_paddle(ball, human, state.config)
        events.append(Event(EventKind.PADDLE_BOUNCE, side=Side.HUMAN))
    if ball.vx > 0 and paddle_hit(ball, computer):
        ball.x = computer.x - ball.radius
        reflect_off_paddle(ball, computer, state.config)
        events.append(Event(EventKind.PADDLE_BOUNCE, side=Side.COMPUTER))
    return events


# -----------------------------
# Match
# -----------------------------
def award_point(state: GameState, winner: Side, rng: np.random.Generator) -> Event:
    match = state.match
    if winner is Side.HUMAN:
        match.score_human += 1
    else:
        match.score_computer += 1
    logger.info("point to %s (%d-%d)", winner.value, match.score_human, match.score_computer)

    match.serving_side = winner
    state.ball = serve(state.config, rng, direction_right=match.serve_direction)
    match.paused = False
    return Event(EventKind.POINT_SCORED, side=winner,
                 score_human=match.score_human, score_computer=match.score_computer)


def check_score(state: GameState, rng: np.random.Generator) -> Optional[Event]:
    ball = state.ball
    if ball.x + ball.radius < 0:
        return award_point(state, Side.COMPUTER, rng)
    if ball.x - ball.radius > state.config.width:
        return award_point(state, Side.HUMAN, rng)
    return None


def new_game(config: Optional[GameConfig] = None, rng: Optional[np.random.Generator] = None) -> GameState:
    config = config or GameConfig()
    rng = rng if rng is not None else np.random.default_rng()
    paddle_y = (config.height - config.paddle_h) / 2
    human = Paddle(config.paddle_offset, paddle_y, config.paddle_w, config.paddle_h, config.human_speed)
    computer = Paddle(config.width - config.paddle_offset - config.paddle_w, paddle_y,
                      config.paddle_w, config.paddle_h, config.computer_speed)
    return GameState(config, human, computer, serve(config, rng))


# -----------------------------
# External intents
# -----------------------------
def set_human_paddle_y(state: GameState, y: float) -> GameState:
    state = state.copy()
    state.human.move_to(y, state.config.height)
    return state


def set_paused(state: GameState, paused: bool) -> GameState:
    state = state.copy()
    state.match.paused = bool(paused)
    return state


def toggle_pause(state: GameState) -> GameState:
    return set_paused(state, not state.match.paused)


def reset_match(state: GameState, rng: np.random.Generator) -> GameState:
    state = state.copy()
    state.match = Match()
    state.ball = serve(state.config, rng, direction_right=state.match.serve_direction)
    logger.info("match reset")
    return state


def snapshot(state: GameState) -> dict:
    """Plain-data view for renderers and scoreboards."""
    match = state.match
    return {
        'ball': asdict(state.ball),
        'human': asdict(state.human),
        'computer': asdict(state.computer),
        'match': {
            'score_human': match.score_human,
            'score_computer': match.score_computer,
            'paused': match.paused,
            'serving_side': match.serving_side.value,
        },
    }


# -----------------------------
# Simulation step
# -----------------------------
def tick(state: GameState, inputs: Optional[Inputs], rng: np.random.Generator) -> Tuple[GameState, List[Event]]:
    """
    Advance one frame. ``state`` is left untouched; ``rng`` is only drawn from
    when a point triggers a new serve.
    """
    inputs = inputs or Inputs()
    state = state.copy()
    cfg = state.config
    events: List[Event] = []

    # pointer writes land even while paused
    if inputs.human_y is not None:
        state.human.move_to(inputs.human_y, cfg.height)
    if inputs.toggle_pause:
        state.match.paused = not state.match.paused
    if state.match.paused:
        return state, events

    track_ball(state.computer, state.ball, cfg)
    integrate(state.ball)

    if bounce_off_walls(state.ball, cfg):
        events.append(Event(EventKind.WALL_BOUNCE))
    events.extend(collide_paddles(state))

    scored = check_score(state, rng)
    if scored is not None:
        events.append(scored)
    return state, events
