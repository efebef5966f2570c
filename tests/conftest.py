"""Shared pytest fixtures for the pong core tests."""

import numpy as np
import pytest

import pong_core
from pong_core import Ball, GameConfig


@pytest.fixture
def cfg() -> GameConfig:
    """Default 800x500 table."""
    return GameConfig()


@pytest.fixture
def rng():
    """Seeded generator so serves are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def state(cfg, rng):
    """Fresh game with both paddles centred (y=205)."""
    return pong_core.new_game(cfg, rng)


@pytest.fixture
def make_ball(cfg):
    """Build a ball at a chosen spot with a chosen velocity."""
    def _make(x, y, vx=0.0, vy=0.0, speed=None):
        if speed is None:
            speed = float(np.hypot(vx, vy))
        return Ball(x=x, y=y, vx=vx, vy=vy, radius=cfg.ball_radius, speed=speed)
    return _make
