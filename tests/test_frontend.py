"""Tests for the pygame driver's input, audio and scoreboard helpers."""

import pygame
import pytest

from pong import handle_events, init_audio, keyboard_target, play_pop
from pong_core import Event, EventKind, Match, Side


def keys(up=False, down=False):
    return {pygame.K_UP: up, pygame.K_DOWN: down}


class StubSound:
    def __init__(self):
        self.plays = 0
        self.stops = 0

    def play(self):
        self.plays += 1

    def stop(self):
        self.stops += 1


class TestKeyboardTarget:

    def test_no_arrows_no_intent(self, state, cfg):
        assert keyboard_target(keys(), 205, state.human, cfg.height) is None

    def test_up_moves_by_paddle_speed(self, state, cfg):
        assert keyboard_target(keys(up=True), 205, state.human, cfg.height) == 205 - cfg.human_speed

    def test_both_arrows_cancel(self, state, cfg):
        assert keyboard_target(keys(up=True, down=True), 205, state.human, cfg.height) is None

    def test_pointer_base_is_clamped_first(self, state, cfg):
        """Pointer far below the table, then one step up."""
        target = keyboard_target(keys(up=True), 900, state.human, cfg.height)
        assert target == cfg.height - cfg.paddle_h - cfg.human_speed


class TestAudio:

    @pytest.fixture
    def broken_mixer(self, monkeypatch):
        def fail(*args, **kwargs):
            raise pygame.error("no audio device")
        monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
        monkeypatch.setattr(pygame.mixer, "init", fail)

    def test_mixer_failure_runs_muted(self, broken_mixer):
        assert init_audio() is None

    def test_muted_never_touches_mixer(self, broken_mixer):
        assert init_audio(mute=True) is None

    def test_play_without_sound_is_silent(self):
        play_pop(None)

    def test_play_restarts_sound(self):
        sound = StubSound()
        play_pop(sound)
        assert (sound.stops, sound.plays) == (1, 1)


class TestHandleEvents:

    @pytest.fixture
    def captions(self, monkeypatch):
        seen = []
        monkeypatch.setattr(pygame.display, "set_caption", seen.append)
        return seen

    def test_bounces_pop(self, captions):
        sound = StubSound()
        events = [Event(EventKind.WALL_BOUNCE), Event(EventKind.PADDLE_BOUNCE, side=Side.HUMAN)]
        handle_events(events, Match(), sound)
        assert sound.plays == 2
        assert captions == []

    def test_point_refreshes_scoreboard(self, captions):
        sound = StubSound()
        match = Match(score_human=2, score_computer=5)
        handle_events([Event(EventKind.POINT_SCORED, side=Side.COMPUTER,
                             score_human=2, score_computer=5)], match, sound)
        assert sound.plays == 0
        assert len(captions) == 1
        assert "2 : 5" in captions[0]

    def test_quiet_frame(self, captions):
        sound = StubSound()
        handle_events([], Match(), sound)
        assert sound.plays == 0
        assert captions == []
