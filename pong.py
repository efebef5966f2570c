import argparse
import logging

import numpy as np
import pygame

import pong_core
from pong_core import EventKind, GameConfig, Inputs

FONT_NAME = "arial"

TABLE = (189, 189, 189)
NET = (0, 0, 0)
BALL = (0, 0, 0)
BLUE = (25, 118, 210)
RED = (211, 47, 47)
WHITE = (255, 255, 255)
SHADOW = (85, 85, 85)
OVERLAY = (32, 32, 32, 77)

logger = logging.getLogger(__name__)


# -----------------------------
# Audio
# -----------------------------
def make_pop_sound(freq=880, duration_s=0.06, volume=0.5):
    """Short decaying sine burst, shaped to whatever format the mixer opened with."""
    sample_rate, _, channels = pygame.mixer.get_init()
    t = np.linspace(0, duration_s, int(sample_rate * duration_s), False)
    tone = np.sin(freq * t * 2 * np.pi) * np.exp(-t * 60) * volume
    audio = np.int16(tone * 32767)
    if channels > 1:
        audio = np.repeat(audio[:, None], channels, axis=1)
    return pygame.sndarray.make_sound(np.ascontiguousarray(audio))


def init_audio(mute=False):
    if mute:
        return None
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init(44100, -16, 2, 512)
        return make_pop_sound()
    except pygame.error as e:
        logger.warning("audio unavailable, playing muted: %s", e)
        return None


def play_pop(sound):
    if sound is not None:
        sound.stop()
        sound.play()


# -----------------------------
# Drawing
# -----------------------------
def draw_net(surface, cfg):
    x = int(cfg.width // 2)
    dash, gap = 12, 14
    for y in range(0, int(cfg.height), dash + gap):
        pygame.draw.line(surface, NET, (x, y), (x, y + dash), 3)


def draw_table_lines(surface, cfg):
    w, h = int(cfg.width), int(cfg.height)
    pygame.draw.line(surface, NET, (0, 4), (w, 4), 2)
    pygame.draw.line(surface, NET, (0, h - 4), (w, h - 4), 2)
    pygame.draw.line(surface, NET, (4, 0), (4, h), 2)
    pygame.draw.line(surface, NET, (w - 4, 0), (w - 4, h), 2)


def draw_paddle(surface, paddle, color):
    rect = pygame.Rect(round(paddle.x), round(paddle.y), round(paddle.width), round(paddle.height))
    pygame.draw.rect(surface, color, rect, border_radius=8)
    pygame.draw.rect(surface, WHITE, rect, width=2, border_radius=8)


def draw_ball(surface, ball):
    center = (round(ball.x), round(ball.y))
    pygame.draw.circle(surface, SHADOW, (center[0] + 1, center[1] + 2), round(ball.radius))
    pygame.draw.circle(surface, BALL, center, round(ball.radius))


def draw_paused(surface, cfg, font):
    box = pygame.Surface((240, 60), pygame.SRCALPHA)
    box.fill(OVERLAY)
    surface.blit(box, (cfg.width / 2 - 120, cfg.height / 2 - 30))
    text = font.render("Paused", True, WHITE)
    surface.blit(text, text.get_rect(center=(cfg.width / 2, cfg.height / 2)))


def draw(surface, state, font_score, font_small):
    cfg = state.config
    surface.fill(TABLE)
    draw_table_lines(surface, cfg)
    draw_net(surface, cfg)
    draw_paddle(surface, state.human, BLUE)
    draw_paddle(surface, state.computer, RED)
    draw_ball(surface, state.ball)

    match = state.match
    score_text = font_score.render(f"{match.score_human} — {match.score_computer}", True, NET)
    surface.blit(score_text, score_text.get_rect(center=(cfg.width / 2, 30)))
    info = font_small.render("Space: pause | R: reset | T: test sound", True, SHADOW)
    surface.blit(info, (20, cfg.height - 28))

    if match.paused:
        draw_paused(surface, cfg, font_small)


def update_scoreboard(match):
    pygame.display.set_caption(f"Table Tennis Pong  You {match.score_human} : {match.score_computer} Computer")


def handle_events(events, match, sound):
    for ev in events:
        if ev.kind is EventKind.POINT_SCORED:
            update_scoreboard(match)
        else:
            play_pop(sound)


# -----------------------------
# Input
# -----------------------------
def keyboard_target(keys, base_y, paddle, table_h):
    dy = 0
    if keys[pygame.K_UP]: dy -= paddle.speed
    if keys[pygame.K_DOWN]: dy += paddle.speed
    if not dy:
        return None
    return pong_core.clamp(base_y, 0, table_h - paddle.height) + dy


def game(fps=60, seed=None, mute=False, config=None):
    pygame.init()
    cfg = config or GameConfig()
    screen = pygame.display.set_mode((int(cfg.width), int(cfg.height)))
    clock = pygame.time.Clock()
    font_score = pygame.font.SysFont(FONT_NAME, 18, bold=True)
    font_small = pygame.font.SysFont(FONT_NAME, 20)
    pop = init_audio(mute)

    rng = np.random.default_rng(seed)
    state = pong_core.new_game(cfg, rng)
    update_scoreboard(state.match)
    logger.info("table %dx%d, %d fps, seed=%s", cfg.width, cfg.height, fps, seed)

    try:
        while True:
            human_y = None
            toggle = False
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        return
                    if event.key == pygame.K_SPACE:
                        toggle = not toggle
                    if event.key == pygame.K_r:
                        state = pong_core.reset_match(state, rng)
                        update_scoreboard(state.match)
                    if event.key == pygame.K_t:
                        play_pop(pop)
                if event.type == pygame.MOUSEMOTION:
                    human_y = event.pos[1] - cfg.paddle_h / 2
                if event.type == pygame.FINGERMOTION:
                    human_y = event.y * cfg.height - cfg.paddle_h / 2

            # arrows only steer a running game
            if state.match.paused == toggle:
                base_y = state.human.y if human_y is None else human_y
                keyed_y = keyboard_target(pygame.key.get_pressed(), base_y, state.human, cfg.height)
                if keyed_y is not None:
                    human_y = keyed_y

            state, events = pong_core.tick(state, Inputs(human_y=human_y, toggle_pause=toggle), rng)
            handle_events(events, state.match, pop)

            draw(screen, state, font_score, font_small)
            pygame.display.flip()
            clock.tick(fps)
    finally:
        pygame.quit()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Table tennis pong against the computer")
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mute", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    game(fps=args.fps, seed=args.seed, mute=args.mute)


if __name__ == "__main__":
    main()
