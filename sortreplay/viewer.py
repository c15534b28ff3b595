"""
pygame front end: draws a SortingVisualizer as bars and maps keys to actions.

    SPACE  sort / stop
    N      new array
    UP     slower (longer delay per step)
    DOWN   faster
    ESC    quit
"""
import logging

import pygame

from .playback import ManualClock
from .settings import (
    ACTIVE_COLOR, BACKGROUND_COLOR, BAR_SPACING, FPS, SPEED_STEP_MS,
    UI_ACCENT, UI_SUBTEXT, UI_TEXT, WINDOW_HEIGHT, WINDOW_WIDTH,
)
from .visualizer import SortingVisualizer

logger = logging.getLogger(__name__)

HUD_HEIGHT = 60


class FrameClock(ManualClock):
    """
    A ManualClock that follows ``pygame.time.get_ticks()``.

    ``pump()`` is called once per frame and fires every callback that fell
    due since the previous frame, in order.
    """

    def __init__(self):
        super().__init__(start=pygame.time.get_ticks())

    def pump(self) -> int:
        return self.advance(max(0, pygame.time.get_ticks() - self.now))


# ============================================================
# ======================= COLOR / DRAW =======================
# ============================================================

def value_to_color(value, lo, hi):
    r = (value - lo) / (hi - lo) if hi > lo else 1.0
    r = min(1.0, max(0.0, r))
    if r < 0.25: return (0, int(255 * r * 4), 255)
    if r < 0.5:  return (0, 255, int(255 * (1 - (r - 0.25) * 4)))
    if r < 0.75: return (int(255 * (r - 0.5) * 4), 255, 0)
    return (255, int(255 * (1 - (r - 0.75) * 4)), 0)


def draw_bars(screen, vis: SortingVisualizer):
    screen.fill(BACKGROUND_COLOR)
    n = len(vis.array)
    if n:
        bw = WINDOW_WIDTH / n
        top = max(vis.max_value, 1)
        for i, v in enumerate(vis.array):
            h = (v / top) * (WINDOW_HEIGHT - HUD_HEIGHT)
            c = ACTIVE_COLOR if i in vis.highlighted else value_to_color(v, vis.min_value, vis.max_value)
            pygame.draw.rect(screen, c, (i * bw, WINDOW_HEIGHT - h, max(bw - BAR_SPACING, 1), h))


def draw_hud(screen, fonts, vis: SortingVisualizer):
    info = vis.info
    title = info.name + ("  [SORTING]" if vis.is_sorting else "")
    screen.blit(fonts['mid'].render(title, True, UI_ACCENT if vis.is_sorting else UI_TEXT), (12, 8))

    progress = vis.session.progress if vis.session is not None else 0.0
    stats = (f"Comparisons: {vis.counters.comparisons}   "
             f"Swaps/Writes: {vis.counters.swaps}   "
             f"Speed: {vis.speed_ms:g}ms   "
             f"Progress: {progress:.0%}   "
             f"Time: {info.time_complexity}   Space: {info.space_complexity}")
    screen.blit(fonts['small'].render(stats, True, UI_SUBTEXT), (12, 32))

    keys = "SPACE sort/stop   N new array   UP/DOWN speed   ESC quit"
    hint = fonts['small'].render(keys, True, UI_SUBTEXT)
    screen.blit(hint, (WINDOW_WIDTH - hint.get_width() - 12, 8))


def build_fonts():
    def tf(names, sz):
        for n in names:
            try: return pygame.font.SysFont(n, sz)
            except Exception: pass
        return pygame.font.SysFont(None, sz)
    sans = ["Segoe UI", "Tahoma", "Arial"]
    return dict(mid=tf(sans, 17), small=tf(sans, 13))


# ============================================================
# ========================= MAIN LOOP ========================
# ============================================================

def handle_key(vis: SortingVisualizer, key) -> bool:
    """Apply one key press. Returns False when the viewer should close."""
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_SPACE:
        vis.toggle()
    elif key == pygame.K_n:
        vis.new_array()
    elif key == pygame.K_UP:
        vis.set_speed(vis.speed_ms + SPEED_STEP_MS)
    elif key == pygame.K_DOWN:
        vis.set_speed(vis.speed_ms - SPEED_STEP_MS)
    return True


def run(vis: SortingVisualizer, clock: FrameClock, screen) -> None:
    fonts = build_fonts()
    frame = pygame.time.Clock()
    while True:
        frame.tick(FPS)
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                vis.stop(); return
            if ev.type == pygame.KEYDOWN and not handle_key(vis, ev.key):
                vis.stop(); return
        clock.pump()
        draw_bars(screen, vis)
        draw_hud(screen, fonts, vis)
        pygame.display.flip()


def open_window():
    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("sortreplay")
    logger.info("Opened %dx%d window", WINDOW_WIDTH, WINDOW_HEIGHT)
    return screen
