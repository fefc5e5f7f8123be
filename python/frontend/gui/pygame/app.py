"""Pygame GUI frontend, fully self-contained.

Includes a menu for grid size and level selection, the picture board,
reference-image peeking, auto-complete and level progression.  Level images
are decoded on a worker thread so the window keeps drawing while they load.
"""

from __future__ import annotations

import enum
from concurrent.futures import Future, ThreadPoolExecutor

import pygame
from loguru import logger

from backend.engine.partitioner import ImageLoadError, load_image
from backend.engine.session import PuzzleSession, SessionView

log = logger.bind(component="app")

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 500, 660
TILE_GAP = 2
MARGIN = 20
BOARD_TOP = 76
BOARD_MAX = WIN_W - 2 * MARGIN  # max board width/height in px


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    _MAX_MENU_SIZE = 6

    def __init__(self, session: PuzzleSession) -> None:
        self._session = session
        self._executor = ThreadPoolExecutor(max_workers=1)

        # Scaled tiles for the current generation, keyed by tile identity.
        self._scaled: dict[int, pygame.Surface] = {}
        self._scaled_gen = -1
        self._reference: pygame.Surface | None = None
        self._reference_job: Future[pygame.Surface] | None = None

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Picture Slide Puzzle")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.MENU
        self._status_msg: str = ""

        self._build_menu_btns()
        self._build_game_btns()

    # ── menu buttons ────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        config = self._session.config
        sizes = range(config.min_grid_size, min(config.max_grid_size, self._MAX_MENU_SIZE) + 1)
        bw, bh, gap = 76, 46, 8
        total_w = len(sizes) * bw + (len(sizes) - 1) * gap
        sx = _cx(total_w)

        self._size_btns: dict[int, _Btn] = {}
        for i, s in enumerate(sizes):
            self._size_btns[s] = _Btn(
                (sx + i * (bw + gap), 220, bw, bh),
                f"{s}×{s}",
                self._f_btn_sm,
            )

        self._prev_lvl_btn = _Btn((_cx(300), 330, 46, 40), "<", self._f_btn)
        self._next_lvl_btn = _Btn((_cx(300) + 254, 330, 46, 40), ">", self._f_btn)

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 410, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 474, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )

        self._menu_all: list[_Btn] = [
            *self._size_btns.values(),
            self._prev_lvl_btn,
            self._next_lvl_btn,
            self._play_btn,
            self._quit_btn,
        ]

    def _build_game_btns(self) -> None:
        """Build in-game action buttons (placed below the board)."""
        bw, gap = 140, 10
        sx = _cx(3 * bw + 2 * gap)
        self._reset_btn = _Btn(
            (sx, 0, bw, 36), "RESET (R)", self._f_btn_sm,
            bg=COL_PINK, hover=(245, 210, 227), fg=COL_BASE,
        )
        self._complete_btn = _Btn(
            (sx + bw + gap, 0, bw, 36), "COMPLETE (C)", self._f_btn_sm,
            bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE,
        )
        self._image_btn = _Btn(
            (sx + 2 * (bw + gap), 0, bw, 36), "SHOW IMAGE (I)", self._f_btn_sm,
        )
        self._next_btn = _Btn(
            (sx + bw + gap, 0, bw, 36), "NEXT LEVEL (N)", self._f_btn_sm,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )

    def _game_action_btns(self, view: SessionView) -> list[_Btn]:
        if view.solved:
            return [self._reset_btn, self._next_btn]
        self._image_btn.text = "HIDE IMAGE (I)" if view.show_reference else "SHOW IMAGE (I)"
        return [self._reset_btn, self._complete_btn, self._image_btn]

    # ── layout helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _tile_layout(view: SessionView) -> tuple[int, int, int, int]:
        """Return (tile_w, tile_h, origin_x, origin_y) for the current view."""
        sz = view.grid_size
        scale = min(
            (BOARD_MAX - (sz + 1) * TILE_GAP) / (view.tile_width * sz),
            (BOARD_MAX - (sz + 1) * TILE_GAP) / (view.tile_height * sz),
        )
        tw = max(1, int(view.tile_width * scale))
        th = max(1, int(view.tile_height * scale))
        total_w = sz * tw + (sz + 1) * TILE_GAP
        return tw, th, _cx(total_w) + TILE_GAP, BOARD_TOP + TILE_GAP

    @staticmethod
    def _tile_rect(r: int, c: int, tw: int, th: int, ox: int, oy: int) -> pygame.Rect:
        return pygame.Rect(
            ox + c * (tw + TILE_GAP),
            oy + r * (th + TILE_GAP),
            tw,
            th,
        )

    def _scaled_tile(self, content: pygame.Surface, tw: int, th: int) -> pygame.Surface:
        key = id(content)
        surf = self._scaled.get(key)
        if surf is None or surf.get_size() != (tw, th):
            surf = pygame.transform.smoothscale(content.convert(), (tw, th))
            self._scaled[key] = surf
        return surf

    def _sync_generation(self, view: SessionView) -> None:
        if view.generation == self._scaled_gen:
            return
        self._scaled = {}
        self._reference = None
        if self._reference_job is not None:
            self._reference_job.cancel()
            self._reference_job = None
        self._scaled_gen = view.generation

    def _reference_image(self, view: SessionView, w: int, h: int) -> pygame.Surface | None:
        """Return the scaled level picture, or None while it is still decoding."""
        if self._reference is not None:
            return self._reference
        if self._reference_job is None:
            self._reference_job = self._executor.submit(load_image, view.level_path)
        if not self._reference_job.done():
            return None
        try:
            full = self._reference_job.result()
        except ImageLoadError as exc:
            self._status_msg = str(exc)
            return None
        self._reference = pygame.transform.smoothscale(full.convert(), (w, h))
        return self._reference

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session

        _blit_center(
            self._surf,
            self._f_big.render("PICTURE  PUZZLE", True, COL_TEXT),
            80,
        )
        _blit_center(
            self._surf,
            self._f_body.render("Select grid size", True, COL_SUBTEXT),
            186,
        )

        for s, btn in self._size_btns.items():
            btn.bg = COL_GREEN if s == session.grid_size else COL_SURFACE0
            btn.fg = COL_BASE if s == session.grid_size else COL_TEXT
            btn.draw(self._surf)

        _blit_center(
            self._surf,
            self._f_body.render("Level", True, COL_SUBTEXT),
            300,
        )
        name = session.levels[session.level_index].stem
        _blit_center(
            self._surf,
            self._f_btn.render(
                f"{session.level_index + 1}/{len(session.levels)}  {name}",
                True,
                COL_TEXT,
            ),
            340,
        )
        self._prev_lvl_btn.draw(self._surf)
        self._next_lvl_btn.draw(self._surf)

        self._play_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_RED),
                540,
            )

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        view = self._session.view()
        sz = view.grid_size

        title = f"Level {view.level_index + 1}  {sz}×{sz}"
        _blit_center(
            self._surf,
            self._f_title.render(title, True, COL_GREEN if view.solved else COL_TEXT),
            14,
        )
        if view.solved:
            sub, col = "★  S O L V E D  ★", COL_GREEN
        elif view.loading:
            sub, col = "Loading…", COL_SUBTEXT
        else:
            sub, col = view.level_path.stem, COL_PINK
        _blit_center(self._surf, self._f_body.render(sub, True, col), 44)

        if not view.ready:
            _blit_center(
                self._surf,
                self._f_body.render(
                    view.last_error or "Loading…", True, COL_OVERLAY0
                ),
                BOARD_TOP + 120,
            )
            return

        self._sync_generation(view)
        tw, th, ox, oy = self._tile_layout(view)
        total_w = sz * tw + (sz + 1) * TILE_GAP
        total_h = sz * th + (sz + 1) * TILE_GAP

        # board bg
        pygame.draw.rect(
            self._surf,
            COL_MANTLE,
            pygame.Rect(ox - TILE_GAP, BOARD_TOP, total_w, total_h),
            border_radius=6,
        )

        reference = None
        if view.show_reference and not view.solved:
            reference = self._reference_image(view, total_w, total_h)

        if reference is not None:
            self._surf.blit(reference, (ox - TILE_GAP, BOARD_TOP))
        else:
            for r, row in enumerate(view.slots):
                for c, tile in enumerate(row):
                    rect = self._tile_rect(r, c, tw, th, ox, oy)
                    if tile is None:
                        if view.revealed_piece is not None:
                            self._surf.blit(
                                self._scaled_tile(view.revealed_piece, tw, th),
                                rect.topleft,
                            )
                        continue
                    self._surf.blit(self._scaled_tile(tile.content, tw, th), rect.topleft)

        # action buttons row
        btn_y = BOARD_TOP + total_h + 12
        for btn in self._game_action_btns(view):
            btn.rect.y = btn_y
            btn.draw(self._surf)

        # status message
        message = self._status_msg or view.last_error or ""
        if message:
            _blit_center(
                self._surf,
                self._f_small.render(message, True, COL_YELLOW),
                btn_y + 44,
            )
            footer_y = btn_y + 64
        else:
            footer_y = btn_y + 44

        _blit_center(
            self._surf,
            self._f_small.render(
                "Click a tile next to the gap     M  menu     Esc  quit",
                True,
                COL_OVERLAY0,
            ),
            footer_y,
        )

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        session = self._session
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for s, b in self._size_btns.items():
                if b.hit(ev.pos):
                    session.set_grid_size(s)
                    return True
            if self._prev_lvl_btn.hit(ev.pos):
                session.select_level((session.level_index - 1) % len(session.levels))
            elif self._next_lvl_btn.hit(ev.pos):
                session.next_level()
            elif self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        view = self._session.view()
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_action_btns(view):
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            # Check action buttons first
            for btn in self._game_action_btns(view):
                if btn.hit(ev.pos):
                    self._do_action(btn)
                    return True
            # Then check tiles
            if view.ready and not view.show_reference:
                tw, th, ox, oy = self._tile_layout(view)
                for r in range(view.grid_size):
                    for c in range(view.grid_size):
                        if self._tile_rect(r, c, tw, th, ox, oy).collidepoint(ev.pos):
                            self._session.request_move(r, c)
                            self._status_msg = ""
                            return True
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_r:
                self._do_action(self._reset_btn)
            elif ev.key == pygame.K_c and not view.solved:
                self._do_action(self._complete_btn)
            elif ev.key == pygame.K_i and not view.solved:
                self._do_action(self._image_btn)
            elif ev.key == pygame.K_n and view.solved:
                self._do_action(self._next_btn)
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._screen = _Screen.MENU
        return True

    # ── actions ─────────────────────────────────────────────────────────────

    def _do_action(self, btn: _Btn) -> None:
        session = self._session
        self._status_msg = ""
        if btn is self._reset_btn:
            session.submit(self._executor)
        elif btn is self._next_btn:
            session.next_level()
            session.submit(self._executor)
        elif btn is self._image_btn:
            session.toggle_reference()
        elif btn is self._complete_btn:
            if not session.ready:
                return
            try:
                session.auto_complete()
            except ImageLoadError as exc:
                self._status_msg = str(exc)

    def _start_game(self) -> None:
        self._status_msg = ""
        self._session.submit(self._executor)
        self._screen = _Screen.PLAYING

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            self._session.poll()

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(30)

        self._executor.shutdown(wait=False, cancel_futures=True)
        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(session: PuzzleSession) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    log.debug("starting pygame frontend with {} levels", len(session.levels))
    app = PygameApp(session)
    app.run_loop()
