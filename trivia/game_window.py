"""
Pygame window for the trivia game.

The window only draws GameSession.render_state() and forwards button clicks,
typed text and the one-second tick into the session.
"""
import logging
import textwrap
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple

import pygame

from .errors import DecodeError, FetchError, GameSessionError
from .game_session import GameSession
from .models import Outcome, RenderState, SessionState

logger = logging.getLogger(__name__)

TITLE = "Trivia, YAY!"
TICK_EVENT = pygame.USEREVENT + 1
TICK_INTERVAL_MS = 1000

# Colours
COL_BG = (236, 236, 236)
COL_WHITE = (255, 255, 255)
COL_BLACK = (0, 0, 0)
COL_TEXT = (30, 30, 30)
COL_MUTED = (140, 140, 140)
COL_GREEN = (0, 200, 0)
COL_RED = (220, 0, 0)
COL_BORDER = (160, 160, 160)
COL_BUTTON = (210, 210, 220)
COL_BUTTON_HOT = (190, 200, 235)

# Layout
WIN_W, WIN_H = 560, 470
LABEL_X = 20
FIELD_X = 150
FIELD_W = WIN_W - FIELD_X - 20
ROW_H = 34


class _Btn:
    """Simple clickable button that can be disabled."""

    def __init__(self, rect: Tuple[int, int, int, int], text: str, font: pygame.font.Font):
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.enabled = True
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        bg = COL_BUTTON_HOT if (self._hot and self.enabled) else COL_BUTTON
        pygame.draw.rect(surf, bg, self.rect, border_radius=6)
        pygame.draw.rect(surf, COL_BORDER, self.rect, width=1, border_radius=6)
        lbl = self.font.render(self.text, True, COL_TEXT if self.enabled else COL_MUTED)
        surf.blit(lbl, (self.rect.centerx - lbl.get_width() // 2,
                        self.rect.centery - lbl.get_height() // 2))

    def motion(self, pos: Tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: Tuple[int, int]) -> bool:
        return self.enabled and self.rect.collidepoint(pos)


class _TextInput:
    """Single-line text box fed by TEXTINPUT events."""

    def __init__(self, rect: Tuple[int, int, int, int], font: pygame.font.Font, max_length: int = 120):
        self.rect = pygame.Rect(rect)
        self.font = font
        self.max_length = max_length
        self.text = ""
        self.enabled = False

    def clear(self) -> None:
        self.text = ""

    def handle(self, ev: pygame.event.Event) -> bool:
        """Apply an editing event. Returns True when Enter was pressed."""
        if not self.enabled:
            return False
        if ev.type == pygame.TEXTINPUT:
            self.text = (self.text + ev.text)[:self.max_length]
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_BACKSPACE:
                self.text = self.text[:-1]
            elif ev.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                return True
        return False

    def draw(self, surf: pygame.Surface) -> None:
        pygame.draw.rect(surf, COL_WHITE, self.rect)
        pygame.draw.rect(surf, COL_BORDER if self.enabled else COL_MUTED, self.rect, width=1)
        shown = self.text + ("|" if self.enabled else "")
        lbl = self.font.render(shown, True, COL_TEXT)
        # Keep the caret visible for long answers
        offset = max(0, lbl.get_width() - (self.rect.width - 10))
        surf.set_clip(self.rect.inflate(-4, -4))
        surf.blit(lbl, (self.rect.x + 5 - offset, self.rect.centery - lbl.get_height() // 2))
        surf.set_clip(None)


class GameWindow:
    """Desktop window presenting one GameSession."""

    def __init__(self, session: GameSession):
        self.session = session
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="clue-fetch")
        self._pending: Optional[Future] = None
        self._timer_armed = False
        self._notice = ""

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption(TITLE)
        self._clock = pygame.time.Clock()

        self._f_body = pygame.font.Font(None, 24)
        self._f_label = pygame.font.Font(None, 22)
        self._f_btn = pygame.font.Font(None, 24)

        self._build_widgets()
        self._apply(self.session.render_state())

    def _build_widgets(self) -> None:
        bw, bh, gap = 110, 38, 16
        sx = (WIN_W - (3 * bw + 2 * gap)) // 2
        by = WIN_H - bh - 20
        self._start_btn = _Btn((sx, by, bw, bh), "Start", self._f_btn)
        self._next_btn = _Btn((sx + bw + gap, by, bw, bh), "Next", self._f_btn)
        self._submit_btn = _Btn((sx + 2 * (bw + gap), by, bw, bh), "Submit", self._f_btn)
        self._buttons = [self._start_btn, self._next_btn, self._submit_btn]

        self._question_rect = pygame.Rect(FIELD_X, 20 + 3 * ROW_H, FIELD_W, 130)
        self._answer_box = _TextInput(
            (FIELD_X, self._question_rect.bottom + 14, FIELD_W, 30), self._f_body
        )

    # ── intents ─────────────────────────────────────────────────────────────

    def start_clicked(self) -> None:
        """Fetch clues on the worker thread; begin() runs once they arrive."""
        if self._pending is not None:
            logger.warning("Start ignored: a clue fetch is already in flight")
            return
        if not self.session.render_state().can_start:
            return
        self._notice = "Loading clues…"
        self._answer_box.clear()
        self._pending = self._executor.submit(self.session.fetcher.fetch)
        self._apply(self.session.render_state())

    def poll_fetch(self) -> None:
        """Hand a completed fetch back to the session on the UI thread."""
        if self._pending is None or not self._pending.done():
            return
        future, self._pending = self._pending, None
        self._notice = ""
        try:
            batch = future.result()
        except FetchError as e:
            self.session.fetch_failed(e)
        except Exception as e:
            logger.exception("Unexpected error while fetching clues")
            self.session.fetch_failed(DecodeError(f"Could not load clues: {e}"))
        else:
            try:
                self.session.begin(batch)
            except ValueError as e:
                self.session.fetch_failed(DecodeError(str(e)))
        self._apply(self.session.render_state(), restart_timer=True)

    def next_clicked(self) -> None:
        self._answer_box.clear()
        self._notice = ""
        try:
            self.session.advance()
        except GameSessionError as e:
            self._notice = str(e)
        self._apply(self.session.render_state(), restart_timer=True)

    def submit_clicked(self) -> None:
        self._notice = ""
        try:
            self.session.submit(self._answer_box.text)
        except GameSessionError as e:
            self._notice = str(e)
        self._apply(self.session.render_state())

    def tick(self) -> None:
        if self.session.state not in (SessionState.AWAITING_ANSWER, SessionState.RESOLVED):
            return
        self.session.tick()
        self._apply(self.session.render_state())

    # ── state sync ──────────────────────────────────────────────────────────

    def _apply(self, rs: RenderState, restart_timer: bool = False) -> None:
        loading = self._pending is not None
        self._start_btn.enabled = rs.can_start and not loading
        self._next_btn.enabled = rs.can_advance
        self._submit_btn.enabled = rs.can_submit
        self._answer_box.enabled = rs.can_submit
        self._sync_timer(rs.state == SessionState.AWAITING_ANSWER, restart_timer)

    def _sync_timer(self, should_run: bool, restart: bool) -> None:
        if should_run and (restart or not self._timer_armed):
            pygame.time.set_timer(TICK_EVENT, TICK_INTERVAL_MS)
            self._timer_armed = True
        elif not should_run and self._timer_armed:
            pygame.time.set_timer(TICK_EVENT, 0)
            self._timer_armed = False

    @property
    def timer_armed(self) -> bool:
        return self._timer_armed

    @property
    def notice(self) -> str:
        return self._notice

    # ── events ──────────────────────────────────────────────────────────────

    def handle_event(self, ev: pygame.event.Event) -> bool:
        """Dispatch one event. Returns False when the window should close."""
        if ev.type == pygame.QUIT:
            return False
        if ev.type == TICK_EVENT:
            self.tick()
        elif ev.type == pygame.MOUSEMOTION:
            for btn in self._buttons:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._start_btn.hit(ev.pos):
                self.start_clicked()
            elif self._next_btn.hit(ev.pos):
                self.next_clicked()
            elif self._submit_btn.hit(ev.pos):
                self.submit_clicked()
        elif ev.type in (pygame.TEXTINPUT, pygame.KEYDOWN):
            if self._answer_box.handle(ev):
                self.submit_clicked()
        return True

    # ── drawing ─────────────────────────────────────────────────────────────

    def _feedback(self, rs: RenderState) -> Tuple[str, Tuple[int, int, int]]:
        if rs.feedback == Outcome.CORRECT:
            return "CORRECT!", COL_GREEN
        if rs.feedback == Outcome.WRONG:
            return "WRONG!", COL_RED
        if rs.feedback == Outcome.TIMEOUT:
            return f"TIME'S UP! It was: {rs.revealed_answer}", COL_RED
        return "", COL_WHITE

    def _wrap(self, text: str, width_chars: int = 52) -> List[str]:
        lines: List[str] = []
        for paragraph in text.splitlines():
            lines.extend(textwrap.wrap(paragraph, width_chars) or [""])
        return lines

    def _field(self, row: int, label: str, value: str,
               fg: Tuple[int, int, int] = COL_TEXT, bg: Tuple[int, int, int] = COL_WHITE) -> None:
        y = 20 + row * ROW_H
        self._surf.blit(self._f_label.render(label, True, COL_TEXT), (LABEL_X, y + 6))
        rect = pygame.Rect(FIELD_X, y, FIELD_W, ROW_H - 6)
        pygame.draw.rect(self._surf, bg, rect)
        pygame.draw.rect(self._surf, COL_BORDER, rect, width=1)
        self._surf.blit(self._f_body.render(value, True, fg), (rect.x + 5, rect.y + 6))

    def draw(self) -> None:
        rs = self.session.render_state()
        self._surf.fill(COL_BG)

        score = f"{rs.score}"
        if rs.total_questions:
            score += f"   (question {rs.question_number} of {rs.total_questions})"
        self._field(0, "Scoreboard:", score)

        timer_text = str(rs.seconds_left) if rs.question_number and not rs.is_finished else ""
        self._field(1, "Timer:", timer_text,
                    fg=COL_RED if rs.is_urgent else COL_GREEN, bg=COL_BLACK)

        feedback, feedback_bg = self._feedback(rs)
        self._field(2, "You answered:", feedback, bg=feedback_bg)

        self._surf.blit(self._f_label.render("Question:", True, COL_TEXT),
                        (LABEL_X, self._question_rect.y + 6))
        pygame.draw.rect(self._surf, COL_WHITE, self._question_rect)
        pygame.draw.rect(self._surf, COL_BORDER, self._question_rect, width=1)
        body = rs.summary if rs.is_finished else rs.question_text
        y = self._question_rect.y + 6
        for line in self._wrap(body):
            if y > self._question_rect.bottom - 20:
                break
            self._surf.blit(self._f_body.render(line, True, COL_TEXT), (self._question_rect.x + 6, y))
            y += 20

        self._surf.blit(self._f_label.render("Answer:", True, COL_TEXT),
                        (LABEL_X, self._answer_box.rect.y + 6))
        self._answer_box.draw(self._surf)

        message = self._notice or rs.message
        if rs.is_finished and not message:
            message = "Hit 'Start' to play again!"
        msg_y = self._answer_box.rect.bottom + 12
        for line in self._wrap(message, 70)[:3]:
            self._surf.blit(self._f_label.render(line, True, COL_TEXT), (LABEL_X, msg_y))
            msg_y += 18

        for btn in self._buttons:
            btn.draw(self._surf)

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        running = True
        try:
            while running:
                for ev in pygame.event.get():
                    if not self.handle_event(ev):
                        running = False
                        break
                self.poll_fetch()
                self.draw()
                pygame.display.flip()
                self._clock.tick(30)
        finally:
            self.close()

    def close(self) -> None:
        pygame.time.set_timer(TICK_EVENT, 0)
        self._timer_armed = False
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        # Wait for an in-flight fetch so the HTTP session is not closed under it
        self._executor.shutdown(wait=True, cancel_futures=True)
        pygame.quit()


def run(session: GameSession) -> None:
    """Open the game window and block until it is closed."""
    window = GameWindow(session)
    window.run_loop()
