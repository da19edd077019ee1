"""
Essay Session Controller

Owns one SessionState and enforces the three independent limits (time,
words, deleted characters). Every trigger that can end the session funnels
through a single compare-and-set on ``state.submitted``, so the first caller
wins and later ones are no-ops.

Entry points are serialised with a lock; the UI layer is only ever a caller.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from essay.models.session_state import SessionState, SubmissionReason, count_words
from shared.utils.constants import DELETION_KEYS

logger = logging.getLogger("essay.session_controller")

SubmissionSink = Callable[[SessionState], None]


class SessionController:
    """State machine for a single essay-writing session."""

    def __init__(self, state: SessionState, on_submit: Optional[SubmissionSink] = None):
        self.state = state
        self._on_submit = on_submit
        self._lock = threading.Lock()

    # ─── Edits ────────────────────────────────────────────────────────

    def apply_edit(self, new_content: str, now: Optional[datetime] = None) -> None:
        """Replace the buffer with ``new_content`` and re-check the limits."""
        now = now or datetime.utcnow()
        with self._lock:
            state = self.state
            if state.submitted:
                return

            if not state.has_started_writing and new_content:
                state.has_started_writing = True
                if not state.timer_running:
                    self._start_timer(now)

            previous_length = len(state.content)
            if len(new_content) < previous_length:
                state.deleted_character_count += previous_length - len(new_content)

            state.content = new_content
            state.word_count = count_words(new_content)
            state.updated_at = now

            if state.deleted_character_count > state.config.deletion_limit:
                logger.info(
                    f"Session {state.session_id}: deletion limit exceeded "
                    f"({state.deleted_character_count}/{state.config.deletion_limit})"
                )
                self._submit(manual=False, reason="deletion_limit", now=now)

            if state.word_count >= state.config.word_limit:
                logger.info(
                    f"Session {state.session_id}: word limit reached "
                    f"({state.word_count}/{state.config.word_limit})"
                )
                self._submit(manual=False, reason="word_limit", now=now)

    def block_deletion_key(self, key: str) -> bool:
        """Return True if a Backspace/Delete keystroke must be suppressed."""
        with self._lock:
            if key not in DELETION_KEYS:
                return False

            state = self.state
            if state.submitted:
                return True
            if state.deleted_character_count >= state.config.deletion_limit:
                logger.debug(f"Session {state.session_id}: {key} blocked at deletion limit")
                return True

            if key == "Backspace":
                state.backspace_key_count += 1
            return False

    # ─── Timer ────────────────────────────────────────────────────────

    def tick(self, now: Optional[datetime] = None) -> None:
        """Advance the timer by one second.

        The clock anchor moves with the tick so a later wall-clock catch-up
        does not count the same second twice.
        """
        with self._lock:
            self._tick(now or datetime.utcnow())
            state = self.state
            if state.timer_running and state.clock_anchor is not None:
                state.clock_anchor = state.clock_anchor + timedelta(seconds=1)

    def advance_clock(self, now: Optional[datetime] = None) -> int:
        """Apply one tick per whole second elapsed since the clock anchor.

        Returns the number of ticks applied. The sub-second remainder stays
        in the anchor for the next call.
        """
        with self._lock:
            return self._advance_clock(now or datetime.utcnow())

    def start_timer(self, now: Optional[datetime] = None) -> None:
        with self._lock:
            if self.state.submitted or self.state.timer_running:
                return
            self._start_timer(now or datetime.utcnow())

    def pause_timer(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.utcnow()
        with self._lock:
            state = self.state
            if state.submitted or not state.timer_running:
                return
            self._advance_clock(now)
            if state.timer_running:
                state.timer_running = False
                state.clock_anchor = None
                state.updated_at = now

    # ─── Submission ───────────────────────────────────────────────────

    def submit(
        self,
        manual: bool = True,
        reason: Optional[SubmissionReason] = None,
        now: Optional[datetime] = None,
    ) -> bool:
        """Move to the terminal Submitted state. Returns False if already there."""
        if reason is None and manual:
            reason = "manual"
        with self._lock:
            return self._submit(manual=manual, reason=reason, now=now or datetime.utcnow())

    # ─── Internals (lock held) ────────────────────────────────────────

    def _start_timer(self, now: datetime) -> None:
        self.state.timer_running = True
        self.state.clock_anchor = now
        self.state.updated_at = now

    def _tick(self, now: datetime) -> None:
        state = self.state
        if state.submitted or not state.timer_running:
            return

        state.elapsed_seconds += 1
        state.updated_at = now
        if state.remaining_seconds == 0:
            state.timer_running = False
            logger.info(f"Session {state.session_id}: time limit reached")
            self._submit(manual=False, reason="time_limit", now=now)

    def _advance_clock(self, now: datetime) -> int:
        state = self.state
        if state.submitted or not state.timer_running or state.clock_anchor is None:
            return 0

        whole_seconds = int((now - state.clock_anchor).total_seconds())
        if whole_seconds <= 0:
            return 0

        ticks = 0
        for _ in range(whole_seconds):
            self._tick(now)
            ticks += 1
            if state.submitted:
                break

        if state.timer_running:
            state.clock_anchor = state.clock_anchor + timedelta(seconds=ticks)
        return ticks

    def _submit(self, manual: bool, reason: Optional[SubmissionReason], now: datetime) -> bool:
        state = self.state
        if state.submitted:
            return False

        state.submitted = True
        state.timer_running = False
        state.clock_anchor = None
        state.auto_submitted = not manual
        state.submission_reason = reason
        state.submitted_at = now
        state.updated_at = now

        logger.info(
            f"Session {state.session_id} submitted "
            f"(reason={reason}, words={state.word_count}, deleted={state.deleted_character_count})"
        )

        if self._on_submit is not None:
            try:
                self._on_submit(state)
            except Exception as e:
                # Grading is fire-and-forget; the session stays submitted.
                logger.error(f"Submission hand-off failed for {state.session_id}: {e}", exc_info=True)
        return True
