"""
Game loop - the fixed-interval timer and input queue that drive a GameEngine.

Input events may arrive from any thread through submit(), but they are only
applied inside pump(), one at a time and in arrival order, interleaved with
ticks. The engine therefore never sees two operations at once.
"""

import logging
import queue
import time
from typing import Callable, List, Optional

from domain.constants import RUNNING, TICK_INTERVAL_MS
from domain.controls import RESTART, TOGGLE_PAUSE, Command
from domain.engine import GameEngine
from domain.game_state import GameState

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], None]

# How long run() waits for input when no tick is armed (paused / game over)
IDLE_WAIT_SECONDS = 0.1


class GameLoop:
    """
    Drives a GameEngine with a recurring tick and queued input commands.

    Ticks are only delivered while the engine is RUNNING. Pausing or losing
    drops the pending deadline; resuming or restarting arms a fresh one a
    full interval later. Call close() on teardown to release the timer.
    """

    def __init__(
        self,
        engine: GameEngine,
        tick_interval: float = TICK_INTERVAL_MS / 1000.0,
        clock: Callable[[], float] = time.monotonic
    ):
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick_interval}")

        self.engine = engine
        self.tick_interval = tick_interval
        self._clock = clock
        self._commands: "queue.Queue[Command]" = queue.Queue()
        self._listeners: List[Listener] = []
        self._next_tick: Optional[float] = None
        self.closed = False

        if self.engine.phase == RUNNING:
            self._arm(self._clock())

    def add_listener(self, listener: Listener):
        """Register a callable that receives a snapshot after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def submit(self, command: Command) -> bool:
        """Queue an input command. Returns False once the loop is closed."""
        if self.closed:
            return False
        self._commands.put(command)
        return True

    def pump(self, now: Optional[float] = None) -> int:
        """
        Apply every queued command, then deliver at most one due tick.

        Returns:
            Number of mutations processed (commands that changed the game + ticks).
        """
        if self.closed:
            return 0

        if now is None:
            now = self._clock()

        processed = 0
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                break
            if self._process(command, now):
                processed += 1

        if self._tick_if_due(now):
            processed += 1

        return processed

    def time_until_next_tick(self, now: Optional[float] = None) -> Optional[float]:
        """Seconds until the next tick is due, or None if no tick is armed."""
        if self.closed or self._next_tick is None:
            return None
        if now is None:
            now = self._clock()
        return max(0.0, self._next_tick - now)

    def run(self, should_continue: Callable[[], bool] = lambda: True):
        """
        Blocking loop: wait for input until the next tick is due, then pump.

        Returns when should_continue() is false or the loop is closed.
        """
        while not self.closed and should_continue():
            wait = self.time_until_next_tick()
            try:
                command = self._commands.get(timeout=IDLE_WAIT_SECONDS if wait is None else wait)
            except queue.Empty:
                command = None

            if command is not None:
                self._process(command, self._clock())
            self.pump()

    def close(self):
        """Stop ticking, drop queued input and forget all listeners."""
        if self.closed:
            return
        self.closed = True
        self._next_tick = None
        dropped = 0
        while True:
            try:
                self._commands.get_nowait()
                dropped += 1
            except queue.Empty:
                break
        self._listeners.clear()
        logger.debug(f"Game loop closed, dropped {dropped} queued commands")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _process(self, command: Command, now: float) -> bool:
        """Apply one command. Listeners only hear about commands that changed something."""
        if command == TOGGLE_PAUSE:
            before = self.engine.phase
            phase = self.engine.toggle_pause()
            if phase == RUNNING:
                self._arm(now)
            else:
                self._next_tick = None
            changed = phase != before
        elif command == RESTART:
            self.engine.reset()
            self._arm(now)
            changed = True
        elif isinstance(command, tuple):
            changed = self.engine.set_direction(command)
        else:
            logger.warning(f"Ignoring unknown command {command!r}")
            return False

        if changed:
            self._notify()
        return changed

    def _tick_if_due(self, now: float) -> bool:
        if self.engine.phase != RUNNING:
            self._next_tick = None
            return False

        if self._next_tick is None:
            self._arm(now)
            return False

        if now < self._next_tick:
            return False

        self.engine.step()

        if self.engine.phase == RUNNING:
            self._next_tick += self.tick_interval
            if self._next_tick <= now:
                # Fell behind; skip the missed ticks instead of replaying them
                self._next_tick = now + self.tick_interval
        else:
            self._next_tick = None

        self._notify()
        return True

    def _arm(self, now: float):
        self._next_tick = now + self.tick_interval

    def _notify(self):
        state = self.engine.get_current_state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed: {e}", exc_info=True)
                raise
