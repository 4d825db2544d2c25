# playback.py
"""
Playback state for stepping through a finished simulation.

The UI owns one ``PlaybackContext`` per result. It holds the result and an
index into its steps; timers and reruns stay in the UI, which calls
``tick()`` when it wants to advance.
"""

from typing import Optional, Tuple

from engine import SimulationResult, Step

MIN_SPEED = 100
MAX_SPEED = 2000


class PlaybackContext:
    """
    Current position, play flag and speed for one simulation result.

    Attributes:
        result (SimulationResult): The run being played back
        current (int): Index of the step on screen
        playing (bool): True while auto-play is running
        delay_ms (int): Delay between auto-play steps in milliseconds
    """

    def __init__(self, result: SimulationResult, delay_ms: int = 1000):
        self.result = result
        self.current = 0
        self.playing = False
        self.delay_ms = delay_ms

    @property
    def step(self) -> Step:
        return self.result[self.current]

    @property
    def last_index(self) -> int:
        return len(self.result) - 1

    @property
    def at_start(self) -> bool:
        return self.current <= 0

    @property
    def at_end(self) -> bool:
        return self.current >= self.last_index

    # -----------------------------
    # Auto-play
    # -----------------------------
    def play(self):
        if self.playing:
            return
        # Restart from the beginning when already at the end
        if self.at_end:
            self.current = 0
        self.playing = True

    def pause(self):
        self.playing = False

    def tick(self) -> bool:
        """
        Advance one step if auto-play is running.

        Pauses once the last step is reached.

        Returns:
            bool: True if the position moved
        """
        if not self.playing:
            return False
        if self.at_end:
            self.pause()
            return False
        self.current += 1
        if self.at_end:
            self.pause()
        return True

    def set_speed(self, value: int):
        """
        Set the auto-play speed from a slider value.

        The slider runs from 100 (slow) to 2000 (fast); the delay is the
        inverse, 2000 ms down to 100 ms.
        """
        value = min(MAX_SPEED, max(MIN_SPEED, int(value)))
        self.delay_ms = MAX_SPEED + MIN_SPEED - value

    @property
    def speed(self) -> int:
        return MAX_SPEED + MIN_SPEED - self.delay_ms

    # -----------------------------
    # Manual stepping
    # -----------------------------
    def step_forward(self) -> bool:
        self.pause()
        if self.at_end:
            return False
        self.current += 1
        return True

    def step_backward(self) -> bool:
        self.pause()
        if self.at_start:
            return False
        self.current -= 1
        return True

    def jump_to(self, index: int):
        self.pause()
        self.current = min(self.last_index, max(0, int(index)))

    def visible_ratios(self) -> Optional[Tuple[float, float]]:
        """Final (hit_ratio, miss_ratio), shown only on the last step."""
        if not self.at_end:
            return None
        return self.result.hit_ratio, self.result.miss_ratio
