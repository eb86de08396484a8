"""Identify blink routine.

The routine is built as an explicit list of steps and then executed by
IdentifySequence with an injectable sleep, so it can run against a fake
clock in tests.

Starting from off::

    on, pause, clear, pause, on, pause, clear, pause, on, pause

Starting from on::

    clear, pause, on, pause, clear, pause, on, pause, pause, on
"""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from wnpbridge.exceptions import SequenceAbortError

logger = logging.getLogger(__name__)

ON = "on"
CLEAR = "clear"
PAUSE = "pause"


@dataclass(frozen=True)
class IdentifyStep:
    """One step of the routine: a strip action or a pause."""

    action: str
    seconds: float = 0.0


class Switchable(Protocol):
    def turn_on(self) -> None: ...

    def turn_off(self) -> None: ...


def build_identify_steps(initial_on: bool, blinks: int = 4, pause: float = 0.5) -> list[IdentifyStep]:
    """
    Build the blink routine.

    Args:
        initial_on: Whether the strip was lit when identify started
        blinks: Number of clear/on alternations (the first one clears)
        pause: Seconds to wait after each action

    Returns:
        Ordered list of steps; a strip that started lit is turned back on
        after one extra pause.
    """
    steps: list[IdentifyStep] = []
    if not initial_on:
        steps += [IdentifyStep(ON), IdentifyStep(PAUSE, pause)]

    for i in range(blinks):
        steps += [IdentifyStep(CLEAR if i % 2 == 0 else ON), IdentifyStep(PAUSE, pause)]

    if initial_on:
        steps += [IdentifyStep(PAUSE, pause), IdentifyStep(ON)]

    return steps


class IdentifySequence:
    """
    Runs identify steps against a strip.

    Sleeps are plain delays and cannot be cancelled.
    """

    def __init__(self, strip: Switchable, sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            strip: Object with turn_on()/turn_off() (normally the bridge)
            sleep: Delay function; tests pass a fake clock
        """
        self._strip = strip
        self._sleep = sleep

    def run(self, steps: Sequence[IdentifyStep]) -> None:
        """
        Execute steps in order.

        Raises:
            SequenceAbortError: On the first failing action; later steps are skipped
        """
        for index, step in enumerate(steps):
            if step.action == PAUSE:
                self._sleep(step.seconds)
                continue

            try:
                if step.action == ON:
                    self._strip.turn_on()
                elif step.action == CLEAR:
                    self._strip.turn_off()
                else:
                    raise ValueError(f"Unknown identify action: {step.action!r}")
            except Exception as e:
                raise SequenceAbortError(index, step.action, e) from e

            logger.debug(f"identify step {index}: {step.action}")
