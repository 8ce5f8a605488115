"""Display publication from the execution thread to a frontend."""

import threading
from typing import Optional

import jax.numpy as jnp
import numpy as np

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT


class FrameBuffer:
    """Latest display published by the machine, guarded by one lock.

    The machine publishes its immutable ``[x, y]`` display after every cycle
    that changed it. Readers get ``numpy`` copies laid out as rows x columns,
    ``(SCREEN_HEIGHT, SCREEN_WIDTH)``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._frame = jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
        self._version = 0
        self._polled_version = 0

    @property
    def width(self) -> int:
        return SCREEN_WIDTH

    @property
    def height(self) -> int:
        return SCREEN_HEIGHT

    @property
    def version(self) -> int:
        """Number of frames published so far."""
        with self._lock:
            return self._version

    def publish(self, display: jnp.ndarray):
        """Make ``display`` the latest frame. Called from the execution thread."""
        with self._lock:
            self._frame = display
            self._version += 1

    def snapshot(self) -> np.ndarray:
        """Copy of the latest frame, rows x columns."""
        with self._lock:
            return np.array(self._frame, dtype=bool).T.copy()

    def poll(self) -> Optional[np.ndarray]:
        """Copy of the latest frame, or ``None`` if nothing was published since the last poll."""
        with self._lock:
            if self._version == self._polled_version:
                return None
            self._polled_version = self._version
            return np.array(self._frame, dtype=bool).T.copy()
