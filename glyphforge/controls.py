"""
Interactive controls: stopping the render loop and steering the camera.
"""

from __future__ import annotations
import threading
from typing import Dict, Iterable, Optional, Union

from .camera import Camera, MoveDirection, RotationDirection

QUIT = "quit"

Command = Union[MoveDirection, RotationDirection, str]

DEFAULT_BINDINGS: Dict[str, Command] = {
    "w": MoveDirection.FORWARD,
    "s": MoveDirection.BACKWARD,
    "a": MoveDirection.LEFT,
    "d": MoveDirection.RIGHT,
    "r": MoveDirection.UP,
    "f": MoveDirection.DOWN,
    "UP": MoveDirection.FORWARD,
    "DOWN": MoveDirection.BACKWARD,
    "LEFT": RotationDirection.LEFT,
    "RIGHT": RotationDirection.RIGHT,
    "q": QUIT,
    "ESC": QUIT,
}


class CancellationToken:
    """Cooperative stop signal shared by the render loop and its callers.

    Frames are never interrupted; the loop checks the token between them.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Sleep up to `timeout` seconds; returns early (True) once cancelled."""
        return self._event.wait(timeout)


class CameraController:
    """Translates key presses into camera commands."""

    def __init__(
        self,
        camera: Camera,
        token: CancellationToken,
        step: float = 0.1,
        turn: float = 0.1,
        bindings: Optional[Dict[str, Command]] = None
    ):
        """Create a controller.

        Args:
            camera: Camera to steer
            token: Cancelled when a quit key is pressed
            step: Distance moved per key press
            turn: Angle in radians turned per key press
            bindings: Key to command mapping (DEFAULT_BINDINGS if None)
        """
        self.camera = camera
        self.token = token
        self.step = step
        self.turn = turn
        self.bindings = bindings if bindings is not None else DEFAULT_BINDINGS

    def handle(self, key: str) -> bool:
        """Apply one key press. Returns True if the camera changed."""
        command = self.bindings.get(key)
        if command is None:
            command = self.bindings.get(key.lower()) if len(key) == 1 else None

        if command is None:
            return False
        if command == QUIT:
            self.token.cancel()
            return False
        if isinstance(command, MoveDirection):
            self.camera.move_relative(command, self.step)
        else:
            self.camera.rotate(command, self.turn)
        return True

    def handle_all(self, keys: Iterable[str]) -> bool:
        """Apply several key presses. Returns True if any moved the camera."""
        changed = False
        for key in keys:
            changed = self.handle(key) or changed
        return changed
