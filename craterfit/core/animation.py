from __future__ import annotations

import math
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..constants import (
    _IMPACT_OFFSET,
    _MARKER_SPEED,
    _MARKER_START_HEIGHT,
    _SCENE_RADIUS,
    FloatLike,
)


class ImpactState(Enum):
    IDLE = "idle"
    FALLING = "falling"
    IMPACTED = "impacted"


class ImpactSequencer:
    """
    Drives the falling marker and decides when the crater becomes visible.

    The marker falls along the +y axis toward the host sphere. The sequencer is advanced once per rendered frame with the
    time elapsed since the previous frame.

    Parameters
    ----------
    host_radius : FloatLike, default 2.0
        Radius of the host sphere in scene units.
    start_height : FloatLike, default 8.0
        Height of the marker above the host center before it is dropped.
    speed : FloatLike, default 8.0
        Falling speed in scene units per second.
    impact_offset : FloatLike, default 0.2
        The marker impacts once its height is within this distance of the host surface.
    """

    def __init__(
        self,
        host_radius: FloatLike = _SCENE_RADIUS,
        start_height: FloatLike = _MARKER_START_HEIGHT,
        speed: FloatLike = _MARKER_SPEED,
        impact_offset: FloatLike = _IMPACT_OFFSET,
    ):
        if host_radius <= 0:
            raise ValueError("host_radius must be positive")
        if speed <= 0:
            raise ValueError("speed must be positive")
        if impact_offset < 0:
            raise ValueError("impact_offset must not be negative")
        if start_height <= host_radius + impact_offset:
            raise ValueError("start_height must be above the impact threshold")
        self._host_radius = float(host_radius)
        self._start_height = float(start_height)
        self._speed = float(speed)
        self._impact_offset = float(impact_offset)
        self._state = ImpactState.IDLE
        self._height = self._start_height
        self._elapsed = 0.0

    def __str__(self) -> str:
        return f"<ImpactSequencer: {self.state.value}>\nMarker height: {self.height:.3f}\nElapsed: {self.elapsed:.3f} s"

    @property
    def state(self) -> ImpactState:
        return self._state

    @property
    def height(self) -> float:
        """Height of the marker above the host center in scene units."""
        return self._height

    @property
    def position(self) -> NDArray[np.float64]:
        return np.array([0.0, self._height, 0.0])

    @property
    def host_radius(self) -> float:
        """Radius of the host sphere in scene units."""
        return self._host_radius

    @host_radius.setter
    def host_radius(self, value: FloatLike):
        if value <= 0:
            raise ValueError("host_radius must be positive")
        if self._start_height <= value + self._impact_offset:
            raise ValueError("start_height must be above the impact threshold")
        self._host_radius = float(value)
        # A marker that is already at or below the new threshold has impacted
        if self._state is ImpactState.IMPACTED or (
            self._state is ImpactState.FALLING and self._height <= self.impact_height
        ):
            self._height = self.impact_height
            self._state = ImpactState.IMPACTED

    @property
    def start_height(self) -> float:
        return self._start_height

    @property
    def impact_height(self) -> float:
        return self._host_radius + self._impact_offset

    @property
    def elapsed(self) -> float:
        """Time spent falling since the last play command, in seconds."""
        return self._elapsed

    @property
    def crater_visible(self) -> bool:
        return self._state is ImpactState.IMPACTED

    @property
    def marker_visible(self) -> bool:
        return self._state is not ImpactState.IMPACTED

    def play(self) -> ImpactState:
        """
        Drop the marker. A finished drop is restarted from the top; a drop in progress is left alone.
        """
        if self._state is ImpactState.IMPACTED:
            self.reset()
        if self._state is ImpactState.IDLE:
            self._state = ImpactState.FALLING
        return self._state

    def reset(self) -> ImpactState:
        """Return to the idle state with the marker back at its starting height."""
        self._state = ImpactState.IDLE
        self._height = self._start_height
        self._elapsed = 0.0
        return self._state

    def advance(self, dt: FloatLike) -> ImpactState:
        """
        Advance the animation by one frame.

        Parameters
        ----------
        dt : FloatLike
            Seconds elapsed since the previous frame.

        Returns
        -------
        ImpactState
            The state after the frame.
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a non-negative finite number, got {dt}")
        if self._state is not ImpactState.FALLING:
            return self._state
        self._elapsed += dt
        self._height -= dt * self._speed
        if self._height <= self.impact_height:
            self._height = self.impact_height
            self._state = ImpactState.IMPACTED
        return self._state

    def time_to_impact(self) -> float:
        """Seconds of falling left before the marker reaches the impact threshold."""
        if self._state is ImpactState.IMPACTED:
            return 0.0
        return (self._height - self.impact_height) / self._speed
