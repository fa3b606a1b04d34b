from typing import Tuple
import numpy as np


class MotionState:
    """
    Animated prism angles chasing a pair of target angles.

    Each tick applies an exponential low-pass step,

        current += (target - current) * clip(k * speed * dt, 0, 1)

    which never overshoots and only approaches the target asymptotically.
    Time is supplied by the caller; nothing here reads a clock.
    """

    def __init__(self, smoothing_rate: float = 6.25):
        """
        Args:
            smoothing_rate (float): k in 1/s. The default reproduces a 0.1
                blend per 16 ms frame.
        """
        if smoothing_rate <= 0:
            raise ValueError(f"smoothing_rate must be positive, got {smoothing_rate}")
        self.smoothing_rate = smoothing_rate
        self.reset()

    def reset(self) -> None:
        self.current_angle1 = 0.0
        self.current_angle2 = 0.0
        self.target_angle1 = 0.0
        self.target_angle2 = 0.0
        self.elapsed = 0.0

    @property
    def current(self) -> Tuple[float, float]:
        return self.current_angle1, self.current_angle2

    @property
    def target(self) -> Tuple[float, float]:
        return self.target_angle1, self.target_angle2

    def set_target(self, theta1: float, theta2: float) -> None:
        self.target_angle1 = float(theta1)
        self.target_angle2 = float(theta2)

    def tick(self, dt: float, animation_enabled: bool, speed: float = 1.0) -> None:
        """
        Advance the current angles by one time step.

        Args:
            dt (float): Elapsed time since the previous tick (s).
            animation_enabled (bool): When False the angles stay frozen.
            speed (float): Animation speed multiplier applied to k.
        """
        if dt < 0:
            raise ValueError(f"dt cannot be negative, got {dt}")
        if not animation_enabled:
            return

        self.elapsed += dt * speed
        blend = float(np.clip(self.smoothing_rate * speed * dt, 0.0, 1.0))
        self.current_angle1 += (self.target_angle1 - self.current_angle1) * blend
        self.current_angle2 += (self.target_angle2 - self.current_angle2) * blend
