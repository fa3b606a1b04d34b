"""
Closed-form inverse kinematics for a two-prism Risley scanner.

A target at distance r from the optical axis is reached by a triangle with
arms A = r1 + rd and B = r2. The law of cosines gives the interior angle of the
triangle, and the bearing of the target is added to it:

    theta1 = acos((r^2 + A^2 - B^2) / (2 A r)) + atan2(y, x)
    theta2 = acos((r^2 - A^2 + B^2) / (2 B r)) + atan2(y, x)

Angles are radians. theta = 90 deg corresponds to the home position with the
thickest part of the wedge at the top.
"""

from typing import NamedTuple, Tuple
import numpy as np
from scipy.optimize import root_scalar

from .constants import BOUNDARY_RTOL, COS_CLIP
from .optical_model import ScanEnvelope


class TargetError(Exception):
    """Base class for rejected target requests."""
    pass


class UnreachableTargetError(TargetError):
    """The target lies outside the reachable annulus rd <= r <= rmax."""

    def __init__(self, message: str, radius: float, limit: float):
        super().__init__(message)
        self.radius = radius
        self.limit = limit


class CenterDefectError(UnreachableTargetError):
    """Target is inside the centre defect (r < rd)."""
    pass


class OutOfRangeError(UnreachableTargetError):
    """Target is beyond the maximum scan range (r > rmax)."""
    pass


class PrismAngles(NamedTuple):
    theta1: float
    theta2: float


def _interior_angles(r: float, A: float, B: float) -> Tuple[float, float]:
    """Interior angles of the solution triangle at the origin and at the target."""
    lo, hi = COS_CLIP
    # Clipping is required: at r == rd or r == rmax rounding pushes the
    # argument just outside [-1, 1] and arccos would return NaN.
    cos_arg1 = (r**2 + A**2 - B**2) / (2 * A * r)
    cos_arg2 = (r**2 - A**2 + B**2) / (2 * B * r)
    gamma1 = np.arccos(np.clip(cos_arg1, lo, hi))
    gamma2 = np.arccos(np.clip(cos_arg2, lo, hi))
    return float(gamma1), float(gamma2)


class InverseKinematicsSolver:
    """
    Maps a target point on the screen to the two prism rotation angles.
    """

    def solve(self, x: float, y: float, envelope: ScanEnvelope) -> PrismAngles:
        """
        Solve the prism angles for a target point.

        Args:
            x (float): Target x-coordinate on the screen (mm).
            y (float): Target y-coordinate on the screen (mm).
            envelope (ScanEnvelope): Current scan envelope.

        Returns:
            PrismAngles: (theta1, theta2) in radians.

        Raises:
            UnreachableTargetError: If the target coordinates are not finite.
            CenterDefectError: If the target radius is below rd.
            OutOfRangeError: If the target radius exceeds rmax.
        """
        r = float(np.hypot(x, y))

        if not np.isfinite(r):
            raise UnreachableTargetError(
                f"Target coordinates must be finite, got ({x}, {y})",
                radius=r, limit=envelope.rmax)

        # Points on the boundary circles are reachable; hypot may land a few ulps outside
        if r < envelope.rd and not np.isclose(r, envelope.rd, rtol=BOUNDARY_RTOL, atol=0.0):
            raise CenterDefectError(
                f"Target is in center defect region - unreachable (r={r:.3f}mm < rd={envelope.rd:.3f}mm)",
                radius=r, limit=envelope.rd)
        if r > envelope.rmax and not np.isclose(r, envelope.rmax, rtol=BOUNDARY_RTOL, atol=0.0):
            raise OutOfRangeError(
                f"Target is outside maximum scan range (r={r:.3f}mm > rmax={envelope.rmax:.3f}mm)",
                radius=r, limit=envelope.rmax)

        # Degenerate home position, only reachable when rd == 0
        if r == 0:
            return PrismAngles(0.0, 0.0)

        A, B = envelope.arm_lengths
        gamma1, gamma2 = _interior_angles(r, A, B)
        bearing = float(np.arctan2(y, x))

        return PrismAngles(gamma1 + bearing, gamma2 + bearing)

    def locate(self, theta1: float, theta2: float, envelope: ScanEnvelope) -> Tuple[float, float]:
        """
        Forward relation: recover the target point from a pair of solved angles.

        Both angles share the same bearing term, so theta1 - theta2 equals the
        difference of the interior angles. For A > B that difference rises
        strictly from -pi at r = A - B to 0 at r = A + B, so r is found by a
        bracketed root search and the bearing follows from theta1.

        Args:
            theta1 (float): Prism 1 angle (radians).
            theta2 (float): Prism 2 angle (radians).
            envelope (ScanEnvelope): Envelope the angles were solved against.

        Returns:
            Tuple[float, float]: (x, y) on the screen in millimetres.

        Raises:
            ValueError: If rd == 0 (A == B, r is not recoverable) or the angle
                difference does not belong to any reachable target.
        """
        A, B = envelope.arm_lengths
        if A <= B:
            raise ValueError(f"Forward relation is degenerate for A={A:.6f}mm, B={B:.6f}mm (rd == 0)")

        # Wrap into [-pi, pi)
        delta = (theta1 - theta2 + np.pi) % (2 * np.pi) - np.pi
        if not -np.pi <= delta <= 0.0:
            raise ValueError(f"Angle difference {delta:.6f} rad does not correspond to a reachable target")

        def residual(r):
            gamma1, gamma2 = _interior_angles(r, A, B)
            return gamma1 - gamma2 - delta

        solution = root_scalar(residual, bracket=(A - B, A + B), method='brentq', xtol=1e-13)
        if not solution.converged:
            raise ValueError(f"Forward relation did not converge: {solution.flag}")

        r = solution.root
        gamma1, _ = _interior_angles(r, A, B)
        bearing = theta1 - gamma1
        return float(r * np.cos(bearing)), float(r * np.sin(bearing))
