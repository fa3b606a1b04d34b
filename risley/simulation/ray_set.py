from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence
import numpy as np

from ..geometry.constants import DEFAULT_PALETTE
from ..geometry.inverse_kinematics import InverseKinematicsSolver, TargetError, UnreachableTargetError
from ..geometry.optical_model import ScanEnvelope


class CapacityExceededError(TargetError):
    """The ray set already holds the maximum number of rays."""

    def __init__(self, max_rays: int):
        super().__init__(f"Maximum {max_rays} rays allowed")
        self.max_rays = max_rays


@dataclass
class Ray:
    """A user-placed target and the prism angles that reach it."""

    id: int
    target_x: float             # mm, fixed after creation
    target_y: float             # mm, fixed after creation
    theta1: float               # rad
    theta2: float               # rad
    color_index: int
    color: str
    reachable: bool = True      # False once a parameter edit moved it outside the envelope

    @property
    def radius(self) -> float:
        return float(np.hypot(self.target_x, self.target_y))

    def copy(self) -> 'Ray':
        return replace(self)


class RaySet:
    """
    Ordered collection of solved targets, capped at max_rays.
    """

    def __init__(self, max_rays: int = 10, palette: Sequence[str] = DEFAULT_PALETTE,
                 solver: Optional[InverseKinematicsSolver] = None):
        self.max_rays = max_rays
        self.palette = tuple(palette)
        self.solver = solver if solver is not None else InverseKinematicsSolver()
        self._rays: List[Ray] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._rays)

    def __iter__(self) -> Iterator[Ray]:
        return iter(self._rays)

    def __contains__(self, ray_id: int) -> bool:
        return self.get(ray_id) is not None

    @property
    def rays(self) -> List[Ray]:
        return list(self._rays)

    @property
    def is_full(self) -> bool:
        return len(self._rays) >= self.max_rays

    def get(self, ray_id: int) -> Optional[Ray]:
        for ray in self._rays:
            if ray.id == ray_id:
                return ray
        return None

    def first(self) -> Optional[Ray]:
        return self._rays[0] if self._rays else None

    def add(self, x: float, y: float, envelope: ScanEnvelope) -> Ray:
        """
        Solve and append a new target.

        Args:
            x (float): Target x-coordinate (mm).
            y (float): Target y-coordinate (mm).
            envelope (ScanEnvelope): Current scan envelope.

        Returns:
            Ray: The newly appended ray.

        Raises:
            CapacityExceededError: If the set is full, checked before the target.
            CenterDefectError, OutOfRangeError: If the target is unreachable.
        """
        if self.is_full:
            raise CapacityExceededError(self.max_rays)

        angles = self.solver.solve(x, y, envelope)

        color_index = len(self._rays) % len(self.palette)
        ray = Ray(
            id=self._next_id,
            target_x=float(x),
            target_y=float(y),
            theta1=angles.theta1,
            theta2=angles.theta2,
            color_index=color_index,
            color=self.palette[color_index]
        )
        self._next_id += 1
        self._rays.append(ray)
        return ray

    def add_random(self, envelope: ScanEnvelope, rng: np.random.Generator,
                   min_fraction: float = 1.5, max_fraction: float = 0.8) -> Ray:
        """
        Append a target at a random bearing with a radius drawn uniformly from
        [min_fraction * rd, max_fraction * rmax].
        """
        angle = rng.uniform(0.0, 2 * np.pi)
        min_r = envelope.rd * min_fraction
        max_r = envelope.rmax * max_fraction
        r = min_r + rng.random() * (max_r - min_r)
        return self.add(r * np.cos(angle), r * np.sin(angle), envelope)

    def remove(self, ray_id: int) -> None:
        """Remove a ray by id. Unknown ids are ignored."""
        self._rays = [ray for ray in self._rays if ray.id != ray_id]

    def clear(self) -> None:
        self._rays = []

    def recompute_all(self, envelope: ScanEnvelope) -> None:
        """
        Re-solve every ray against a new envelope in place.

        Rays that can no longer be reached keep their last solved angles and
        are flagged with reachable = False. They are never removed.
        """
        for ray in self._rays:
            try:
                angles = self.solver.solve(ray.target_x, ray.target_y, envelope)
            except UnreachableTargetError:
                ray.reachable = False
                continue
            ray.theta1, ray.theta2 = angles
            ray.reachable = True
