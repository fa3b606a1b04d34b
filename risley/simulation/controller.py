from dataclasses import dataclass
from typing import Optional, Protocol, Tuple
import numpy as np

from ..config.simulation_config import SimulationConfig
from ..config.system_parameters import SystemParameters
from ..geometry.inverse_kinematics import InverseKinematicsSolver, PrismAngles
from ..geometry.optical_model import OpticalModel, ScanEnvelope
from ..utils.logging_config import get_logger
from .motion_state import MotionState
from .ray_set import Ray, RaySet

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the simulation state. Lengths in mm, angles in radians."""

    params: SystemParameters
    envelope: ScanEnvelope
    rays: Tuple[Ray, ...]
    selected_id: Optional[int]
    motion_angles: Tuple[float, float]
    target_angles: Tuple[float, float]
    animating: bool
    animation_speed: float

    @property
    def selected_ray(self) -> Optional[Ray]:
        for ray in self.rays:
            if ray.id == self.selected_id:
                return ray
        return None


class Renderer(Protocol):
    """Draws a snapshot (scan-area view and side elevation)."""

    def draw(self, snapshot: Snapshot) -> None:
        ...


class InputSource(Protocol):
    """Feeds user requests, already converted to millimetres, into a controller."""

    def poll(self, controller: 'SimulationController') -> None:
        ...


class SimulationController:
    """
    Owns the simulation state and keeps the envelope, rays, selection and
    prism motion consistent with each other.
    """

    def __init__(self, params: Optional[SystemParameters] = None,
                 config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SimulationConfig()
        self.model = OpticalModel(params)
        self.solver = InverseKinematicsSolver()
        self.rays = RaySet(max_rays=self.config.max_rays, palette=self.config.palette,
                           solver=self.solver)
        self.motion = MotionState(self.config.smoothing_rate)
        self.selected_id: Optional[int] = None
        self.animating = False
        self.animation_speed = self.config.animation_speed
        self.rng = np.random.default_rng(self.config.seed)

    @property
    def params(self) -> SystemParameters:
        return self.model.params

    @property
    def envelope(self) -> ScanEnvelope:
        return self.model.envelope

    @property
    def selected_ray(self) -> Optional[Ray]:
        if self.selected_id is None:
            return None
        return self.rays.get(self.selected_id)

    # --- Parameters ---

    def set_parameters(self, params: SystemParameters) -> ScanEnvelope:
        """Replace the parameter set and propagate the new envelope to every ray."""
        envelope = self.model.recompute(params)
        self.rays.recompute_all(envelope)
        self._sync_motion_target()
        logger.debug(f"Parameters updated, rmax={envelope.rmax:.3f}mm, rd={envelope.rd:.3f}mm")
        return envelope

    def update_parameters(self, **changes) -> ScanEnvelope:
        """Edit individual parameters, e.g. update_parameters(screen_distance=300.0)."""
        return self.set_parameters(self.params.with_changes(**changes))

    # --- Targets ---

    def request_target(self, x: float, y: float) -> Ray:
        """
        Add a target and select it.

        Raises:
            CapacityExceededError, UnreachableTargetError: The
                request is rejected and the state is left unchanged.
        """
        ray = self.rays.add(x, y, self.envelope)
        self.select(ray.id)
        return ray

    def add_random_target(self) -> Ray:
        ray = self.rays.add_random(self.envelope, self.rng,
                                   min_fraction=self.config.random_min_fraction,
                                   max_fraction=self.config.random_max_fraction)
        self.select(ray.id)
        return ray

    def preview(self, x: float, y: float) -> PrismAngles:
        """Solve a hovered point without changing any state."""
        return self.solver.solve(x, y, self.envelope)

    # --- Selection ---

    def select(self, ray_id: int) -> Ray:
        ray = self.rays.get(ray_id)
        if ray is None:
            raise KeyError(f"No ray with id {ray_id}")
        self.selected_id = ray.id
        self._sync_motion_target()
        logger.debug(f"Selected ray {ray.id}: theta1={np.rad2deg(ray.theta1):.1f}°, "
                     f"theta2={np.rad2deg(ray.theta2):.1f}°")
        return ray

    def remove(self, ray_id: int) -> None:
        """Remove a ray; if it was selected, select the first remaining ray."""
        self.rays.remove(ray_id)
        if self.selected_id == ray_id:
            self.selected_id = None
            first = self.rays.first()
            if first is not None:
                self.select(first.id)

    def clear(self) -> None:
        self.rays.clear()
        self.selected_id = None

    # --- Animation ---

    def set_animation(self, enabled: bool) -> None:
        self.animating = bool(enabled)

    def toggle_animation(self) -> bool:
        self.animating = not self.animating
        return self.animating

    def set_animation_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"Animation speed must be positive, got {speed}")
        self.animation_speed = float(speed)

    def tick(self, dt: float) -> None:
        self.motion.tick(dt, self.animating, self.animation_speed)

    # --- Output ---

    def get_snapshot(self) -> Snapshot:
        return Snapshot(
            params=self.params,
            envelope=self.envelope,
            rays=tuple(ray.copy() for ray in self.rays),
            selected_id=self.selected_id,
            motion_angles=self.motion.current,
            target_angles=self.motion.target,
            animating=self.animating,
            animation_speed=self.animation_speed
        )

    def render(self, renderer: Renderer) -> None:
        renderer.draw(self.get_snapshot())

    def _sync_motion_target(self) -> None:
        ray = self.selected_ray
        if ray is not None:
            self.motion.set_target(ray.theta1, ray.theta2)
