from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..geometry.constants import DEFAULT_PALETTE

@dataclass
class SimulationConfig:
    """Tunables for ray bookkeeping, animation and random target placement."""

    max_rays: int = 10                        # Capacity of the ray set
    smoothing_rate: float = 6.25              # k (1/s): 0.1 per 16 ms frame
    animation_speed: float = 1.0              # Multiplier applied to k and elapsed time

    # Random targets land in [min_fraction*rd, max_fraction*rmax]
    random_min_fraction: float = 1.5
    random_max_fraction: float = 0.8
    seed: Optional[int] = None

    palette: Tuple[str, ...] = field(default=DEFAULT_PALETTE)

    def __post_init__(self):
        if self.max_rays < 1:
            raise ValueError(f"max_rays must be at least 1, got {self.max_rays}")
        if self.smoothing_rate <= 0:
            raise ValueError(f"smoothing_rate must be positive, got {self.smoothing_rate}")
        if self.animation_speed <= 0:
            raise ValueError(f"animation_speed must be positive, got {self.animation_speed}")
        if not self.palette:
            raise ValueError("palette cannot be empty")
