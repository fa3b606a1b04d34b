"""
Paraxial scan-envelope model of a two-prism Risley assembly.

The deviation of each wedge is taken as phi_o = (n - 1) * alpha. On a screen
at distance z each prism steers the beam around a circle of radius
z * tan(phi_o). Counter-rotated prisms leave a residual offset rd (the centre
defect) caused by the beam walking through the glass and across the gap.

Operating precondition: phi_o must stay well below 90 degrees, where tan()
diverges. The model does not check this at runtime.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from ..config.system_parameters import SystemParameters
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

@dataclass(frozen=True)
class ScanEnvelope:
    """Derived scan geometry on the screen (mm)."""

    r1: float    # Steering radius of prism 1
    r2: float    # Steering radius of prism 2
    rd: float    # Centre defect radius
    rmax: float  # Maximum reachable radius, r1 + r2 + rd

    @property
    def arm_lengths(self) -> Tuple[float, float]:
        """Triangulation arms (A, B) = (r1 + rd, r2)."""
        return self.r1 + self.rd, self.r2


class OpticalModel:
    """
    Computes the scan envelope from the system parameters and keeps the most
    recent result.
    """

    def __init__(self, params: Optional[SystemParameters] = None):
        self.params = params if params is not None else SystemParameters()
        self.envelope = self.recompute(self.params)

    def recompute(self, params: SystemParameters) -> ScanEnvelope:
        """
        Recompute the envelope for a new parameter set.

        Args:
            params (SystemParameters): The optical system parameters.

        Returns:
            ScanEnvelope: r1, r2, rd and rmax in millimetres.
        """
        alpha = params.wedge_angle
        n = params.refractive_index
        T = params.prism_thickness
        S = params.prism_separation
        z = params.screen_distance

        # Paraxial deviation of a single wedge
        phi_o = (n - 1) * alpha

        # Both prisms are identical, so their steering radii are equal
        r1 = z * np.tan(phi_o)
        r2 = z * np.tan(phi_o)

        # Internal refraction angle at the entry face, then centre defect
        phi_p = alpha / n
        rd = 2 * T * np.tan(alpha - phi_p) + S * np.tan(phi_o)

        rmax = r1 + r2 + rd

        self.params = params
        self.envelope = ScanEnvelope(r1=float(r1), r2=float(r2), rd=float(rd), rmax=float(rmax))
        logger.debug(f"Envelope: r1={r1:.3f}mm, r2={r2:.3f}mm, rd={rd:.3f}mm, rmax={rmax:.3f}mm")
        return self.envelope
