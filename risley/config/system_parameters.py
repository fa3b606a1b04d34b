from dataclasses import dataclass, replace
import numpy as np
import pandas as pd
from ..utils.coordinate_transforms import deg_to_rad, rad_to_deg

@dataclass(frozen=True)
class SystemParameters:
    """Optical parameters of a two-prism Risley assembly (lengths in mm, angles in radians)."""

    wedge_angle: float = np.deg2rad(11.367)    # alpha (rad)
    refractive_index: float = 1.516            # n
    prism_thickness: float = 8.11              # T (mm)
    prism_diameter: float = 25.4               # mm, reported only
    prism_separation: float = 10.0             # S (mm)
    screen_distance: float = 200.0             # z (mm)

    def __post_init__(self):
        """Validate the physical ranges of every parameter."""
        if not self.wedge_angle > 0:
            raise ValueError(f"Wedge angle must be positive, got {self.wedge_angle}")
        if not self.refractive_index > 1:
            raise ValueError(f"Refractive index must be greater than 1, got {self.refractive_index}")
        if not self.prism_thickness > 0:
            raise ValueError(f"Prism thickness must be positive, got {self.prism_thickness}mm")
        if not self.prism_diameter > 0:
            raise ValueError(f"Prism diameter must be positive, got {self.prism_diameter}mm")
        if not self.prism_separation >= 0:
            raise ValueError(f"Prism separation cannot be negative, got {self.prism_separation}mm")
        if not self.screen_distance > 0:
            raise ValueError(f"Screen distance must be positive, got {self.screen_distance}mm")

    @property
    def wedge_angle_deg(self) -> float:
        return rad_to_deg(self.wedge_angle)

    def with_changes(self, **changes) -> 'SystemParameters':
        """Return a new, validated parameter set with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_degrees(cls, wedge_angle_deg: float, **kwargs) -> 'SystemParameters':
        """Create parameters from a wedge angle given in degrees."""
        return cls(wedge_angle=deg_to_rad(wedge_angle_deg), **kwargs)

    @classmethod
    def from_csv_row(cls, row: pd.Series) -> 'SystemParameters':
        """Create parameters from a preset CSV row."""
        try:
            return cls.from_degrees(
                float(row['Wedge Angle (deg)']),
                refractive_index=float(row['Refractive Index']),
                prism_thickness=float(row['Thickness (mm)']),
                prism_diameter=float(row['Diameter (mm)']),
                prism_separation=float(row['Separation (mm)']),
                screen_distance=float(row['Screen Distance (mm)'])
            )
        except KeyError as e:
            raise KeyError(f"Missing expected column in preset row: {e}")
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid preset {row.get('Name', 'Unknown')}: {e}")
