"""
Plain-text export of the simulator state.

The ray table (tab separated, one header row, one dash row, one row per ray)
is consumed by downstream tools and must keep its exact layout.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..geometry.constants import HOME_POSITION_NOTE
from ..simulation.controller import Snapshot
from .coordinate_transforms import rad_to_deg
from .logging_config import get_logger

logger = get_logger(__name__)

RULE = '=' * 40
RAY_TABLE_HEADER = 'Ray#\tTarget_X(mm)\tTarget_Y(mm)\tRadius(mm)\tTheta1(deg)\tTheta2(deg)\tColor'
RAY_TABLE_RULE = '----\t------------\t------------\t----------\t-----------\t-----------\t-----'


def report_filename(exported_at: datetime) -> str:
    """risley_prism_data_<UTC ISO timestamp with ':' and '.' replaced by '-'>.txt"""
    utc = exported_at.astimezone(timezone.utc)
    stamp = utc.strftime('%Y-%m-%dT%H:%M:%S') + f".{utc.microsecond // 1000:03d}Z"
    return f"risley_prism_data_{stamp.replace(':', '-').replace('.', '-')}.txt"


def format_ray_table(snapshot: Snapshot) -> str:
    lines = [RAY_TABLE_HEADER, RAY_TABLE_RULE]
    for index, ray in enumerate(snapshot.rays, start=1):
        lines.append(
            f"{index}\t"
            f"{ray.target_x:.3f}\t\t"
            f"{ray.target_y:.3f}\t\t"
            f"{ray.radius:.3f}\t\t"
            f"{rad_to_deg(ray.theta1):.3f}\t\t"
            f"{rad_to_deg(ray.theta2):.3f}\t\t"
            f"{ray.color}"
        )
    return '\n'.join(lines) + '\n'


def format_report(snapshot: Snapshot, exported_at: Optional[datetime] = None) -> str:
    """
    Build the export report for a snapshot.

    Args:
        snapshot (Snapshot): State to export.
        exported_at (datetime): Export timestamp, defaults to now.

    Returns:
        str: The full report text.
    """
    exported_at = exported_at or datetime.now()
    params = snapshot.params
    env = snapshot.envelope

    content = f"{RULE}\nRISLEY PRISM SIMULATOR - DATA EXPORT\n{RULE}\n\n"
    content += f"Export Date: {exported_at.strftime('%Y-%m-%d %H:%M:%S')}\n\n"

    content += '--- SYSTEM PARAMETERS ---\n'
    content += f"Wedge Angle (α): {rad_to_deg(params.wedge_angle):.3f}°\n"
    content += f"Refractive Index (n): {params.refractive_index:.4f}\n"
    content += f"Prism Thickness: {params.prism_thickness:.2f} mm\n"
    content += f"Prism Diameter: {params.prism_diameter:.2f} mm\n"
    content += f"Prism Separation: {params.prism_separation:.2f} mm\n"
    content += f"Screen Distance: {params.screen_distance:.2f} mm\n\n"

    content += '--- CALCULATED PARAMETERS ---\n'
    content += f"Maximum Scan Range (r_max): {env.rmax:.3f} mm\n"
    content += f"Center Defect Radius (r_d): {env.rd:.3f} mm\n"
    content += f"Beam Steering Radius 1 (r_1): {env.r1:.3f} mm\n"
    content += f"Beam Steering Radius 2 (r_2): {env.r2:.3f} mm\n\n"

    content += '--- ACTIVE RAYS ---\n'
    if not snapshot.rays:
        content += 'No active rays\n'
    else:
        content += f"Total Active Rays: {len(snapshot.rays)}\n\n"
        content += format_ray_table(snapshot)

    content += '\n--- NOTES ---\n'
    content += 'This data was exported from the Risley Prism Simulator\n'
    content += 'Based on discrete beam pointing using inverse kinematics\n'
    content += HOME_POSITION_NOTE + '\n'
    return content


def write_report(snapshot: Snapshot, directory: str = '.', exported_at: Optional[datetime] = None) -> Path:
    """Write the report into a timestamped file and return its path."""
    exported_at = exported_at or datetime.now()
    path = Path(directory) / report_filename(exported_at)
    path.write_text(format_report(snapshot, exported_at), encoding='utf-8')
    logger.info(f"Exported {len(snapshot.rays)} rays to {path}")
    return path
