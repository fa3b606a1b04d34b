"""
Shared constants for the Risley prism geometry and its presentation.

Angles are radians and lengths are millimetres throughout the package.
"""

# theta = 90 deg puts the thickest part of the wedge at the top
HOME_POSITION_NOTE = (
    "Angles are measured from the home position (θ = 90°) "
    "where the thickest part of the prism is at the top"
)

# Ray colours, assigned by insertion position modulo the palette size
DEFAULT_PALETTE = (
    '#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4',
    '#FFA07A', '#98D8C8', '#6C5CE7', '#FD79A8',
    '#FDCB6E', '#6C63FF'
)

# Cosine arguments are clipped to this interval before arccos
COS_CLIP = (-1.0, 1.0)

# Radii within this relative distance of rd or rmax count as on the boundary circle
BOUNDARY_RTOL = 1e-12

# Scan view layout: 30 px margin per side, 20% headroom past rmax
VIEW_MARGIN_PX = 60.0
VIEW_HEADROOM = 1.2
