"""
===============================================================================
QUATROT - Numerical Constants
===============================================================================
Central repository for the constants shared by the quaternion algebra, the
matrix extraction and the Euler decomposition. Angles are in radians unless a
name says otherwise.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
HALF_PI = 0.5 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# Full rotation angle in degrees from the half-angle acos: 2 * 180 / pi
TWO_RAD2DEG = 114.59155902616465

# =============================================================================
# INTERPOLATION
# =============================================================================
# slerp falls back to a linear blend when 1 - cos(omega) is not above this
SLERP_EPSILON = 1e-6

# =============================================================================
# EULER DECOMPOSITION
# =============================================================================
# |asin argument| at or above this is treated as gimbal lock
GIMBAL_LOCK_THRESHOLD = 0.9999999

# =============================================================================
# COMPARISON TOLERANCES
# =============================================================================
COMPARISON_TOLERANCE = 1e-9
UNIT_TOLERANCE = 1e-8
AXIS_TOLERANCE = 1e-12
