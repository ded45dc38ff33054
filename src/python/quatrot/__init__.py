"""
quatrot: quaternion rotations with matrix and Euler angle conversions.
"""

from quatrot.quaternion import Quaternion
from quatrot.rotation_order import RotationOrder
from quatrot.scalar import ScalarKind
from quatrot.config import RotationConfig, load_config

__all__ = ['Quaternion', 'RotationOrder', 'ScalarKind', 'RotationConfig', 'load_config']

__version__ = '1.0.0'
