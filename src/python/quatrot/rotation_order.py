"""
Axis orderings for Euler angle composition and decomposition.

An order names the intrinsic sequence in which the elemental rotations are
applied.  ``XYZ`` corresponds to the rotation matrix ``Rx(a) @ Ry(b) @ Rz(c)``
in column-vector form, where ``a``, ``b`` and ``c`` are always the angles about
X, Y and Z respectively, whatever the order.
"""

from enum import Enum
from typing import Union


class RotationOrder(Enum):
    """The six Tait-Bryan axis orderings."""

    XYZ = 'XYZ'
    XZY = 'XZY'
    YXZ = 'YXZ'
    YZX = 'YZX'
    ZXY = 'ZXY'
    ZYX = 'ZYX'

    @classmethod
    def parse(cls, value: Union['RotationOrder', str]) -> 'RotationOrder':
        """
        Interpret a rotation order given either as a member or by name.

        Parameters
        ----------
        value : RotationOrder or str
            A member, or its name in any letter case (``'zyx'``, ``'ZYX'``).

        Returns
        -------
        RotationOrder
            The matching member.

        Raises
        ------
        ValueError
            If the value does not name one of the six orderings.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]

        valid = ', '.join(cls.__members__)
        raise ValueError(f"Unknown rotation order {value!r}; expected one of {valid}")

    @property
    def axes(self) -> str:
        """The axis letters in application order, e.g. ``'ZYX'``."""
        return self.value

    def __str__(self) -> str:
        return self.value
