"""
Scalar kinds a quaternion can carry its components in.

Every arithmetic step of an operation is carried out in the kind's numpy dtype,
so a ``FLOAT32`` quaternion rounds the way single-precision code does instead of
being computed in double precision and cast at the end.
"""

from enum import Enum
from typing import Union

import numpy as np


class ScalarKind(Enum):
    """Floating-point precision of quaternion components."""

    FLOAT64 = 'float64'
    FLOAT32 = 'float32'

    @property
    def dtype(self) -> np.dtype:
        """The numpy dtype backing this kind."""
        return np.dtype(self.value)

    def cast(self, value) -> np.floating:
        """Round a scalar to this kind."""
        return self.dtype.type(value)

    @classmethod
    def parse(cls, value: Union['ScalarKind', str, np.dtype, type]) -> 'ScalarKind':
        """
        Interpret a scalar kind given as a member, a name or a numpy dtype.

        Raises
        ------
        ValueError
            If the value does not describe float64 or float32.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {'double': 'float64', 'single': 'float32', 'float': 'float64'}
            key = aliases.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        elif value is not None:
            try:
                dtype = np.dtype(value)
            except (TypeError, ValueError):
                dtype = None
            # np.dtype(None) is float64, so None must not reach the comparison
            if dtype is not None:
                for member in cls:
                    if member.dtype == dtype:
                        return member

        raise ValueError(f"Unsupported scalar kind {value!r}; expected float64 or float32")
