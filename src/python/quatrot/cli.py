"""
===============================================================================
QUATROT - Command Line Entry Point
===============================================================================

USAGE:
    quatrot from-euler 90 0 0 --degrees             # Euler -> quaternion + matrix
    quatrot to-euler 0.7071 0 0 0.7071 --order ZYX  # quaternion -> Euler
    quatrot angle 0 0 0 1  1 0 0 0                  # angle between rotations
    quatrot slerp 0 0 0 1  0 0 1 0 --steps 5        # sampled slerp table
    quatrot slerp ... --output path.csv             # same, written as CSV
    quatrot slerp ... --plot path.png               # same, plotted against t

Global options --config PATH and --verbose go before the command. Quaternions
are given as x y z w. Settings not passed on the command line come from the
YAML configuration (see quatrot.config).
===============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np
import pandas as pd

from quatrot.config import RotationConfig, load_config
from quatrot.constants import DEG2RAD, RAD2DEG
from quatrot.plotting import plot_slerp
from quatrot.quaternion import Quaternion
from quatrot.rotation_order import RotationOrder

logger = logging.getLogger(__name__)


def _quaternion(values: List[float], config: RotationConfig) -> Quaternion:
    return Quaternion.from_components(values, kind=config.scalar_kind)


def _order(args: argparse.Namespace, config: RotationConfig) -> RotationOrder:
    if args.order is None:
        return config.rotation_order
    return RotationOrder.parse(args.order)


def cmd_from_euler(args: argparse.Namespace, config: RotationConfig) -> None:
    angles = np.asarray(args.angles, dtype=np.float64)
    if args.degrees:
        angles = angles * DEG2RAD

    order = _order(args, config)
    q = Quaternion.from_euler(angles, order, kind=config.scalar_kind)

    print(f"order:      {order}")
    print(f"quaternion: {q!r}")
    print("matrix:")
    print(np.array2string(q.to_mat3(), precision=8, suppress_small=True))


def cmd_to_euler(args: argparse.Namespace, config: RotationConfig) -> None:
    q = _quaternion(args.quaternion, config)
    order = _order(args, config)

    angles = q.to_euler(order, threshold=config.gimbal_lock_threshold)
    unit = 'rad'
    if args.degrees:
        angles = angles * RAD2DEG
        unit = 'deg'

    print(f"order: {order}")
    print(f"x={angles[0]:+.8f} y={angles[1]:+.8f} z={angles[2]:+.8f} ({unit})")


def cmd_angle(args: argparse.Namespace, config: RotationConfig) -> None:
    a = _quaternion(args.a, config)
    b = _quaternion(args.b, config)
    print(f"angle: {a.angle_to(b):.8f} deg")
    print(f"same rotation: {'yes' if a.is_close(b, config.comparison_tolerance) else 'no'}")


def slerp_table(a: Quaternion, b: Quaternion, steps: int,
                epsilon: float) -> pd.DataFrame:
    """
    Sample slerp(a, b, t) at ``steps`` evenly spaced t in [0, 1].

    Returns
    -------
    pd.DataFrame
        Columns t, x, y, z, w and angle_deg (angle from ``a``).
    """
    if steps < 2:
        raise ValueError(f"steps must be at least 2, got {steps}")

    rows = []
    for t in np.linspace(0.0, 1.0, steps):
        q = Quaternion.slerp(a, b, t, epsilon=epsilon)
        rows.append({
            't': t,
            'x': float(q.x),
            'y': float(q.y),
            'z': float(q.z),
            'w': float(q.w),
            'angle_deg': float(a.angle_to(q)),
        })

    return pd.DataFrame(rows, columns=['t', 'x', 'y', 'z', 'w', 'angle_deg'])


def cmd_slerp(args: argparse.Namespace, config: RotationConfig) -> None:
    a = _quaternion(args.a, config)
    b = _quaternion(args.b, config)

    table = slerp_table(a, b, args.steps, config.slerp_epsilon)

    if args.output:
        table.to_csv(args.output, index=False)
        logger.info("Saved %d slerp samples to %s", len(table), args.output)
    else:
        print(table.to_string(index=False))

    if args.plot:
        plot_slerp(table, args.plot)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='quatrot',
        description='Quaternion rotation conversions and interpolation'
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to rotation config YAML')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    commands = parser.add_subparsers(dest='command', required=True)

    p = commands.add_parser('from-euler', help='Euler angles to quaternion and matrix')
    p.add_argument('angles', type=float, nargs=3, metavar='ANGLE',
                   help='Angles about X, Y and Z')
    p.add_argument('--order', type=str, default=None,
                   help='Rotation order (default: from config)')
    p.add_argument('--degrees', action='store_true', help='Angles are in degrees')
    p.set_defaults(handler=cmd_from_euler)

    p = commands.add_parser('to-euler', help='Quaternion to Euler angles')
    p.add_argument('quaternion', type=float, nargs=4, metavar='Q',
                   help='Quaternion components x y z w')
    p.add_argument('--order', type=str, default=None,
                   help='Rotation order (default: from config)')
    p.add_argument('--degrees', action='store_true', help='Report angles in degrees')
    p.set_defaults(handler=cmd_to_euler)

    p = commands.add_parser('angle', help='Angle between two rotations')
    p.add_argument('a', type=float, nargs=4, metavar='A',
                   help='First quaternion x y z w')
    p.add_argument('b', type=float, nargs=4, metavar='B',
                   help='Second quaternion x y z w')
    p.set_defaults(handler=cmd_angle)

    p = commands.add_parser('slerp', help='Sample a spherical interpolation')
    p.add_argument('a', type=float, nargs=4, metavar='A',
                   help='Start quaternion x y z w')
    p.add_argument('b', type=float, nargs=4, metavar='B',
                   help='End quaternion x y z w')
    p.add_argument('--steps', type=int, default=11,
                   help='Number of samples including both ends (default: 11)')
    p.add_argument('--output', type=str, default=None,
                   help='Write the samples to this CSV file')
    p.add_argument('--plot', type=str, default=None,
                   help='Save a plot of the samples to this image file')
    p.set_defaults(handler=cmd_slerp)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run one command and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    try:
        config = load_config(args.config)
        args.handler(args, config)
    except (ValueError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1

    return 0
