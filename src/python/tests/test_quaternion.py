"""
===============================================================================
QUATROT - Quaternion Algebra Test Suite
===============================================================================
Tests for the Quaternion value type covering identity, normalization,
inversion, the Hamilton product, negation and the double cover, rotation
angles, linear and spherical interpolation, rotate-towards stepping,
axis-angle construction and scalar kinds.

All floating-point comparisons use numpy.testing.assert_allclose with
explicit tolerances appropriate for double-precision arithmetic.
===============================================================================
"""

import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose

from quatrot.quaternion import Quaternion
from quatrot.scalar import ScalarKind


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def identity_quat():
    """Return the identity quaternion (0, 0, 0, 1)."""
    return Quaternion.identity()


@pytest.fixture
def quat_90z():
    """Return a quaternion representing 90-degree rotation about Z axis."""
    return Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), np.pi / 2)


@pytest.fixture
def quat_45x():
    """Return a quaternion representing 45-degree rotation about X axis."""
    return Quaternion.from_axis_angle(np.array([1.0, 0.0, 0.0]), np.pi / 4)


@pytest.fixture
def random_quat():
    """Return a deterministic 'random' unit quaternion for reproducible tests."""
    rng = np.random.default_rng(42)
    return Quaternion.from_components(rng.normal(size=4)).normal()


# =============================================================================
# Test: Identity quaternion
# =============================================================================

class TestIdentity:
    """Tests for the identity quaternion."""

    def test_identity(self, identity_quat):
        """Quaternion.identity() should be (0, 0, 0, 1)."""
        assert_allclose(identity_quat.components, [0.0, 0.0, 0.0, 1.0], atol=0)

    def test_default_constructor_is_identity(self, identity_quat):
        """A default-constructed quaternion is the identity."""
        assert Quaternion() == identity_quat

    def test_identity_is_unit(self, identity_quat):
        """Identity quaternion must have unit norm."""
        assert identity_quat.is_unit()


# =============================================================================
# Test: Value semantics
# =============================================================================

class TestValueSemantics:
    """Quaternions are immutable values."""

    def test_components_is_a_copy(self, quat_90z):
        """Writing to the components array does not change the quaternion."""
        comps = quat_90z.components
        comps[0] = 5.0
        assert quat_90z.x == 0.0

    def test_not_normalized_on_construction(self):
        """Components are stored as given."""
        q = Quaternion(1.0, 2.0, 3.0, 4.0)
        assert_allclose(q.components, [1.0, 2.0, 3.0, 4.0], atol=0)

    def test_operations_return_new_values(self):
        """normal() returns a new value and leaves the original untouched."""
        q = Quaternion(0.0, 0.0, 0.0, 2.0)
        n = q.normal()
        assert n is not q
        assert_allclose(q.components, [0.0, 0.0, 0.0, 2.0], atol=0)

    def test_equal_values_hash_equal(self):
        """Equal quaternions collapse in a set."""
        a = Quaternion(0.1, 0.2, 0.3, 0.4)
        b = Quaternion(0.1, 0.2, 0.3, 0.4)
        assert a == b
        assert len({a, b}) == 1

    def test_not_equal_to_other_types(self, identity_quat):
        """Comparison with a non-quaternion is simply False."""
        assert identity_quat != (0.0, 0.0, 0.0, 1.0)

    def test_from_components_wrong_size_raises(self):
        """from_components needs exactly four values."""
        with pytest.raises(ValueError):
            Quaternion.from_components([1.0, 2.0, 3.0])

    def test_iteration_order(self):
        """Iterating yields x, y, z, w."""
        assert [float(c) for c in Quaternion(1.0, 2.0, 3.0, 4.0)] == [1.0, 2.0, 3.0, 4.0]


# =============================================================================
# Test: Length and dot product
# =============================================================================

class TestLength:
    """Tests for dot, length_squared and length."""

    def test_dot(self):
        """Dot product is the 4D inner product."""
        a = Quaternion(1.0, 2.0, 3.0, 4.0)
        b = Quaternion(5.0, 6.0, 7.0, 8.0)
        assert_allclose(a.dot(b), 70.0, atol=0)

    def test_length_squared(self):
        """length_squared sums the squared components."""
        assert_allclose(Quaternion(1.0, 2.0, 3.0, 4.0).length_squared(), 30.0, atol=0)

    def test_length(self):
        """length is the square root of length_squared."""
        assert_allclose(Quaternion(1.0, 2.0, 3.0, 4.0).length(), np.sqrt(30.0), rtol=1e-15)


# =============================================================================
# Test: Normalization
# =============================================================================

class TestNormal:
    """Tests for quaternion normalization."""

    def test_normal(self):
        """A scaled identity normalizes to the identity."""
        q = Quaternion(0.0, 0.0, 0.0, 2.0).normal()
        assert_allclose(q.components, [0.0, 0.0, 0.0, 1.0], atol=1e-15)

    def test_normal_general(self):
        """Normalization of a general quaternion preserves direction."""
        q = Quaternion(1.0, 1.0, 1.0, 1.0).normal()
        assert_allclose(q.components, [0.5, 0.5, 0.5, 0.5], atol=1e-15)

    @pytest.mark.parametrize("x,y,z,w", [
        (3.0, 4.0, 0.0, 0.0),
        (0.0, 0.0, 1.0, 1.0),
        (1.0, 2.0, 3.0, 4.0),
        (-1e-3, 2e-3, 0.0, 5e-4),
    ])
    def test_normal_parametrized(self, x, y, z, w):
        """After normal(), length must be 1 for various inputs."""
        q = Quaternion(x, y, z, w).normal()
        assert_allclose(q.length(), 1.0, atol=1e-14)

    def test_normal_keeps_sign(self):
        """normal() does not flip the scalar part to positive."""
        q = Quaternion(0.0, 0.0, 0.0, -3.0).normal()
        assert_allclose(q.components, [0.0, 0.0, 0.0, -1.0], atol=1e-15)

    def test_normal_of_zero_is_identity(self, identity_quat):
        """A zero quaternion normalizes to the identity instead of failing."""
        assert Quaternion(0.0, 0.0, 0.0, 0.0).normal() == identity_quat


# =============================================================================
# Test: Conjugate and inverse
# =============================================================================

class TestInvert:
    """Tests for conjugate and invert."""

    def test_conjugate(self, quat_90z):
        """conjugate() should flip the vector part signs."""
        qc = quat_90z.conjugate()
        assert_allclose(qc.components, quat_90z.components * [-1, -1, -1, 1], atol=0)

    def test_unit_inverse_is_conjugate(self, random_quat):
        """For a unit quaternion the inverse equals the conjugate."""
        assert random_quat.invert().is_close(random_quat.conjugate(), 1e-14)

    def test_invert_scales_by_length_squared(self):
        """Inverse of a non-unit quaternion is the conjugate over |q|^2."""
        q = Quaternion(1.0, 2.0, 3.0, 4.0)
        assert_allclose(q.invert().components, np.array([-1.0, -2.0, -3.0, 4.0]) / 30.0,
                        atol=1e-16)

    @pytest.mark.parametrize("comps", [
        (1.0, 2.0, 3.0, 4.0),
        (0.0, 0.0, 0.0, 0.5),
        (-0.3, 0.0, 7.0, -2.0),
    ])
    def test_multiply_inverse(self, comps):
        """q * q.invert() should yield the identity quaternion."""
        q = Quaternion(*comps)
        assert_allclose((q * q.invert()).components, [0.0, 0.0, 0.0, 1.0], atol=1e-15)
        assert_allclose((q.invert() * q).components, [0.0, 0.0, 0.0, 1.0], atol=1e-15)

    def test_invert_zero(self):
        """The zero quaternion inverts to the zero quaternion."""
        inv = Quaternion(0.0, 0.0, 0.0, 0.0).invert()
        assert_allclose(inv.components, [0.0, 0.0, 0.0, 0.0], atol=0)


# =============================================================================
# Test: Hamilton product
# =============================================================================

class TestMultiply:
    """Tests for quaternion multiplication."""

    def test_multiply_identity(self, quat_90z, identity_quat):
        """q * identity = identity * q = q for any quaternion q."""
        assert_allclose((quat_90z * identity_quat).components, quat_90z.components, atol=1e-15)
        assert_allclose((identity_quat * quat_90z).components, quat_90z.components, atol=1e-15)

    def test_basis_products(self):
        """i * j = k and j * i = -k."""
        i = Quaternion(1.0, 0.0, 0.0, 0.0)
        j = Quaternion(0.0, 1.0, 0.0, 0.0)
        assert_allclose((i * j).components, [0.0, 0.0, 1.0, 0.0], atol=0)
        assert_allclose((j * i).components, [0.0, 0.0, -1.0, 0.0], atol=0)

    def test_not_commutative(self, quat_90z, quat_45x):
        """Rotation composition depends on order."""
        assert not (quat_90z * quat_45x).is_close(quat_45x * quat_90z)

    def test_multiply_is_operator(self, quat_90z, quat_45x):
        """multiply() and * are the same product."""
        assert quat_90z.multiply(quat_45x) == quat_90z * quat_45x

    def test_right_operand_applied_first(self, quat_90z, quat_45x):
        """a * b rotates a vector by b first, then by a."""
        v = np.array([0.3, -1.2, 2.0])
        expected = quat_90z.rotate_vector(quat_45x.rotate_vector(v))
        assert_allclose((quat_90z * quat_45x).rotate_vector(v), expected, atol=1e-14)

    def test_two_quarter_turns(self, quat_90z):
        """Two 90-degree turns about Z make a half turn."""
        half = Quaternion.from_axis_angle([0.0, 0.0, 1.0], np.pi)
        assert (quat_90z * quat_90z).is_close(half, 1e-15)

    def test_scalar_multiplication(self):
        """Quaternion * scalar and scalar * Quaternion scale every component."""
        q = Quaternion(1.0, -2.0, 3.0, 0.5)
        assert_allclose((q * 2).components, [2.0, -4.0, 6.0, 1.0], atol=0)
        assert_allclose((2.0 * q).components, [2.0, -4.0, 6.0, 1.0], atol=0)


# =============================================================================
# Test: Negation and angles
# =============================================================================

class TestNegateAndAngle:
    """Tests for negate and angle_to."""

    def test_negate(self, quat_90z):
        """Negation flips every component."""
        assert_allclose((-quat_90z).components, -quat_90z.components, atol=0)
        assert quat_90z.negate() == -quat_90z

    def test_negation_is_distinct_value(self, quat_90z):
        """-q is a different value but the same rotation."""
        assert -quat_90z != quat_90z
        assert (-quat_90z).is_close(quat_90z)

    def test_angle_to_self_is_zero(self, random_quat):
        """A rotation is 0 degrees from itself."""
        assert_allclose(random_quat.angle_to(random_quat), 0.0, atol=1e-5)

    def test_angle_to_negation_is_zero(self, identity_quat, random_quat):
        """The double cover: q and -q are 0 degrees apart."""
        assert identity_quat.angle_to(-identity_quat) == 0.0
        assert_allclose(random_quat.angle_to(-random_quat), 0.0, atol=1e-5)

    def test_angle_to_quarter_turn(self, identity_quat, quat_90z):
        """Angle from identity to a 90-degree turn is 90 degrees."""
        assert_allclose(identity_quat.angle_to(quat_90z), 90.0, rtol=1e-12)

    def test_angle_to_half_turn(self, identity_quat):
        """Angle to a 180-degree rotation is 180 degrees."""
        assert_allclose(identity_quat.angle_to(Quaternion(1.0, 0.0, 0.0, 0.0)), 180.0,
                        rtol=1e-14)

    def test_angle_to_symmetric(self, quat_90z, quat_45x):
        """angle_to does not depend on argument order."""
        assert_allclose(quat_90z.angle_to(quat_45x), quat_45x.angle_to(quat_90z), atol=0)

    def test_angle_to_clamps_dot(self):
        """Dot products slightly above 1 from round-off do not produce NaN."""
        q = Quaternion(0.0, 0.0, 0.0, 1.0 + 1e-12)
        assert q.angle_to(q) == 0.0


# =============================================================================
# Test: Rotate vector
# =============================================================================

class TestRotateVector:
    """Tests for vector rotation by a quaternion."""

    def test_rotate_vector_90z(self, quat_90z):
        """90-degree rotation about Z should rotate x-hat to y-hat."""
        result = quat_90z.rotate_vector(np.array([1.0, 0.0, 0.0]))
        assert_allclose(result, [0.0, 1.0, 0.0], atol=1e-15)

    def test_rotate_preserves_magnitude(self, random_quat):
        """Rotation should not change the vector magnitude."""
        v = np.array([3.0, -4.0, 5.0])
        result = random_quat.rotate_vector(v)
        assert_allclose(np.linalg.norm(result), np.linalg.norm(v), atol=1e-14)

    @pytest.mark.parametrize("axis,angle,v_in,v_expected", [
        ([0, 0, 1], np.pi, [1, 0, 0], [-1, 0, 0]),
        ([0, 1, 0], np.pi / 2, [1, 0, 0], [0, 0, -1]),
        ([1, 0, 0], np.pi / 2, [0, 1, 0], [0, 0, 1]),
    ])
    def test_rotate_parametrized(self, axis, angle, v_in, v_expected):
        """Parametrized rotation tests with known results."""
        q = Quaternion.from_axis_angle(np.array(axis, dtype=float), angle)
        result = q.rotate_vector(np.array(v_in, dtype=float))
        assert_allclose(result, np.array(v_expected, dtype=float), atol=1e-14)


# =============================================================================
# Test: Linear interpolation
# =============================================================================

class TestInterpolate:
    """Tests for component-wise linear interpolation."""

    def test_endpoints(self, quat_90z, quat_45x):
        """t=0 gives a and t=1 gives b."""
        assert_allclose(Quaternion.interpolate(quat_90z, quat_45x, 0.0).components,
                        quat_90z.components, atol=0)
        assert_allclose(Quaternion.interpolate(quat_90z, quat_45x, 1.0).components,
                        quat_45x.components, atol=0)

    def test_midpoint_not_normalized(self, identity_quat):
        """The blend is not renormalized."""
        mid = Quaternion.interpolate(identity_quat, Quaternion(1.0, 0.0, 0.0, 0.0), 0.5)
        assert_allclose(mid.components, [0.5, 0.0, 0.0, 0.5], atol=0)
        assert_allclose(mid.length(), np.sqrt(0.5), rtol=1e-15)

    def test_no_short_arc_flip(self, identity_quat):
        """Unlike slerp, lerp interpolates the components as given."""
        mid = Quaternion.interpolate(identity_quat, -identity_quat, 0.5)
        assert_allclose(mid.components, [0.0, 0.0, 0.0, 0.0], atol=0)

    def test_extrapolates(self):
        """t outside [0, 1] extrapolates linearly."""
        a = Quaternion(0.0, 0.0, 0.0, 1.0)
        b = Quaternion(1.0, 0.0, 0.0, 1.0)
        assert_allclose(Quaternion.interpolate(a, b, 2.0).components, [2.0, 0.0, 0.0, 1.0],
                        atol=0)


# =============================================================================
# Test: SLERP
# =============================================================================

class TestSLERP:
    """Tests for Spherical Linear Interpolation."""

    def test_slerp_endpoints(self, quat_90z, quat_45x):
        """slerp(q1, q2, 0) = q1 and slerp(q1, q2, 1) = q2."""
        assert Quaternion.slerp(quat_90z, quat_45x, 0.0).is_close(quat_90z, 1e-14)
        assert Quaternion.slerp(quat_90z, quat_45x, 1.0).is_close(quat_45x, 1e-14)

    def test_slerp_midpoint(self, identity_quat, quat_90z):
        """Halfway between identity and 90 degrees about Z is 45 degrees about Z."""
        mid = Quaternion.slerp(identity_quat, quat_90z, 0.5)
        expected = Quaternion.from_axis_angle([0.0, 0.0, 1.0], np.pi / 4)
        assert_allclose(mid.components, expected.components, atol=1e-14)

    @pytest.mark.parametrize("t", [0.0, 0.25, 0.5, 0.75, 1.0])
    def test_slerp_unit_norm(self, quat_90z, quat_45x, t):
        """SLERP at any parameter must yield a unit quaternion."""
        result = Quaternion.slerp(quat_90z, quat_45x, t)
        assert_allclose(result.length(), 1.0, atol=1e-14)

    @pytest.mark.parametrize("t", [0.0, 0.3, 1.0])
    def test_slerp_identical_quaternions(self, random_quat, t):
        """SLERP between identical quaternions returns the same quaternion."""
        result = Quaternion.slerp(random_quat, random_quat, t)
        assert_allclose(result.components, random_quat.components, atol=1e-15)

    def test_slerp_takes_short_arc(self, identity_quat, quat_90z):
        """A negated target is flipped back, so the result at t=1 is -b."""
        end = Quaternion.slerp(identity_quat, -quat_90z, 1.0)
        assert_allclose(end.components, quat_90z.components, atol=1e-15)
        mid = Quaternion.slerp(identity_quat, -quat_90z, 0.5)
        assert_allclose(identity_quat.angle_to(mid), 45.0, rtol=1e-12)

    def test_slerp_half_turn_apart(self, identity_quat):
        """Rotations 180 degrees apart interpolate without NaN."""
        half_x = Quaternion(1.0, 0.0, 0.0, 0.0)
        mid = Quaternion.slerp(identity_quat, half_x, 0.5)
        assert np.all(np.isfinite(mid.components))
        expected = Quaternion.from_axis_angle([1.0, 0.0, 0.0], np.pi / 2)
        assert_allclose(mid.components, expected.components, atol=1e-15)

    def test_slerp_antipodal(self, random_quat):
        """q and -q (cos = -1) hit the linear branch and return q."""
        result = Quaternion.slerp(random_quat, -random_quat, 0.5)
        assert np.all(np.isfinite(result.components))
        assert_allclose(result.components, random_quat.components, atol=1e-15)

    def test_slerp_nearly_parallel(self, identity_quat):
        """Nearly parallel inputs blend linearly and stay accurate."""
        b = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 1e-4)
        mid = Quaternion.slerp(identity_quat, b, 0.5)
        expected = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 0.5e-4)
        assert np.all(np.isfinite(mid.components))
        assert_allclose(mid.components, expected.components, atol=1e-9)

    def test_slerp_epsilon_selects_branch(self, identity_quat, quat_45x):
        """A large epsilon forces the linear blend, which is not unit length."""
        linear = Quaternion.slerp(identity_quat, quat_45x, 0.5, epsilon=1.0)
        lerp = Quaternion.interpolate(identity_quat, quat_45x, 0.5)
        assert_allclose(linear.components, lerp.components, atol=1e-15)
        assert linear.length() < 1.0

    def test_slerp_just_above_default_epsilon(self, identity_quat, caplog):
        """1 - cos(Omega) = 2e-6 stays on the spherical formula and keeps unit length."""
        caplog.set_level(logging.DEBUG, logger='quatrot.quaternion')
        b = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 4e-3)
        assert 1 - identity_quat.dot(b) > 1e-6

        mid = Quaternion.slerp(identity_quat, b, 0.5)
        expected = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 2e-3)
        assert 'blending linearly' not in caplog.text
        assert_allclose(mid.length(), 1.0, atol=1e-10)
        assert_allclose(mid.components, expected.components, atol=1e-12)

    def test_slerp_just_below_default_epsilon(self, identity_quat, caplog):
        """1 - cos(Omega) = 5e-7 takes the linear blend, which falls short of unit length."""
        caplog.set_level(logging.DEBUG, logger='quatrot.quaternion')
        b = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 2e-3)
        assert 1 - identity_quat.dot(b) <= 1e-6

        mid = Quaternion.slerp(identity_quat, b, 0.5)
        lerp = Quaternion.interpolate(identity_quat, b, 0.5)
        assert 'blending linearly' in caplog.text
        assert_allclose(mid.components, lerp.components, atol=1e-15)
        assert mid.length() < 1.0 - 1e-8


# =============================================================================
# Test: Rotate towards
# =============================================================================

class TestRotateTowards:
    """Tests for bounded stepping toward a target orientation."""

    def test_aligned_returns_self(self, identity_quat):
        """No step is taken when already at the target, or at its negation."""
        assert identity_quat.rotate_towards(Quaternion(), 10.0) is identity_quat
        assert identity_quat.rotate_towards(-identity_quat, 10.0) is identity_quat

    def test_partial_step(self, identity_quat, quat_90z):
        """A 30-degree step covers 30 of the 90 degrees."""
        stepped = identity_quat.rotate_towards(quat_90z, 30.0)
        assert_allclose(identity_quat.angle_to(stepped), 30.0, rtol=1e-9)
        assert_allclose(stepped.angle_to(quat_90z), 60.0, rtol=1e-9)

    def test_step_capped_at_target(self, identity_quat, quat_90z):
        """A step longer than the remaining angle lands on the target."""
        stepped = identity_quat.rotate_towards(quat_90z, 500.0)
        assert stepped.is_close(quat_90z, 1e-14)

    def test_repeated_steps_converge(self, identity_quat, quat_45x):
        """Stepping 10 degrees at a time reaches 45 degrees in five steps."""
        q = identity_quat
        for _ in range(5):
            q = q.rotate_towards(quat_45x, 10.0)
        assert q.is_close(quat_45x, 1e-12)


# =============================================================================
# Test: From axis angle
# =============================================================================

class TestFromAxisAngle:
    """Tests for constructing a quaternion from axis-angle."""

    def test_from_axis_angle(self):
        """90-degree rotation about Z should give (0, 0, sin(45), cos(45))."""
        q = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), np.pi / 2)
        assert_allclose(q.components, [0.0, 0.0, np.sin(np.pi / 4), np.cos(np.pi / 4)],
                        atol=1e-15)

    def test_from_axis_angle_zero_rotation(self):
        """Zero-angle rotation should give the identity quaternion."""
        q = Quaternion.from_axis_angle(np.array([1.0, 0.0, 0.0]), 0.0)
        assert_allclose(q.components, [0.0, 0.0, 0.0, 1.0], atol=1e-15)

    @pytest.mark.parametrize("axis,angle", [
        ([1, 0, 0], np.pi / 6),
        ([0, 1, 0], np.pi / 3),
        ([0, 0, 1], np.pi / 2),
        ([1, 1, 0], np.pi / 4),
        ([1, 1, 1], 2 * np.pi / 3),
    ])
    def test_from_axis_angle_roundtrip(self, axis, angle):
        """Constructing from axis-angle and converting back should match."""
        axis_arr = np.array(axis, dtype=float)
        q = Quaternion.from_axis_angle(axis_arr, angle)
        recovered_axis, recovered_angle = q.to_axis_angle()
        assert_allclose(recovered_angle, angle, atol=1e-13)
        axis_normalized = axis_arr / np.linalg.norm(axis_arr)
        assert_allclose(recovered_axis, axis_normalized, atol=1e-13)

    def test_identity_axis_convention(self, identity_quat):
        """The identity reports the Z axis and a zero angle."""
        axis, angle = identity_quat.to_axis_angle()
        assert_allclose(axis, [0.0, 0.0, 1.0], atol=0)
        assert angle == 0.0

    def test_from_axis_angle_zero_axis_raises(self):
        """Zero-length axis should raise ValueError."""
        with pytest.raises(ValueError):
            Quaternion.from_axis_angle(np.array([0.0, 0.0, 0.0]), np.pi / 2)


# =============================================================================
# Test: Scalar kinds
# =============================================================================

class TestScalarKind:
    """Tests for single- and double-precision quaternions."""

    def test_default_kind(self, identity_quat):
        """Quaternions default to double precision."""
        assert identity_quat.kind is ScalarKind.FLOAT64
        assert identity_quat.components.dtype == np.float64

    def test_float32_components(self):
        """Single-precision quaternions store float32 components."""
        q = Quaternion(0.1, 0.2, 0.3, 0.9, kind='float32')
        assert q.kind is ScalarKind.FLOAT32
        assert q.components.dtype == np.float32
        assert q.x == np.float32(0.1)

    def test_float32_operations_stay_float32(self):
        """Every operation on a float32 quaternion returns float32."""
        a = Quaternion.from_axis_angle([0.0, 0.0, 1.0], 0.7, kind=ScalarKind.FLOAT32)
        b = Quaternion.from_axis_angle([1.0, 0.0, 0.0], 0.2, kind=ScalarKind.FLOAT32)
        for result in (a * b, a.normal(), a.invert(), -a, Quaternion.slerp(a, b, 0.3),
                       Quaternion.interpolate(a, b, 0.3), a.rotate_towards(b, 5.0)):
            assert result.components.dtype == np.float32
        assert a.dot(b).dtype == np.float32
        assert a.angle_to(b).dtype == np.float32
        assert a.to_mat4().dtype == np.float32

    def test_mixed_kinds_follow_left_operand(self):
        """A product takes the precision of its left operand."""
        a = Quaternion(0.0, 0.0, 0.0, 1.0, kind=ScalarKind.FLOAT32)
        b = Quaternion(0.1, 0.0, 0.0, 1.0)
        assert (a * b).kind is ScalarKind.FLOAT32
        assert (b * a).kind is ScalarKind.FLOAT64

    def test_float32_close_to_float64(self, quat_90z, quat_45x):
        """Single precision agrees with double precision to float32 accuracy."""
        a32 = quat_90z.astype('float32')
        b32 = quat_45x.astype('float32')
        expected = Quaternion.slerp(quat_90z, quat_45x, 0.4)
        result = Quaternion.slerp(a32, b32, 0.4)
        assert_allclose(result.components, expected.components, atol=1e-6)

    @pytest.mark.parametrize("value,expected", [
        ('float64', ScalarKind.FLOAT64),
        ('double', ScalarKind.FLOAT64),
        ('FLOAT32', ScalarKind.FLOAT32),
        ('single', ScalarKind.FLOAT32),
        (np.float32, ScalarKind.FLOAT32),
        (np.dtype('float64'), ScalarKind.FLOAT64),
        (ScalarKind.FLOAT32, ScalarKind.FLOAT32),
    ])
    def test_parse(self, value, expected):
        """Scalar kinds can be named several ways."""
        assert ScalarKind.parse(value) is expected

    @pytest.mark.parametrize("value", ['int32', 'complex', np.int64, None, 3, True,
                                       object(), [1, 2]])
    def test_parse_rejects_other_kinds(self, value):
        """Only float64 and float32 are supported."""
        with pytest.raises(ValueError):
            ScalarKind.parse(value)

    @pytest.mark.parametrize("kind", [3, object()])
    def test_constructor_rejects_non_kinds(self, kind):
        """Values that are not scalar kinds are not read as double precision."""
        with pytest.raises(ValueError):
            Quaternion(kind=kind)
