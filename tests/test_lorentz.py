"""
Lorentz transforms: boost structure, composition, rotation parameterizations.
"""
import math

import numpy as np
import pytest

from qedx.kinematics import FourVector, ThreeVector
from qedx.lorentz import METRIC, LorentzBoost, LorentzTransform, ThreeRotation


def _assert_close(a, b, tol=1e-9, msg=""):
    assert abs(a - b) < tol, msg or f"Values differ: {a} vs {b} (tol={tol})"


# ------------------------------ Generic -----------------------------------
def test_identity_default():
    t = LorentzTransform()
    assert np.array_equal(t.matrix, np.identity(4))
    assert t.is_lorentz() and t.is_boost() and t.is_rotation()


def test_matrix_accessor_is_a_copy():
    t = LorentzTransform()
    m = t.matrix
    m[0, 0] = 5.0
    assert t[0, 0] == 1.0


def test_wrong_shape_raises():
    with pytest.raises(ValueError):
        LorentzTransform(np.identity(3))


def test_singular_inverse_raises():
    with pytest.raises(ValueError):
        LorentzTransform(np.zeros((4, 4))).inverse()


def test_non_lorentz_matrix_detected():
    assert not LorentzTransform(np.diag([2.0, 1.0, 1.0, 1.0])).is_lorentz()


def test_composition_is_associative_and_non_commutative():
    a = LorentzBoost.from_beta((0.5, 0.0, 0.0))
    b = LorentzBoost.from_beta((0.0, 0.4, 0.0))
    c = ThreeRotation.from_axis_angle((0.0, 0.0, 1.0), 0.7)
    assert ((a @ b) @ c).allclose(a @ (b @ c))
    assert not (a @ b).allclose(b @ a)


# ------------------------------ Boosts ------------------------------------
def test_boost_matrix_entries():
    boost = LorentzBoost.from_beta((0.0, 0.0, 0.6))
    _assert_close(boost.gamma(), 1.25)
    _assert_close(boost[0, 3], -0.75)
    _assert_close(boost[3, 3], 1.25)
    _assert_close(boost[1, 1], 1.0)
    assert boost.beta() == ThreeVector(0.0, 0.0, 0.6)


def test_zero_velocity_is_identity():
    assert np.array_equal(LorentzBoost.from_beta((0.0, 0.0, 0.0)).matrix, np.identity(4))


@pytest.mark.parametrize("beta", [(1.0, 0.0, 0.0), (0.6, 0.6, 0.6)])
def test_superluminal_beta_raises(beta):
    with pytest.raises(ValueError):
        LorentzBoost.from_beta(beta)


def test_boost_with_negated_velocity_is_inverse():
    beta = (0.3, -0.2, 0.5)
    boost = LorentzBoost.from_beta(beta)
    back = LorentzBoost.from_beta(tuple(-b for b in beta))
    assert (boost @ back).allclose(LorentzTransform())
    assert boost.inverse().allclose(back)
    assert (boost @ boost.inverse()).allclose(LorentzTransform())


def test_boost_preserves_metric():
    boost = LorentzBoost.from_beta((0.3, -0.2, 0.5))
    m = boost.matrix
    assert np.allclose(m.T @ METRIC @ m, METRIC)


def test_rapidity_round_trip():
    boost = LorentzBoost.from_rapidity((1.0, 1.0, 0.0), 2.5)
    _assert_close(boost.rapidity(), 2.5)
    _assert_close(boost.beta().length(), math.tanh(2.5))


def test_from_gamma_sets_speed_along_axis():
    boost = LorentzBoost.from_gamma(ThreeVector(0.0, 3.0, 4.0), 1.25)
    _assert_close(boost.gamma(), 1.25)
    assert boost.beta() == ThreeVector(0.0, 0.36, 0.48)
    assert boost.allclose(LorentzBoost.from_beta((0.0, 0.36, 0.48)))
    assert np.array_equal(LorentzBoost.from_gamma((1.0, 0.0, 0.0), 1.0).matrix, np.identity(4))
    with pytest.raises(ValueError):
        LorentzBoost.from_gamma((1.0, 0.0, 0.0), 0.9)


def test_to_rest_frame_of():
    p = FourVector(5.0, 1.0, 2.0, 3.0)
    rest = LorentzBoost.to_rest_frame_of(p) @ p
    _assert_close(rest.E, p.invariant())
    _assert_close(rest.magnitude, 0.0)


def test_massless_has_no_rest_frame():
    with pytest.raises(ValueError):
        LorentzBoost.to_rest_frame_of(FourVector(1.0, 0.0, 0.0, 1.0))


def test_non_collinear_boosts_are_not_a_boost():
    a = LorentzBoost.from_beta((0.8, 0.0, 0.0))
    b = LorentzBoost.from_beta((0.0, 0.8, 0.0))
    product = a @ b
    assert type(product) is LorentzTransform
    assert product.is_lorentz()
    assert not product.is_boost()


def test_invalid_boost_matrix_rejected():
    with pytest.raises(ValueError):
        LorentzBoost(ThreeRotation.from_axis_angle((0.0, 0.0, 1.0), 0.5).matrix)


# ------------------------------ Rotations ---------------------------------
def test_axis_angle_rotates_x_into_y():
    rot = ThreeRotation.from_axis_angle((0.0, 0.0, 1.0), math.pi / 2)
    assert rot @ ThreeVector(1.0, 0.0, 0.0) == ThreeVector(0.0, 1.0, 0.0)
    p = rot @ FourVector(2.0, 1.0, 0.0, 0.0)
    _assert_close(p.E, 2.0)
    _assert_close(p.py, 1.0)


def test_rotation_composition():
    r1 = ThreeRotation.from_axis_angle((1.0, 2.0, 3.0), 0.4)
    r2 = ThreeRotation.from_euler(0.3, 1.1, -0.8)
    v = ThreeVector(0.2, -1.5, 0.9)
    assert isinstance(r2 @ r1, ThreeRotation)
    assert r2 @ (r1 @ v) == (r2 @ r1) @ v


def test_rotation_of_complex_vector():
    rot = ThreeRotation.from_axis_angle((0.0, 0.0, 1.0), math.pi / 2)
    eps = ThreeVector(1.0, 1j, 0.0)
    assert rot @ eps == ThreeVector(-1j, 1.0, 0.0)


def test_rotation_vector_length_is_angle():
    rot = ThreeRotation.from_rotation_vector((0.0, 0.0, 0.5))
    assert rot.allclose(ThreeRotation.from_axis_angle((0.0, 0.0, 1.0), 0.5))
    assert ThreeRotation.from_rotation_vector((0.0, 0.0, 0.0)).allclose(LorentzTransform())


@pytest.mark.parametrize("angles", [(0.3, 1.1, -0.8), (-2.0, 0.4, 2.9), (1.0, 2.5, 0.2)])
def test_euler_round_trip(angles):
    rot = ThreeRotation.from_euler(*angles)
    phi, theta, psi = rot.euler()
    for a, b in zip((phi, theta, psi), angles):
        _assert_close(a, b)
    assert ThreeRotation.from_euler(phi, theta, psi).allclose(rot)


@pytest.mark.parametrize("angles", [(0.3, 0.0, 0.5), (0.3, math.pi, 0.5)])
def test_euler_gimbal_lock_reproduces_matrix(angles):
    rot = ThreeRotation.from_euler(*angles)
    phi, theta, psi = rot.euler()
    assert psi == 0.0
    assert ThreeRotation.from_euler(phi, theta, psi).allclose(rot)


def test_euler_axis_angle_agree():
    rot = ThreeRotation.from_euler(0.3, 1.1, -0.8)
    axis, angle = rot.axis_angle()
    assert ThreeRotation.from_axis_angle(axis, angle).allclose(rot)


@pytest.mark.parametrize("angle", [0.2, 1.5, 3.0, math.pi])
def test_axis_angle_round_trip(angle):
    axis = ThreeVector(1.0, -2.0, 0.5).unit()
    rot = ThreeRotation.from_axis_angle(axis, angle)
    got_axis, got_angle = rot.axis_angle()
    _assert_close(got_angle, angle)
    assert ThreeRotation.from_axis_angle(got_axis, got_angle).allclose(rot)


def test_rotation_inverse_is_transpose():
    rot = ThreeRotation.from_euler(0.3, 1.1, -0.8)
    assert (rot @ rot.inverse()).allclose(LorentzTransform())


def test_improper_rotation_rejected():
    with pytest.raises(ValueError):
        ThreeRotation(np.diag([1.0, 1.0, -1.0]))
