"""
Dirac algebra: gamma basis, slash, propagator arithmetic, helicity spinors.
"""
import math

import numpy as np
import pytest

from qedx.dirac import HELICITIES, METRIC_SIGN, DiracMatrix, DiracSpinor, anticommutator
from qedx.kinematics import FourVector
from qedx.pauli import SIGMA


def _assert_close(a, b, tol=1e-9, msg=""):
    assert abs(a - b) < tol, msg or f"Values differ: {a} vs {b} (tol={tol})"


MOMENTA = [
    FourVector(math.sqrt(0.25 + 0.01 + 0.04 + 0.09), 0.1, -0.2, 0.3),
    FourVector(math.sqrt(0.25 + 4.0), 0.0, 0.0, -2.0),
    FourVector(0.5, 0.0, 0.0, 0.0),
]


def _helicity_operator(p: FourVector) -> np.ndarray:
    """Sigma.p-hat / 2 acting on Dirac spinors."""
    n = p.p / np.linalg.norm(p.p)
    s = sum(n[k] * SIGMA[k] for k in range(3))
    return np.block([[s, np.zeros((2, 2))], [np.zeros((2, 2)), s]]) / 2


# ------------------------------ Gamma basis -------------------------------
@pytest.mark.parametrize("mu", range(4))
@pytest.mark.parametrize("nu", range(4))
def test_anticommutation(mu, nu):
    ac = anticommutator(DiracMatrix.gamma(mu), DiracMatrix.gamma(nu))
    expected = 2 * METRIC_SIGN[mu] * (mu == nu) * DiracMatrix.identity()
    assert ac.allclose(expected)


def test_gamma5_anticommutes_and_squares_to_one():
    g5 = DiracMatrix.gamma5()
    assert (g5 @ g5).allclose(DiracMatrix.identity())
    for mu in range(4):
        assert anticommutator(g5, DiracMatrix.gamma(mu)).allclose(DiracMatrix())


def test_gamma_index_out_of_range():
    with pytest.raises(ValueError):
        DiracMatrix.gamma(4)


def test_gamma_bar_is_itself():
    for mu in range(4):
        assert DiracMatrix.gamma(mu).bar().allclose(DiracMatrix.gamma(mu))


# ------------------------------ Slash -------------------------------------
@pytest.mark.parametrize("p", MOMENTA)
def test_slash_squares_to_invariant(p):
    ps = DiracMatrix.slash(p)
    assert (ps @ ps).allclose(p.invariant_sqr() * DiracMatrix.identity())


def test_slash_of_complex_vector():
    eps = FourVector(0j, 1 / math.sqrt(2), 1j / math.sqrt(2), 0.0)
    es = DiracMatrix.slash(eps)
    # eps.eps = 0 for circular polarization
    assert (es @ es).allclose(DiracMatrix())


def test_scalar_addition_is_identity_multiple():
    p = MOMENTA[0]
    num = DiracMatrix.slash(p) + 0.5
    assert (num - DiracMatrix.slash(p)).allclose(0.5 * DiracMatrix.identity())
    assert (0.5 + DiracMatrix.slash(p)).allclose(num)


def test_zero_denominator_is_not_guarded():
    with np.errstate(divide="ignore", invalid="ignore"):
        m = DiracMatrix.identity() / 0.0
    assert not np.all(np.isfinite(m.to_array()))


def test_wrong_shape_raises():
    with pytest.raises(ValueError):
        DiracMatrix(np.identity(3))
    with pytest.raises(ValueError):
        DiracSpinor([1.0, 2.0])


def test_trace_identities():
    a, b = MOMENTA[0], MOMENTA[1]
    tr = (DiracMatrix.slash(a) @ DiracMatrix.slash(b)).trace()
    _assert_close(tr, 4 * a.scalar_prod(b))
    _assert_close(DiracMatrix.gamma(1).trace(), 0.0)


# ------------------------------ Spinors -----------------------------------
@pytest.mark.parametrize("p", MOMENTA)
@pytest.mark.parametrize("h", HELICITIES)
def test_dirac_equation(p, h):
    m = p.invariant()
    ps = DiracMatrix.slash(p)
    u = DiracSpinor.u(p, h)
    v = DiracSpinor.v(p, h)
    assert np.allclose((ps @ u).to_array(), m * u.to_array())
    assert np.allclose((ps @ v).to_array(), -m * v.to_array())


@pytest.mark.parametrize("p", MOMENTA)
@pytest.mark.parametrize("h", HELICITIES)
def test_spinor_normalization(p, h):
    m = p.invariant()
    u = DiracSpinor.u(p, h)
    v = DiracSpinor.v(p, h)
    _assert_close(u.scalar_prod(u), 2 * m)
    _assert_close(v.scalar_prod(v), -2 * m)


@pytest.mark.parametrize("p", MOMENTA[:2])
def test_spinors_are_helicity_eigenstates(p):
    op = _helicity_operator(p)
    for h in HELICITIES:
        u = DiracSpinor.u(p, h).to_array()
        assert np.allclose(op @ u, h * u)


@pytest.mark.parametrize("p", MOMENTA)
def test_completeness(p):
    m = p.invariant()
    ps = DiracMatrix.slash(p).to_array()
    u_sum = sum(np.outer(u.to_array(), u.bar()) for u in (DiracSpinor.u(p, h) for h in HELICITIES))
    v_sum = sum(np.outer(v.to_array(), v.bar()) for v in (DiracSpinor.v(p, h) for h in HELICITIES))
    assert np.allclose(u_sum, ps + m * np.identity(4))
    assert np.allclose(v_sum, ps - m * np.identity(4))


def test_massless_spinor():
    p = FourVector(1.0, 0.0, 0.0, 1.0)
    u = DiracSpinor.u(p, 0.5)
    _assert_close(u.scalar_prod(u), 0.0)
    assert np.allclose((DiracMatrix.slash(p) @ u).to_array(), 0.0)


def test_bad_helicity_raises():
    with pytest.raises(ValueError):
        DiracSpinor.u(MOMENTA[0], 1.0)


def test_spinor_arithmetic():
    u = DiracSpinor([1, 0, 0, 0])
    w = DiracSpinor([0, 1j, 0, 0])
    assert np.allclose((u + w).to_array(), [1, 1j, 0, 0])
    assert np.allclose((2 * u - w).to_array(), [2, -1j, 0, 0])
    assert u[0] == 1
