# conservation.py
# Four-momentum conservation checks and a deterministic two-body helper.
#
# The cross sections never enforce conservation themselves (bremsstrahlung and
# pair production leave the recoil to a static field), so callers building
# kinematic points use these to validate them.
import math
from typing import Dict, Optional, Sequence, Union

from .kinematics import FourVector, ThreeVector, UnitVector


def _total(vectors: Sequence[FourVector]) -> FourVector:
    return sum(vectors, FourVector(0.0, 0.0, 0.0, 0.0))


def check_energy_conservation(initial_vectors, final_vectors, tol=1e-9):
    """
    Check conservation of energy for any N-body reaction.

    Parameters
    ----------
    initial_vectors : list of FourVector
        Incoming four-momenta.
    final_vectors : list of FourVector
        Outgoing four-momenta.
    tol : float
        Absolute tolerance in GeV.

    Returns
    -------
    bool
        True if |E_initial - E_final| < tol.

    Examples
    --------
    >>> k = FourVector(1e-3, 0, 0, 1e-3)
    >>> e = FourVector(0.000511, 0, 0, 0)
    >>> check_energy_conservation([k, e], [k, e])
    True
    """
    E_initial = sum(v.E for v in initial_vectors)
    E_final = sum(v.E for v in final_vectors)
    return abs(E_initial - E_final) < tol


def check_momentum_conservation(initial_vectors, final_vectors, tol=1e-9):
    """
    Check conservation of 3-momentum for any N-body reaction.

    Returns
    -------
    bool
        True if all components (px, py, pz) are conserved within tol.
    """
    delta = _total(initial_vectors) - _total(final_vectors)
    return abs(delta.px) < tol and abs(delta.py) < tol and abs(delta.pz) < tol


def check_conservation(initial_vectors, final_vectors, tol=1e-9):
    """
    Check full 4-momentum conservation (energy + momentum).

    Notes
    -----
    - Valid for Compton, triplet production and e-e bremsstrahlung kinematics.
    - Bremsstrahlung and pair production conserve energy only: the static
      field absorbs the recoil momentum.
    """
    return (
        check_energy_conservation(initial_vectors, final_vectors, tol) and
        check_momentum_conservation(initial_vectors, final_vectors, tol)
    )


def check_energy_momentum(initial_vectors, final_vectors, tol=1e-9) -> Dict[str, Union[bool, float]]:
    """Return diagnostic dict for full 4-momentum conservation.

    Returns dict with deltas for energy and momentum components and a
    boolean 'conserved' key summarizing result within tolerance.
    """
    Pi = _total(initial_vectors)
    Pf = _total(final_vectors)
    d = Pi - Pf
    conserved = all(abs(x) < tol for x in (d.E, d.px, d.py, d.pz))
    return {
        'conserved': conserved,
        'deltaE': d.E,
        'deltaPx': d.px,
        'deltaPy': d.py,
        'deltaPz': d.pz,
        'E_initial': Pi.E,
        'E_final': Pf.E,
    }


def recoil_momentum(initial_vectors, final_vectors) -> FourVector:
    """Four-momentum q = sum(initial) - sum(final) taken up by the target."""
    return _total(initial_vectors) - _total(final_vectors)


def two_body_decay(parent: FourVector, m1: float, m2: float,
                   axis: Optional[ThreeVector] = None):
    """Deterministic two-body decay helper.

    Standard relativistic two-body kinematics in the parent rest frame,
    daughter 1 along +axis (default +z), daughter 2 opposite, then brought
    back to the frame parent is given in. Useful for building exact
    Compton or pair kinematics in tests.
    """
    M = parent.invariant()
    if M <= 0:
        raise ValueError(f"{parent} has no rest frame to decay in.")
    if m1 + m2 > M + 1e-12:
        raise ValueError(f"Kinematically forbidden decay: m1+m2 = {m1 + m2:.6e} > M = {M:.6e}")
    term1 = M**2 - (m1 + m2)**2
    term2 = M**2 - (m1 - m2)**2
    p_star = math.sqrt(max(term1 * term2, 0.0)) / (2 * M)
    E1 = math.sqrt(m1**2 + p_star**2)
    E2 = math.sqrt(m2**2 + p_star**2)

    n = UnitVector(0.0, 0.0, 1.0) if axis is None else UnitVector(axis.x, axis.y, axis.z)
    d1_rf = FourVector.from_three(E1, n * p_star)
    d2_rf = FourVector.from_three(E2, n * -p_star)
    return d1_rf.boost_from_rest(parent), d2_rf.boost_from_rest(parent)
