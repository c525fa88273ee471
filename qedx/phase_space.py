"""
N-body phase-space point generator using the Raubold-Lynch algorithm.

Not an event generator: it produces valid, momentum-conserving kinematic
points for the cross sections (and a phase-space weight for callers that
want one).

Units: GeV, c = 1.
"""

from __future__ import annotations
import logging
import math
import numpy as np
from typing import List, Tuple, Optional
from .kinematics import FourVector, isotropic_direction

logger = logging.getLogger(__name__)


def generate_n_body(
    parent_p4: FourVector,
    masses: List[float],
    rng: Optional[np.random.Generator] = None,
) -> Tuple[List[FourVector], float]:
    """
    Split parent_p4 into len(masses) on-shell four-momenta by sequential
    two-body decays.

    Parameters
    ----------
    parent_p4 : FourVector
        Total four-momentum (any frame, must be timelike)
    masses : list of float
        Final-state masses (GeV), in output order
    rng : numpy Generator, optional
        Random number generator

    Returns
    -------
    (final_particles, weight)
        final_particles: list of FourVector in the frame of parent_p4
        weight: product of p*/M over the sequential decays
    """
    rng = rng or np.random.default_rng()
    N = len(masses)

    if N < 2:
        raise ValueError("Need at least two final-state particles.")
    if any(m < 0 for m in masses):
        raise ValueError("All masses must be non-negative.")

    M = parent_p4.invariant()
    if M <= 0:
        raise ValueError("Parent mass must be positive.")
    if sum(masses) >= M:
        raise ValueError(f"Kinematically forbidden: sum(m)={sum(masses):.6e} >= M={M:.6e}")

    # Intermediate invariant masses
    virtual_masses = [M]
    remaining_mass = sum(masses)

    for i in range(N - 2):
        m_remain = remaining_mass - masses[i]
        m_max = virtual_masses[-1] - masses[i]
        m_min = m_remain

        if m_min > m_max:
            raise ValueError(f"Phase space violation at step {i}")

        r = rng.random()
        s = m_min**2 + r * (m_max**2 - m_min**2)
        virtual_masses.append(math.sqrt(s))
        remaining_mass -= masses[i]

    virtual_masses.append(masses[-1])

    # Sequential two-body decays in the parent rest frame
    final_particles = []
    current_p4 = FourVector(M, 0.0, 0.0, 0.0)
    weight = 1.0

    for i in range(N - 1):
        m_parent = virtual_masses[i]
        m1 = masses[i]
        m2 = virtual_masses[i + 1]

        term1 = m_parent**2 - (m1 + m2)**2
        term2 = m_parent**2 - (m1 - m2)**2
        if term1 * term2 < 0:
            raise ValueError("Kinematic failure in sequential decay")

        p_mag = math.sqrt(max(term1 * term2, 0.0)) / (2.0 * m_parent)
        weight *= p_mag / m_parent

        p_vec = isotropic_direction(rng) * p_mag
        p1 = FourVector.from_three(math.sqrt(m1**2 + p_mag**2), p_vec)
        p2 = FourVector.from_three(math.sqrt(m2**2 + p_mag**2), -p_vec)

        # daughters were built in the rest frame of current_p4
        final_particles.append(p1.boost_from_rest(current_p4))
        current_p4 = p2.boost_from_rest(current_p4)

    final_particles.append(current_p4)

    final_lab = [p.boost_from_rest(parent_p4) for p in final_particles]
    logger.debug(f"Generated {N}-body point for M = {M:.6e} GeV, weight = {weight:.6e}")
    return final_lab, weight
