"""
Pair production  gamma Z -> l+ l- Z  in a static unit-charge Coulomb field.

Returns d(sigma)/(dE dphi d^3q) in microbarn/GeV^4/sr, differential in the
lepton energy E, its azimuth phi and the recoil momentum q = k - p_- - p_+.
As for bremsstrahlung the target form factor is left to the caller.
"""
import numpy as np

from ..dirac import DiracMatrix
from ..particles import Lepton, Photon
from .base import CrossSection, fermion_propagator, sandwich


class PairProductionCrossSection(CrossSection):
    name = "PairProduction"
    description = "gamma Z -> l+ l- Z in a static Coulomb field, fully differential"
    units = "microbarn/GeV^4/sr"
    incoming = (True, False, False)
    alpha_power = 3

    def amplitudes(self, g_in: Photon, e_out: Lepton, p_out: Lepton) -> np.ndarray:
        """amp[gi, h_electron, h_positron]"""
        k, p_e, p_p = g_in.mom, e_out.mom, p_out.mom
        m = e_out.mass
        u_e, v_p = e_out.u_spinors(), p_out.v_spinors()

        prop1 = fermion_propagator(p_e - k, m, -2 * k.scalar_prod(p_e))
        prop2 = fermion_propagator(k - p_p, m, -2 * k.scalar_prod(p_p))
        gamma0 = DiracMatrix.gamma(0)

        amp = np.zeros((2, 2, 2), dtype=complex)
        for gi in range(2):
            eps = DiracMatrix.slash(g_in.eps(gi + 1))
            chain = eps @ prop1 @ gamma0 + gamma0 @ prop2 @ eps
            amp[gi] = sandwich(u_e, chain, v_p)
        return amp

    def kinematic_factor(self, g_in: Photon, e_out: Lepton, p_out: Lepton) -> float:
        q = g_in.mom - e_out.mom - p_out.mom
        return np.float64(1.0) / (2 * np.pi * g_in.mom.E) ** 2 / q.invariant_sqr() ** 2


PAIR_PRODUCTION = PairProductionCrossSection()


def pair_production(g_in: Photon, e_out: Lepton, p_out: Lepton) -> float:
    """Polarized pair production d(sigma)/(dE dphi d^3q) in microbarn/GeV^4/sr."""
    return PAIR_PRODUCTION(g_in, e_out, p_out)
