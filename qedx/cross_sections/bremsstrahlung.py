"""
Bremsstrahlung  l Z -> l gamma Z  off a static unit-charge Coulomb field.

The nucleus absorbs the recoil momentum q = p_in - p_out - k but no energy.
The result is d(sigma)/(dk dphi d^3q) in microbarn/GeV^4/sr, differential in
the photon energy k, the photon azimuth phi and the recoil momentum q. The
target form factor and the integral over q are left to the caller.
"""
import numpy as np

from ..dirac import DiracMatrix
from ..particles import Lepton, Photon
from .base import CrossSection, fermion_propagator, sandwich


class BremsstrahlungCrossSection(CrossSection):
    name = "Bremsstrahlung"
    description = "l Z -> l gamma Z in a static Coulomb field, fully differential"
    units = "microbarn/GeV^4/sr"
    incoming = (True, False, False)
    alpha_power = 3

    def amplitudes(self, e_in: Lepton, e_out: Lepton, g_out: Photon) -> np.ndarray:
        """amp[hi, hf, gf]"""
        p_in, p_out = e_in.mom, e_out.mom
        q = p_in - p_out - g_out.mom
        q2 = q.invariant_sqr()
        m = e_in.mass
        u_in, u_out = e_in.u_spinors(), e_out.u_spinors()

        # photon emitted after (1) or before (2) the Coulomb exchange
        prop1 = fermion_propagator(p_in - q, m, q2 - 2 * q.scalar_prod(p_in))
        prop2 = fermion_propagator(p_out + q, m, q2 + 2 * q.scalar_prod(p_out))
        gamma0 = DiracMatrix.gamma(0)

        amp = np.zeros((2, 2, 2), dtype=complex)
        for gf in range(2):
            eps = DiracMatrix.slash(g_out.eps_star(gf + 1))
            chain = eps @ prop1 @ gamma0 + gamma0 @ prop2 @ eps
            amp[:, :, gf] = sandwich(u_out, chain, u_in).T
        return amp

    def kinematic_factor(self, e_in: Lepton, e_out: Lepton, g_out: Photon) -> float:
        q = e_in.mom - e_out.mom - g_out.mom
        return np.float64(1.0) / (2 * np.pi * e_in.mom.E) ** 2 / q.invariant_sqr() ** 2


BREMSSTRAHLUNG = BremsstrahlungCrossSection()


def bremsstrahlung(e_in: Lepton, e_out: Lepton, g_out: Photon) -> float:
    """Polarized bremsstrahlung d(sigma)/(dk dphi d^3q) in microbarn/GeV^4/sr."""
    return BREMSSTRAHLUNG(e_in, e_out, g_out)
