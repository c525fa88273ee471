"""
Compton scattering  gamma l -> gamma l  (s- and u-channel diagrams).

Returns d(sigma)/d(Omega) of the outgoing photon in microbarn/sr, in whatever
frame the four-momenta are given.
"""
import numpy as np

from ..constants import CONSTANTS
from ..dirac import DiracMatrix
from ..particles import Lepton, Photon
from .base import CrossSection, fermion_propagator, sandwich


class ComptonCrossSection(CrossSection):
    name = "Compton"
    description = "gamma l -> gamma l at tree level, d(sigma)/d(Omega_gamma)"
    units = "microbarn/sr"
    incoming = (True, True, False, False)
    alpha_power = 2

    def amplitudes(self, g_in: Photon, e_in: Lepton, g_out: Photon, e_out: Lepton) -> np.ndarray:
        """amp[gi, hi, gf, hf]"""
        k_in, k_out, p_in = g_in.mom, g_out.mom, e_in.mom
        m = e_in.mass
        u_in, u_out = e_in.u_spinors(), e_out.u_spinors()

        prop_s = fermion_propagator(p_in + k_in, m, 2 * p_in.scalar_prod(k_in))
        prop_u = fermion_propagator(p_in - k_out, m, -2 * p_in.scalar_prod(k_out))

        amp = np.zeros((2, 2, 2, 2), dtype=complex)
        for gi in range(2):
            eps_in = DiracMatrix.slash(g_in.eps(gi + 1))
            for gf in range(2):
                eps_out = DiracMatrix.slash(g_out.eps_star(gf + 1))
                chain = eps_out @ prop_s @ eps_in + eps_in @ prop_u @ eps_out
                amp[gi, :, gf, :] = sandwich(u_out, chain, u_in).T
        return amp

    def kinematic_factor(self, g_in: Photon, e_in: Lepton, g_out: Photon, e_out: Lepton) -> float:
        flux = 4 * g_in.mom.E * (e_in.mom.magnitude + e_in.mom.E)
        rho = g_out.mom.E ** 2 / (4 * e_out.mom.scalar_prod(g_out.mom))
        return 4 * rho / flux


COMPTON = ComptonCrossSection()


def compton(g_in: Photon, e_in: Lepton, g_out: Photon, e_out: Lepton) -> float:
    """
    Polarized Compton cross section d(sigma)/d(Omega_gamma) in microbarn/sr.

    The particle SDMs select the polarization: I/2 on the incoming lines and
    I on the outgoing lines gives the unpolarized result, which reduces to
    the Klein-Nishina formula when the lepton starts at rest. Inputs are not
    modified.
    """
    return COMPTON(g_in, e_in, g_out, e_out)


def klein_nishina(g_in: Photon, e_in: Lepton, g_out: Photon) -> float:
    """
    Unpolarized Klein-Nishina d(sigma)/d(Omega) in microbarn/sr, evaluated in
    the rest frame of the incoming lepton:

        (alpha/m)^2 / 2 (k'/k)^2 (k'/k + k/k' - sin^2 theta)
    """
    k = g_in.mom.boost_to_rest(e_in.mom)
    k_prime = g_out.mom.boost_to_rest(e_in.mom)
    ratio = k_prime.E / k.E
    cos_theta = k.vect.dot(k_prime.vect) / (k.magnitude * k_prime.magnitude)
    sin2_theta = 1.0 - cos_theta ** 2
    prefactor = (CONSTANTS.alpha_qed / e_in.mass) ** 2 / 2
    return CONSTANTS.hbarc_sqr * prefactor * ratio ** 2 * (ratio + 1.0 / ratio - sin2_theta)
