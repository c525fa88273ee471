"""
Electron-electron bremsstrahlung  e- e- -> e- e- gamma.

The photon can come off any of the four external legs, before or after the
exchange, and the two outgoing electrons are identical: diagrams A and B
have the photon on the 0 -> 2 and 1 -> 3 lines, C and D are their exchange
partners with a relative minus sign.

Returns d(sigma)/(dk dphi d^3q) in microbarn/GeV^4/sr, lab frame (the
electron passed as e_in1 at rest), q the recoil momentum of e_out3.
"""
import numpy as np

from ..dirac import METRIC_SIGN, DiracMatrix
from ..particles import Lepton, Photon
from .base import CrossSection, fermion_propagator, photon_propagator, sandwich


class EEBremsstrahlungCrossSection(CrossSection):
    name = "eeBremsstrahlung"
    description = "e- e- -> e- e- gamma, eight diagrams"
    units = "microbarn/GeV^4/sr"
    incoming = (True, True, False, False, False)
    alpha_power = 3

    def amplitudes(self, e_in0: Lepton, e_in1: Lepton, e_out2: Lepton,
                   e_out3: Lepton, g_out: Photon) -> np.ndarray:
        """amp[h0, h1, h2, h3, gf] for (e_in0, e_in1, e_out2, e_out3, g_out)"""
        k = g_out.mom
        p0, p1, p2, p3 = e_in0.mom, e_in1.mom, e_out2.mom, e_out3.mom
        m = e_in0.mass
        u0, u1 = e_in0.u_spinors(), e_in1.u_spinors()
        u2, u3 = e_out2.u_spinors(), e_out3.u_spinors()

        # initial-state (1) and final-state (2) radiation on each line
        a1 = fermion_propagator(p0 - k, m, -2 * k.scalar_prod(p0))
        a2 = fermion_propagator(p2 + k, m, 2 * k.scalar_prod(p2))
        b1 = fermion_propagator(p1 - k, m, -2 * k.scalar_prod(p1))
        b2 = fermion_propagator(p3 + k, m, 2 * k.scalar_prod(p3))
        c1, c2 = a1, b2
        d1, d2 = b1, a2

        g_a = photon_propagator(p1 - p3)
        g_b = photon_propagator(p0 - p2)
        g_c = photon_propagator(p1 - p2)
        g_d = photon_propagator(p0 - p3)

        amp = np.zeros((2, 2, 2, 2, 2), dtype=complex)
        for gf in range(2):
            eps = DiracMatrix.slash(g_out.eps_star(gf + 1))
            for mu in range(4):
                gmu = DiracMatrix.gamma(mu)
                diag_a = (gmu @ a1 @ eps + eps @ a2 @ gmu) * g_a
                diag_b = (gmu @ b1 @ eps + eps @ b2 @ gmu) * g_b
                diag_c = (gmu @ c1 @ eps + eps @ c2 @ gmu) * g_c
                diag_d = (gmu @ d1 @ eps + eps @ d2 @ gmu) * g_d
                # a, b, c, d = h0, h1, h2, h3
                amp[..., gf] += METRIC_SIGN[mu] * (
                    np.einsum("db,ca->abcd", sandwich(u3, gmu, u1), sandwich(u2, diag_a, u0))
                    + np.einsum("ca,db->abcd", sandwich(u2, gmu, u0), sandwich(u3, diag_b, u1))
                    - np.einsum("cb,da->abcd", sandwich(u2, gmu, u1), sandwich(u3, diag_c, u0))
                    - np.einsum("da,cb->abcd", sandwich(u3, gmu, u0), sandwich(u2, diag_d, u1))
                )
        return amp

    def kinematic_factor(self, e_in0: Lepton, e_in1: Lepton, e_out2: Lepton,
                         e_out3: Lepton, g_out: Photon) -> float:
        return np.float64(1.0) / (2 * np.pi * e_in0.mom.E) ** 2 / (4 * e_in1.mom.E * e_out3.mom.E)


EE_BREMSSTRAHLUNG = EEBremsstrahlungCrossSection()


def ee_bremsstrahlung(e_in0: Lepton, e_in1: Lepton, e_out2: Lepton,
                      e_out3: Lepton, g_out: Photon) -> float:
    """Polarized e-e bremsstrahlung d(sigma)/(dk dphi d^3q) in microbarn/GeV^4/sr."""
    return EE_BREMSSTRAHLUNG(e_in0, e_in1, e_out2, e_out3, g_out)
