"""
Triplet production  gamma e- -> e+ e- e-  on a free electron.

Eight diagrams: the pair is made either by the photon hitting the target
electron line (Compton-like, "CD") or by the photon converting in the
field of the target (Bethe-Heitler-like, "BH"), each in two time orderings,
and each again with the two identical outgoing electrons exchanged (the
"3" variants, entering with a relative minus sign).

Returns d(sigma)/(dE dphi d^3q) in microbarn/GeV^4/sr where q is the
recoil momentum of the electron passed as e_out3.
"""
import math

import numpy as np

from ..dirac import METRIC_SIGN, DiracMatrix
from ..particles import Lepton, Photon
from .base import CrossSection, fermion_propagator, photon_propagator, sandwich


class TripletProductionCrossSection(CrossSection):
    name = "TripletProduction"
    description = "gamma e- -> e+ e- e- on a free electron, eight diagrams"
    units = "microbarn/GeV^4/sr"
    incoming = (True, True, False, False, False)
    alpha_power = 3

    def amplitudes(self, g_in: Photon, e_in: Lepton, p_out: Lepton,
                   e_out2: Lepton, e_out3: Lepton) -> np.ndarray:
        """amp[gi, h0, h1, h2, h3] for (g_in, e_in, p_out, e_out2, e_out3)"""
        k = g_in.mom
        p0, p1, p2, p3 = e_in.mom, p_out.mom, e_out2.mom, e_out3.mom
        m = e_in.mass
        u0, v1 = e_in.u_spinors(), p_out.v_spinors()
        u2, u3 = e_out2.u_spinors(), e_out3.u_spinors()

        # lepton propagators; the exchange diagrams reuse these
        cd2a = fermion_propagator(k + p0, m, 2 * k.scalar_prod(p0))
        cd2b = fermion_propagator(p2 - k, m, -2 * k.scalar_prod(p2))
        bh2a = fermion_propagator(k - p1, m, -2 * k.scalar_prod(p1))
        bh2b = fermion_propagator(p3 - k, m, -2 * k.scalar_prod(p3))
        cd3a, cd3b = cd2a, bh2b
        bh3a, bh3b = bh2a, cd2b

        g_cd2 = photon_propagator(p1 + p3)
        g_bh2 = photon_propagator(p0 - p2)
        g_cd3 = photon_propagator(p1 + p2)
        g_bh3 = photon_propagator(p0 - p3)

        amp = np.zeros((2, 2, 2, 2, 2), dtype=complex)
        for gi in range(2):
            eps = DiracMatrix.slash(g_in.eps(gi + 1))
            for mu in range(4):
                gmu = DiracMatrix.gamma(mu)
                cd2 = (gmu @ cd2a @ eps + eps @ cd2b @ gmu) * g_cd2
                bh2 = (gmu @ bh2a @ eps + eps @ bh2b @ gmu) * g_bh2
                cd3 = (gmu @ cd3a @ eps + eps @ cd3b @ gmu) * g_cd3
                bh3 = (gmu @ bh3a @ eps + eps @ bh3b @ gmu) * g_bh3
                # a, b, c, d = h0, h1, h2, h3
                amp[gi] += METRIC_SIGN[mu] * (
                    np.einsum("db,ca->abcd", sandwich(u3, gmu, v1), sandwich(u2, cd2, u0))
                    - np.einsum("cb,da->abcd", sandwich(u2, gmu, v1), sandwich(u3, cd3, u0))
                    + np.einsum("ca,db->abcd", sandwich(u2, gmu, u0), sandwich(u3, bh2, v1))
                    - np.einsum("da,cb->abcd", sandwich(u3, gmu, u0), sandwich(u2, bh3, v1))
                )
        return amp

    def kinematic_factor(self, g_in: Photon, e_in: Lepton, p_out: Lepton,
                         e_out2: Lepton, e_out3: Lepton) -> float:
        flux = 4 * g_in.mom.E * (e_in.mom.magnitude + e_in.mom.E)
        rho = 1 / (8 * e_out3.mom.E * (p_out.mom + e_out2.mom).magnitude)
        pi_factor = (2 * math.pi) ** -5 * (4 * math.pi) ** 3
        return pi_factor * rho / flux


TRIPLET_PRODUCTION = TripletProductionCrossSection()


def triplet_production(g_in: Photon, e_in: Lepton, p_out: Lepton,
                       e_out2: Lepton, e_out3: Lepton) -> float:
    """
    Polarized triplet production d(sigma)/(dE dphi d^3q) in microbarn/GeV^4/sr,
    in the frame the four-momenta are given in.
    """
    return TRIPLET_PRODUCTION(g_in, e_in, p_out, e_out2, e_out3)
