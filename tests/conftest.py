"""
Shared fixtures: on-shell kinematic points for every reaction.

Momenta are in GeV. Points come from the seeded `rng` fixture: the
momentum-conserving reactions through the phase-space generator,
bremsstrahlung and pair production as random directions and energy splits
(they only conserve energy, the static field takes the recoil).
"""
import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from qedx.constants import CONSTANTS
from qedx.kinematics import FourVector, isotropic_direction
from qedx.particles import Lepton, Photon
from qedx.phase_space import generate_n_body

M_E = CONSTANTS.electron_mass


def photon_along(k, theta, phi):
    st = math.sin(theta)
    return Photon(k * st * math.cos(phi), k * st * math.sin(phi), k * math.cos(theta))


def electron_with_energy(E, theta, phi):
    p = math.sqrt(E**2 - M_E**2)
    st = math.sin(theta)
    return Lepton.electron(p * st * math.cos(phi), p * st * math.sin(phi), p * math.cos(theta))


@pytest.fixture
def rng(request):
    """Seeded generator; tests may pass another seed with indirect parametrization."""
    return np.random.default_rng(getattr(request, "param", 20240611))


@pytest.fixture
def klein_nishina_point():
    """1 MeV photon on an electron at rest, scattered by 90 degrees into +x."""
    k = 1e-3
    k_prime = k / (1 + k / M_E)
    g_in = Photon(0.0, 0.0, k)
    e_in = Lepton.electron()
    g_out = Photon(k_prime, 0.0, 0.0)
    e_out = Lepton.electron(-k_prime, 0.0, k)
    return g_in, e_in, g_out, e_out


@pytest.fixture
def compton_point(rng):
    g_in = Photon(0.0, 0.002, 0.01)
    e_in = Lepton.electron(0.0, 0.0, -0.003)
    (k_out, p_out), _ = generate_n_body(g_in.mom + e_in.mom, [0.0, M_E], rng)
    return g_in, e_in, Photon.from_momentum(k_out), Lepton.from_momentum(p_out, M_E)


def _random_angles(rng):
    n = isotropic_direction(rng)
    return n.polar_angle(), n.azimuth()


@pytest.fixture
def bremsstrahlung_point(rng):
    e_in = Lepton.electron(0.0, 0.0, 0.1)
    g_out = photon_along(rng.uniform(0.005, 0.09), *_random_angles(rng))
    e_out = electron_with_energy(e_in.mom.E - g_out.mom.E, *_random_angles(rng))
    return e_in, e_out, g_out


@pytest.fixture
def pair_production_point(rng):
    g_in = Photon(0.0, 0.0, 0.1)
    E_minus = rng.uniform(0.01, 0.09)
    e_out = electron_with_energy(E_minus, *_random_angles(rng))
    p_out = electron_with_energy(g_in.mom.E - E_minus, *_random_angles(rng))
    return g_in, e_out, p_out


@pytest.fixture
def triplet_point(rng):
    g_in = Photon(0.0, 0.0, 0.02)
    e_in = Lepton.electron()
    finals, _ = generate_n_body(g_in.mom + e_in.mom, [M_E, M_E, M_E], rng)
    p_out, e_out2, e_out3 = (Lepton.from_momentum(p, M_E) for p in finals)
    return g_in, e_in, p_out, e_out2, e_out3


@pytest.fixture
def ee_bremsstrahlung_point(rng):
    e_in0 = Lepton.electron(0.0, 0.0, 0.01)
    e_in1 = Lepton.electron()
    (p2, p3, k), _ = generate_n_body(e_in0.mom + e_in1.mom, [M_E, M_E, 0.0], rng)
    return (e_in0, e_in1, Lepton.from_momentum(p2, M_E), Lepton.from_momentum(p3, M_E),
            Photon.from_momentum(k))


@pytest.fixture
def zero_vector():
    return FourVector(0.0, 0.0, 0.0, 0.0)
