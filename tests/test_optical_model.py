import math

import numpy as np
import pytest

from risley.config.system_parameters import SystemParameters
from risley.geometry.optical_model import OpticalModel, ScanEnvelope


def test_reference_instrument_matches_closed_form():
    params = SystemParameters.from_degrees(
        11.367, refractive_index=1.516, prism_thickness=8.11,
        prism_separation=10.0, screen_distance=200.0
    )
    env = OpticalModel(params).envelope

    alpha = math.radians(11.367)
    phi_o = (1.516 - 1) * alpha
    expected_r = 200.0 * math.tan(phi_o)
    expected_rd = 2 * 8.11 * math.tan(alpha - alpha / 1.516) + 10.0 * math.tan(phi_o)

    assert env.r1 == pytest.approx(expected_r)
    assert env.r2 == pytest.approx(expected_r)
    assert env.rd == pytest.approx(expected_rd)
    assert env.rmax == pytest.approx(2 * expected_r + expected_rd)


def test_steering_radii_are_equal():
    env = OpticalModel(SystemParameters()).envelope
    assert env.r1 == env.r2


@pytest.mark.parametrize("wedge_deg", [0.5, 2.0, 11.367, 20.0])
@pytest.mark.parametrize("n", [1.2, 1.516, 1.9])
@pytest.mark.parametrize("separation", [0.0, 10.0, 40.0])
def test_envelope_invariants(wedge_deg, n, separation):
    params = SystemParameters.from_degrees(wedge_deg, refractive_index=n, prism_separation=separation)
    env = OpticalModel(params).envelope

    assert env.rmax == env.r1 + env.r2 + env.rd
    assert env.rmax >= env.rd >= 0
    assert env.rmax > 0


def test_recompute_replaces_cached_state():
    model = OpticalModel()
    first = model.envelope

    farther = model.params.with_changes(screen_distance=400.0)
    second = model.recompute(farther)

    assert model.params is farther
    assert model.envelope is second
    assert second.r1 > first.r1
    # rd does not depend on the screen distance
    assert second.rd == pytest.approx(first.rd)


def test_centre_defect_grows_with_separation():
    near = OpticalModel(SystemParameters(prism_separation=0.0)).envelope
    far = OpticalModel(SystemParameters(prism_separation=50.0)).envelope
    assert far.rd > near.rd
    assert far.r1 == pytest.approx(near.r1)


def test_arm_lengths_fold_centre_defect_into_first_arm():
    env = ScanEnvelope(r1=10.0, r2=10.0, rd=2.0, rmax=22.0)
    assert env.arm_lengths == (12.0, 10.0)


def test_vectorised_check_of_screen_distance_scaling():
    distances = np.linspace(50.0, 1000.0, 20)
    radii = np.array([OpticalModel(SystemParameters(screen_distance=z)).envelope.r1 for z in distances])
    # r1 is linear in z
    assert np.allclose(radii / distances, radii[0] / distances[0])
