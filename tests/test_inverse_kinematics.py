import math

import numpy as np
import pytest

from risley.config.system_parameters import SystemParameters
from risley.geometry.inverse_kinematics import (
    CenterDefectError,
    InverseKinematicsSolver,
    OutOfRangeError,
    PrismAngles,
    TargetError,
    UnreachableTargetError,
)
from risley.geometry.optical_model import OpticalModel, ScanEnvelope


@pytest.fixture
def envelope():
    return OpticalModel(SystemParameters()).envelope


@pytest.fixture
def solver():
    return InverseKinematicsSolver()


def test_angles_match_law_of_cosines(envelope, solver):
    x, y = 12.0, 9.0
    r = 15.0
    A, B = envelope.r1 + envelope.rd, envelope.r2
    bearing = math.atan2(y, x)

    angles = solver.solve(x, y, envelope)

    assert isinstance(angles, PrismAngles)
    assert angles.theta1 == pytest.approx(math.acos((r**2 + A**2 - B**2) / (2 * A * r)) + bearing)
    assert angles.theta2 == pytest.approx(math.acos((r**2 - A**2 + B**2) / (2 * B * r)) + bearing)


def test_round_trip_through_forward_relation(envelope, solver):
    rng = np.random.default_rng(1234)
    span = envelope.rmax - envelope.rd
    radii = envelope.rd + span * rng.uniform(0.02, 0.98, size=200)
    bearings = rng.uniform(-np.pi, np.pi, size=200)

    for r, phi in zip(radii, bearings):
        x, y = r * np.cos(phi), r * np.sin(phi)
        theta1, theta2 = solver.solve(x, y, envelope)
        x_back, y_back = solver.locate(theta1, theta2, envelope)
        assert x_back == pytest.approx(x, abs=1e-6)
        assert y_back == pytest.approx(y, abs=1e-6)


def test_boundary_circles_do_not_produce_nan(envelope, solver):
    for r in (envelope.rd, envelope.rmax):
        for phi in np.linspace(0, 2 * np.pi, 17):
            theta1, theta2 = solver.solve(r * np.cos(phi), r * np.sin(phi), envelope)
            assert np.isfinite(theta1)
            assert np.isfinite(theta2)


def test_outer_boundary_points_both_prisms_along_bearing(envelope, solver):
    theta1, theta2 = solver.solve(0.0, envelope.rmax, envelope)
    assert theta1 == pytest.approx(math.pi / 2, abs=1e-6)
    assert theta2 == pytest.approx(math.pi / 2, abs=1e-6)


def test_centre_defect_rejected(envelope, solver):
    rng = np.random.default_rng(7)
    for _ in range(50):
        r = envelope.rd * rng.uniform(0.0, 0.999)
        phi = rng.uniform(0, 2 * np.pi)
        with pytest.raises(CenterDefectError) as exc_info:
            solver.solve(r * np.cos(phi), r * np.sin(phi), envelope)
        assert exc_info.value.limit == envelope.rd


def test_out_of_range_rejected(envelope, solver):
    rng = np.random.default_rng(8)
    for _ in range(50):
        r = envelope.rmax * rng.uniform(1.001, 3.0)
        phi = rng.uniform(0, 2 * np.pi)
        with pytest.raises(OutOfRangeError) as exc_info:
            solver.solve(r * np.cos(phi), r * np.sin(phi), envelope)
        assert exc_info.value.radius > envelope.rmax


def test_error_hierarchy():
    assert issubclass(CenterDefectError, UnreachableTargetError)
    assert issubclass(OutOfRangeError, UnreachableTargetError)
    assert issubclass(UnreachableTargetError, TargetError)


def test_origin_with_centre_defect_fails(envelope, solver):
    assert envelope.rd > 0
    with pytest.raises(CenterDefectError):
        solver.solve(0.0, 0.0, envelope)


def test_origin_without_centre_defect_is_home(solver):
    env = ScanEnvelope(r1=10.0, r2=10.0, rd=0.0, rmax=20.0)
    assert solver.solve(0.0, 0.0, env) == (0.0, 0.0)


@pytest.mark.parametrize("x, y", [
    (float('nan'), 0.0),
    (0.0, float('nan')),
    (float('inf'), 0.0),
    (-float('inf'), float('nan')),
])
def test_non_finite_target_rejected(envelope, solver, x, y):
    with pytest.raises(UnreachableTargetError):
        solver.solve(x, y, envelope)


def test_every_bearing_on_outer_circle_is_reachable(envelope, solver):
    # hypot(rmax cos phi, rmax sin phi) can round a few ulps past rmax
    for phi in np.linspace(0.0, 2 * np.pi, 1000, endpoint=False):
        x, y = envelope.rmax * np.cos(phi), envelope.rmax * np.sin(phi)
        theta1, theta2 = solver.solve(x, y, envelope)
        assert np.isfinite(theta1)
        assert np.isfinite(theta2)


def test_every_bearing_on_centre_defect_circle_is_reachable(envelope, solver):
    for phi in np.linspace(0.0, 2 * np.pi, 1000, endpoint=False):
        x, y = envelope.rd * np.cos(phi), envelope.rd * np.sin(phi)
        theta1, theta2 = solver.solve(x, y, envelope)
        assert np.isfinite(theta1)
        assert np.isfinite(theta2)


def test_boundary_tolerance_is_only_a_few_ulps(envelope, solver):
    with pytest.raises(OutOfRangeError):
        solver.solve(envelope.rmax * (1 + 1e-9), 0.0, envelope)
    with pytest.raises(CenterDefectError):
        solver.solve(envelope.rd * (1 - 1e-9), 0.0, envelope)


def test_forward_relation_with_tiny_centre_defect(solver):
    env = ScanEnvelope(r1=15.0, r2=15.0, rd=1e-4, rmax=30.0001)
    theta1, theta2 = solver.solve(10.0, 5.0, env)
    x, y = solver.locate(theta1, theta2, env)
    assert x == pytest.approx(10.0, abs=1e-5)
    assert y == pytest.approx(5.0, abs=1e-5)


def test_forward_relation_is_degenerate_without_centre_defect(solver):
    env = ScanEnvelope(r1=10.0, r2=10.0, rd=0.0, rmax=20.0)
    theta1, theta2 = solver.solve(5.0, 5.0, env)
    with pytest.raises(ValueError):
        solver.locate(theta1, theta2, env)


def test_forward_relation_rejects_impossible_pair(envelope, solver):
    # theta1 - theta2 must lie in [-pi, 0]
    with pytest.raises(ValueError):
        solver.locate(1.0, 0.5, envelope)
