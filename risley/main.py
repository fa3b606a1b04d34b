import os
import pprint
import logging
from .utils.csv_loader import PresetManager
from .config.simulation_config import SimulationConfig
from .geometry.inverse_kinematics import TargetError
from .simulation.controller import SimulationController
from .utils.coordinate_transforms import ScreenMapping, rad_to_deg
from .utils.report import format_report, write_report
from .utils.logging_config import setup_logging, get_logger

logger = get_logger(__name__)

FRAME_DT = 0.016  # s, one display frame

def main():
    """
    Demo run: load a preset, place targets, animate the prisms and export a report.
    """
    # --- Setup ---
    setup_logging(level=logging.INFO)

    script_dir = os.path.dirname(__file__)
    csv_path = os.path.join(script_dir, '..', 'data', 'prism_presets.csv')
    preset_name = "N-BK7 11.4deg 1in"

    print("--- Risley Prism Inverse Kinematics ---")
    print(f"Loading presets from: {os.path.abspath(csv_path)}")
    print(f"Preset: {preset_name}\n")

    try:
        presets = PresetManager(csv_path)
        params = presets.get_parameters(preset_name)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error during preset loading: {e}")
        return

    controller = SimulationController(params, SimulationConfig(seed=7))
    print("Scan envelope:")
    pprint.pprint(controller.envelope)
    print("-" * 30)

    # --- Targets ---
    env = controller.envelope
    requests = [
        (env.rmax * 0.5, 0.0),
        (0.0, env.rmax * 0.75),
        (0.0, 0.0),                 # centre defect
        (env.rmax * 1.1, 0.0),      # out of range
    ]
    for x, y in requests:
        try:
            ray = controller.request_target(x, y)
            logger.info(f"Ray {ray.id} at ({x:.1f}, {y:.1f}) mm: "
                        f"theta1={rad_to_deg(ray.theta1):.1f}°, theta2={rad_to_deg(ray.theta2):.1f}°")
        except TargetError as e:
            logger.warning(f"Target ({x:.1f}, {y:.1f}) mm rejected: {e}")

    # A click on a 480 px scan view, converted to mm before it reaches the core
    mapping = ScreenMapping(width=480, height=480, rmax=env.rmax)
    click_x, click_y = mapping.to_mm(150, 380)
    try:
        controller.request_target(click_x, click_y)
    except TargetError as e:
        logger.warning(f"Clicked target rejected: {e}")

    for _ in range(3):
        try:
            controller.add_random_target()
        except TargetError as e:
            logger.warning(f"Random target rejected: {e}")

    # --- Animation ---
    controller.set_animation(True)
    for _ in range(120):
        controller.tick(FRAME_DT)

    snapshot = controller.get_snapshot()
    angle1, angle2 = snapshot.motion_angles
    print(f"\nPrism angles after {120 * FRAME_DT:.2f}s: "
          f"P1={rad_to_deg(angle1):.2f}°, P2={rad_to_deg(angle2):.2f}°")

    # --- Export ---
    print()
    print(format_report(snapshot))
    path = write_report(snapshot)
    print(f"Report written to {path}")

if __name__ == "__main__":
    main()
