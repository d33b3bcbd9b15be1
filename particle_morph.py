"""
Hand-Steered Particle Morph

Renders a particle cloud that follows one tracked hand. Pinch to spread,
tilt to rotate, hold still showing 1-4 fingers to draw a digit, and open
the whole hand to return to the selected shape.
"""

import time

from particle_hands import FREE_SHAPES, MorphService, ShapeType
from particle_hands.hand_tracks.hand_tracker import DEFAULT_MODEL_PATH, HandTracker
from particle_hands.hand_tracks.visualization import ParticleDisplay, draw_status
from particle_hands.particles.config import DEFAULT_COLOR, PARTICLE_COUNT


INSTRUCTIONS = """
==================================================
Hand-Steered Particle Morph
==================================================

Move your hand to steer the cloud.
  Pinch / open thumb and index - shrink / spread
  Tilt your hand               - rotate
  Hold still with 1-4 fingers  - show that digit
  Hold still with open hand    - back to your shape

Controls:
  '1'-'5'    - Heart, Flower, Planet, Figure, Burst
  'c'        - Next color
  'f'        - Toggle fullscreen
  'q' or ESC - Quit
"""

SHAPE_KEYS = {ord(str(i + 1)): shape for i, shape in enumerate(FREE_SHAPES)}

# Longest frame step fed to the engine, seconds
MAX_FRAME_DT = 0.1


def run_particle_morph(
    camera_index: int = 0,
    model_path: str = str(DEFAULT_MODEL_PATH),
    particle_count: int = PARTICLE_COUNT,
    shape: ShapeType = ShapeType.HEART,
    color: str = DEFAULT_COLOR,
    width: int = 1280,
    height: int = 720,
    mirror: bool = True,
) -> None:
    """Run the particle morph until the window is closed."""
    print(INSTRUCTIONS)

    service = MorphService(particle_count=particle_count, shape=shape, color=color)
    tracker = HandTracker(model_path=model_path, camera_index=camera_index, mirror=mirror)

    with tracker, ParticleDisplay(width=width, height=height) as display:
        tracker.start()

        start = time.monotonic()
        last = start
        while True:
            now = time.monotonic()
            dt = min(now - last, MAX_FRAME_DT)
            last = now

            output, _ = service.frame(tracker.slot.read(), dt, now - start)

            canvas = display.render(output.positions, output.spin, output.color)
            error = str(tracker.error) if tracker.error else None
            draw_status(canvas, tracker.status, service.observation, output.shape.value, error)

            key = display.show(canvas)
            if key in (ord("q"), 27):
                break
            if key in SHAPE_KEYS:
                service.select_shape(SHAPE_KEYS[key])
            elif key == ord("c"):
                service.cycle_color()
            elif key == ord("f"):
                display.toggle_fullscreen()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Hand-Steered Particle Morph")
    parser.add_argument("-c", "--camera", type=int, default=0, help="Camera index")
    parser.add_argument("-m", "--model", default=str(DEFAULT_MODEL_PATH),
                        help="Path to the MediaPipe hand_landmarker.task model")
    parser.add_argument("-n", "--particles", type=int, default=PARTICLE_COUNT, help="Particle count")
    parser.add_argument("-s", "--shape", default=ShapeType.HEART.value,
                        choices=[s.value for s in FREE_SHAPES], help="Starting shape")
    parser.add_argument("--color", default=DEFAULT_COLOR, help="Base color as #rrggbb")
    parser.add_argument("--width", type=int, default=1280, help="Window width")
    parser.add_argument("--height", type=int, default=720, help="Window height")
    parser.add_argument("--no-mirror", action="store_true", help="Do not mirror hand motion")
    args = parser.parse_args()

    run_particle_morph(
        camera_index=args.camera,
        model_path=args.model,
        particle_count=args.particles,
        shape=ShapeType(args.shape),
        color=args.color,
        width=args.width,
        height=args.height,
        mirror=not args.no_mirror,
    )
