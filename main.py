"""
Dynamic sky — command-line simulation.

Runs the sky for a span of simulated time and prints one row per tick:
sun day angle, phase, light colour, haze colour, star alpha and moon light.

    python main.py --start 2008-06-21T00:00 --lat 0.7 --hours 24 --speed 5
"""
import argparse
from datetime import datetime, timezone

from atmosphere import Atmosphere, SkyDome, SkyModelConfig, ExposureMode
from core.time_controller import SPEEDS, TimeController
from core.types import AmbientLightState, SiteLocation
from universe import CelestialObserver


def _fmt(color) -> str:
    return "(" + ", ".join(f"{c:.2f}" for c in color[:3]) + ")"


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Simulate the dynamic sky over time")
    p.add_argument("--start", default="2008-06-21T00:00",
                   help="UTC start, ISO format (default: %(default)s)")
    p.add_argument("--lat", type=float, default=0.7, help="site latitude, radians")
    p.add_argument("--lon", type=float, default=0.0, help="site longitude, radians")
    p.add_argument("--hours", type=float, default=24.0, help="simulated span")
    p.add_argument("--speed", type=int, default=5,
                   help=f"index into {SPEEDS} (simulated s per wall s, default: %(default)s = 1h/s)")
    p.add_argument("--frame", type=float, default=1.0, help="wall seconds per tick")
    p.add_argument("--reverse", action="store_true", help="run time backwards")
    p.add_argument("--turbidity", type=float, default=2.95)
    p.add_argument("--overcast", type=float, default=0.45)
    p.add_argument("--exposure", type=float, default=21.0)
    p.add_argument("--linear", action="store_true", help="linear exposure control")
    p.add_argument("--gamma", type=float, default=1.09)
    p.add_argument("--no-moon", action="store_true")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    start = datetime.fromisoformat(args.start)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    site = SiteLocation(latitude_rad=args.lat, longitude_rad=args.lon)

    config = SkyModelConfig()
    config.set_turbidity(args.turbidity)
    config.set_overcast(args.overcast)
    config.set_exposure(ExposureMode.LINEAR if args.linear else ExposureMode.EXPONENTIAL,
                        args.exposure)
    config.set_gamma_correction(args.gamma)

    dome = SkyDome(config=config, ambient=AmbientLightState())
    dome.add_sun(CelestialObserver(start, body="sun", site=site))
    if not args.no_moon:
        dome.add_moon(CelestialObserver(start, body="moon", site=site))
    dome.create_stars()
    atmosphere = Atmosphere(dome)

    clock = TimeController(start, speed_idx=args.speed)
    if args.reverse:
        clock.reverse()
    per_tick = abs(clock.speed) * args.frame
    ticks = int(args.hours * 3600 // per_tick) if per_tick > 0 else 0

    print(f"Sky simulation from {start:%Y-%m-%d %H:%M} UTC, "
          f"site lat={args.lat:.3f} lon={args.lon:.3f}, {clock.speed_label}")
    print(f"  {'time':>16}  {'sun lat':>8}  {'sun lon':>8}  {'phase':>5}  {'sunlight':>18}  "
          f"{'haze':>18}  {'stars':>6}  moonlight")

    for _ in range(ticks):
        hh, mm, ss = clock.step(args.frame)
        frame = dome.update(args.frame, hh, mm, ss)
        atmosphere.update(args.frame, hh, mm, ss)
        sun = dome.get_sun(0)
        moon_light = _fmt(dome.get_moon(0).light.diffuse) if not args.no_moon else "-"
        print(f"  {sun.observer.current_time:%Y-%m-%d %H:%M}  {sun.latitude:8.3f}  {sun.longitude:8.3f}  "
              f"{sun.phase.value:>5}  {_fmt(sun.light.diffuse):>18}  "
              f"{_fmt(frame.haze_color):>18}  {frame.star_alpha:6.2f}  {moon_light}")

    atmosphere.cleanup()
    return clock


if __name__ == "__main__":
    main()
