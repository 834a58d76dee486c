"""
Flow Field Viewer - Entry Point

Usage:
    python -m flow_field [preset] [--window WxH] [--seed N] [--shape PATH]
    python -m flow_field [preset] --snap N [--out PATH]

Examples:
    python -m flow_field
    python -m flow_field aurora --window 1600x900
    python -m flow_field silk_threads --shape logo.png
    python -m flow_field chaos --snap 400 --seed 7 --out chaos.png

Use --list to see all available presets.
"""

import os
import sys

from .presets import PRESET_ORDER, list_presets


def snap(preset, width, height, steps, seed=None, shape_path=None, out=None):
    """Headless mode: run N frames, save a PNG, exit."""
    from .simulator import FlowSimulator

    sim = FlowSimulator(width, height, preset_key=preset, seed=seed)
    if shape_path and not sim.load_shape(shape_path):
        return None

    print(f"  {preset}: running {steps} frames...", end="", flush=True)
    sim.step_n(steps)
    print(" done")

    if out is None:
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        out = os.path.join(screenshots_dir, f"flow-field-{preset}.png")
    return sim.save_image(out)


def parse_args(args):
    """Parse argv into an options dict. Returns None (after printing) on error."""
    opts = {
        "preset": "classic_smoke",
        "width": 1280,
        "height": 720,
        "seed": None,
        "shape": None,
        "snap": 0,
        "out": None,
        "action": "run",
    }
    i = 0
    while i < len(args):
        arg = args[i]
        try:
            if arg == "--window" and i + 1 < len(args):
                parts = args[i + 1].split("x")
                opts["width"], opts["height"] = int(parts[0]), int(parts[1])
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                opts["seed"] = int(args[i + 1])
                i += 2
            elif arg == "--snap" and i + 1 < len(args):
                opts["snap"] = int(args[i + 1])
                i += 2
            elif arg == "--shape" and i + 1 < len(args):
                opts["shape"] = args[i + 1]
                i += 2
            elif arg == "--out" and i + 1 < len(args):
                opts["out"] = args[i + 1]
                i += 2
            elif arg == "--list":
                opts["action"] = "list"
                i += 1
            elif arg in ("--help", "-h"):
                opts["action"] = "help"
                i += 1
            elif arg in PRESET_ORDER:
                opts["preset"] = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available presets")
                return None
        except (ValueError, IndexError):
            print(f"Invalid value for {arg}: {args[i + 1]}")
            return None
    return opts


def main(argv=None):
    opts = parse_args(sys.argv[1:] if argv is None else argv)
    if opts is None:
        return 2

    if opts["action"] == "list":
        print("\nAvailable presets:")
        for key, name, desc in list_presets():
            print(f"    {key:16s} {name:16s} {desc}")
        print()
        return 0
    if opts["action"] == "help":
        print(__doc__)
        return 0

    if opts["snap"] > 0:
        print(f"Headless snap mode: {opts['preset']} @ "
              f"{opts['width']}x{opts['height']}, {opts['snap']} frames")
        path = snap(opts["preset"], opts["width"], opts["height"], opts["snap"],
                    seed=opts["seed"], shape_path=opts["shape"], out=opts["out"])
        return 0 if path else 1

    print("Starting Flow Field Viewer")
    print(f"  Preset: {opts['preset']}")
    print(f"  Window: {opts['width']}x{opts['height']}")
    if opts["shape"]:
        print(f"  Shape: {opts['shape']}")
    print()

    # pygame is only needed for the interactive window
    try:
        from .viewer import Viewer
    except ImportError as e:
        print(f"Interactive viewer unavailable ({e})")
        print("Install the 'viewer' extra, or use --snap N for headless rendering")
        return 1

    viewer = Viewer(
        width=opts["width"],
        height=opts["height"],
        start_preset=opts["preset"],
        seed=opts["seed"],
        shape_path=opts["shape"],
    )
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
