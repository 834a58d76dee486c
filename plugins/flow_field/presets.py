"""
Flow Field Configuration and Presets

DEFAULT_CONFIG holds the startup value of every knob. Each preset is a
partial override known to produce a distinctive look; applying one merges
it into the current config and regenerates the noise.
"""

DEFAULT_CONFIG = {
    # Particles
    "particle_count": 20000,
    "particle_speed": 0.5,
    "particle_speed_variation": 0.5,
    # Flow field
    "noise_scale": 0.003,
    "noise_octaves": 1,
    "noise_evolution": 0.0,
    # Shape deflection
    "sdf_strength": 1.0,
    "sdf_falloff": 50.0,
    # Rendering
    "stroke_alpha": 0.05,
    "line_width": 0.8,
    "fade_amount": 0.0,
    # Color
    "hue": 0,
    "saturation": 0,
    "lightness": 100,
    "color_mode": "solid",
    # Animation
    "paused": False,
}

PRESETS = {
    "classic_smoke": {
        "name": "Classic Smoke",
        "description": "White wisps on black, single octave",
        "particle_count": 20000, "particle_speed": 2.0,
        "noise_scale": 0.003, "noise_octaves": 1, "noise_evolution": 0.0,
        "stroke_alpha": 0.05, "line_width": 0.8,
        "hue": 0, "saturation": 0, "lightness": 100,
        "color_mode": "solid", "fade_amount": 0.0,
    },
    "ocean_waves": {
        "name": "Ocean Waves",
        "description": "Slowly drifting blue swells",
        "particle_count": 15000, "particle_speed": 1.5,
        "noise_scale": 0.004, "noise_octaves": 2, "noise_evolution": 0.001,
        "stroke_alpha": 0.06, "line_width": 1.0,
        "hue": 200, "saturation": 70, "lightness": 60,
        "color_mode": "solid", "fade_amount": 0.002,
    },
    "fire_storm": {
        "name": "Fire Storm",
        "description": "Fast orange turbulence with a warm hue spread",
        "particle_count": 25000, "particle_speed": 3.0,
        "noise_scale": 0.005, "noise_octaves": 3, "noise_evolution": 0.003,
        "stroke_alpha": 0.04, "line_width": 0.6,
        "hue": 20, "saturation": 100, "lightness": 50,
        "color_mode": "gradient", "fade_amount": 0.005,
    },
    "aurora": {
        "name": "Aurora",
        "description": "Soft multi-octave curtains in rainbow color",
        "particle_count": 12000, "particle_speed": 1.0,
        "noise_scale": 0.002, "noise_octaves": 4, "noise_evolution": 0.0005,
        "stroke_alpha": 0.08, "line_width": 1.2,
        "hue": 150, "saturation": 80, "lightness": 60,
        "color_mode": "rainbow", "fade_amount": 0.001,
    },
    "silk_threads": {
        "name": "Silk Threads",
        "description": "Fine slow violet threads",
        "particle_count": 8000, "particle_speed": 0.5,
        "noise_scale": 0.001, "noise_octaves": 2, "noise_evolution": 0.0,
        "stroke_alpha": 0.15, "line_width": 0.3,
        "hue": 280, "saturation": 40, "lightness": 80,
        "color_mode": "solid", "fade_amount": 0.0,
    },
    "chaos": {
        "name": "Chaos",
        "description": "Dense high-frequency six-octave noise",
        "particle_count": 50000, "particle_speed": 5.0,
        "noise_scale": 0.015, "noise_octaves": 6, "noise_evolution": 0.005,
        "stroke_alpha": 0.02, "line_width": 0.5,
        "hue": 0, "saturation": 0, "lightness": 100,
        "color_mode": "rainbow", "fade_amount": 0.01,
    },
}

# Shown in the panel; number keys 1-6 map here
PRESET_ORDER = [
    "classic_smoke", "ocean_waves", "fire_storm",
    "aurora", "silk_threads", "chaos",
]

# Panel sliders, grouped by section
SLIDER_DEFS = [
    {"key": "particle_count", "label": "Particle count", "section": "PARTICLES",
     "min": 1000, "max": 100000, "default": 20000, "fmt": ".0f", "step": 1000},
    {"key": "particle_speed", "label": "Speed", "section": "PARTICLES",
     "min": 0.1, "max": 10.0, "default": 0.5, "fmt": ".1f", "step": 0.1},
    {"key": "particle_speed_variation", "label": "Speed variation", "section": "PARTICLES",
     "min": 0.0, "max": 5.0, "default": 0.5, "fmt": ".1f", "step": 0.1},

    {"key": "noise_scale", "label": "Noise scale", "section": "FLOW FIELD",
     "min": 0.0005, "max": 0.02, "default": 0.003, "fmt": ".4f", "step": 0.0005},
    {"key": "noise_octaves", "label": "Octaves", "section": "FLOW FIELD",
     "min": 1, "max": 6, "default": 1, "fmt": ".0f", "step": 1},
    {"key": "noise_evolution", "label": "Evolution", "section": "FLOW FIELD",
     "min": 0.0, "max": 0.01, "default": 0.0, "fmt": ".4f", "step": 0.0005},

    {"key": "sdf_strength", "label": "Shape strength", "section": "SHAPE",
     "min": 0.0, "max": 2.0, "default": 1.0, "fmt": ".2f", "step": 0.05},
    {"key": "sdf_falloff", "label": "Shape falloff", "section": "SHAPE",
     "min": 1.0, "max": 200.0, "default": 50.0, "fmt": ".0f", "step": 1},

    {"key": "stroke_alpha", "label": "Stroke opacity", "section": "RENDERING",
     "min": 0.01, "max": 0.3, "default": 0.05, "fmt": ".2f", "step": 0.01},
    {"key": "line_width", "label": "Line width", "section": "RENDERING",
     "min": 0.1, "max": 3.0, "default": 0.8, "fmt": ".1f", "step": 0.1},
    {"key": "fade_amount", "label": "Trail fade", "section": "RENDERING",
     "min": 0.0, "max": 0.1, "default": 0.0, "fmt": ".3f", "step": 0.005},

    {"key": "hue", "label": "Hue", "section": "COLOR",
     "min": 0, "max": 360, "default": 0, "fmt": ".0f", "step": 1},
    {"key": "saturation", "label": "Saturation", "section": "COLOR",
     "min": 0, "max": 100, "default": 0, "fmt": ".0f", "step": 1},
    {"key": "lightness", "label": "Lightness", "section": "COLOR",
     "min": 0, "max": 100, "default": 100, "fmt": ".0f", "step": 1},
]

# Preset metadata, not config
_META_KEYS = ("name", "description")


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def merge_preset(config, name):
    """Return a copy of config with the preset's values applied."""
    preset = get_preset(name)
    merged = dict(config)
    if preset is None:
        return merged
    merged.update({k: v for k, v in preset.items() if k not in _META_KEYS})
    return merged


def list_presets():
    """Return list of (key, name, description) in panel order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
