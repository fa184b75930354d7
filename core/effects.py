"""
Decorative animation helpers for the Meditate page.
Pure geometry so the painting widget stays small.
"""

import math
import random
from typing import List, Optional, Tuple

Particle = Tuple[float, float, float]  # x, y, opacity


def generate_particles(
    intensity: float,
    width: float,
    height: float,
    rng: Optional[random.Random] = None
) -> List[Particle]:
    """Scatter ``int(intensity * 100)`` faint particles over the area."""
    rng = rng or random
    count = int(max(0.0, min(1.0, intensity)) * 100)
    return [
        (rng.uniform(0, width), rng.uniform(0, height), rng.uniform(0.1, 0.3))
        for _ in range(count)
    ]


def flowing_wave_points(width: float, height: float, phase: float, step: int = 5) -> List[Tuple[float, float]]:
    """Sample the top edge of the flowing shape every ``step`` pixels."""
    if width <= 0:
        return []
    mid_height = height / 2
    points = []
    x = 0.0
    while x <= width:
        relative_x = x / width
        sine = math.sin(relative_x * 7 * math.pi * 0.3 + phase)
        points.append((x, mid_height + sine / 0.7 * 20))
        x += step
    return points
