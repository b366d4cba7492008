"""Variate mapping: turn uniform(0, 1) samples into exponential, uniform or normal times."""

from __future__ import annotations

import math

import numpy as np

from sim.errors import ConfigurationError

UNIFORM_EPSILON = 1e-9

# Service distributions understood by the generator
DIST_NORMAL = "normal"
DIST_UNIFORM = "uniform"
DIST_EXPONENTIAL = "exponential"
SERVICE_DISTRIBUTIONS = (DIST_NORMAL, DIST_UNIFORM, DIST_EXPONENTIAL)

# Uniforms consumed per service sample
UNIFORMS_PER_SAMPLE = {DIST_NORMAL: 2, DIST_UNIFORM: 1, DIST_EXPONENTIAL: 1}


def make_rng(seed: int | None) -> np.random.Generator | None:
    """Private generator for one run; None leaves draws on the process-level source."""
    if seed is None:
        return None
    return np.random.default_rng(seed)


def draw_uniforms(count: int, rng: np.random.Generator | None = None) -> list[float]:
    """Draw `count` uniforms from `rng`, or from np.random when no generator is given."""
    if rng is None:
        return [float(u) for u in np.random.random_sample(count)]
    return [float(u) for u in rng.random(count)]


def clamp_uniform(u: float) -> float:
    return min(max(float(u), UNIFORM_EPSILON), 1.0 - UNIFORM_EPSILON)


def exponential_from_uniform(u: float, mean: float) -> float:
    """Inverse-CDF exponential: T = -mean * ln(u). Inter-arrival time of a Poisson process."""
    return -mean * math.log(clamp_uniform(u))


def uniform_from_uniform(u: float, low: float, high: float) -> float:
    if high <= low:
        raise ConfigurationError(f"uniform range requires max > min (got min={low}, max={high})")
    return low + (high - low) * clamp_uniform(u)


def normal_from_uniforms(u1: float, u2: float, mean: float, stdev: float) -> float:
    """Box-Muller on a pair of uniforms, truncated at zero (durations cannot be negative)."""
    z = math.sqrt(-2.0 * math.log(clamp_uniform(u1))) * math.cos(2.0 * math.pi * clamp_uniform(u2))
    return max(0.0, z * stdev + mean)


def service_from_uniforms(
    uniforms: list[float] | tuple[float, ...],
    distribution: str,
    mean: float,
    stdev: float,
    low: float,
    high: float,
) -> float:
    """Map the uniforms belonging to one client into a service duration."""
    if distribution == DIST_NORMAL:
        return normal_from_uniforms(uniforms[0], uniforms[1], mean, stdev)
    if distribution == DIST_UNIFORM:
        return uniform_from_uniform(uniforms[0], low, high)
    if distribution == DIST_EXPONENTIAL:
        return exponential_from_uniform(uniforms[0], mean)
    raise ConfigurationError(f"service_distribution must be one of {SERVICE_DISTRIBUTIONS}")
