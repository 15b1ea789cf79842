"""Small statistics helpers shared by the analyzers."""

import math
import statistics

# Abramowitz-Stegun 7.1.26 coefficients
ERF_A1 = 0.254829592
ERF_A2 = -0.284496736
ERF_A3 = 1.421413741
ERF_A4 = -1.453152027
ERF_A5 = 1.061405429
ERF_P = 0.3275911


def mean(values) -> float:
    values = list(values)
    if not values:
        return 0.0
    return statistics.fmean(values)


def sample_stddev(values) -> float:
    """Standard deviation with n-1 denominator; 0 for fewer than two values."""
    values = list(values)
    if len(values) < 2:
        return 0.0
    return statistics.stdev(values)


def round_half_up(x: float, digits: int = 0) -> float:
    """Round like JavaScript Math.round (halves go towards +inf), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(x * factor + 0.5) / factor


def erf_approx(x: float) -> float:
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)
    t = 1.0 / (1.0 + ERF_P * x)
    y = 1.0 - (((((ERF_A5 * t + ERF_A4) * t) + ERF_A3) * t + ERF_A2) * t + ERF_A1) * t * math.exp(-x * x)
    return sign * y


def z_to_confidence(z: float) -> int:
    """Percentile of a z-score under the normal curve, truncated and clamped to 50-100."""
    percentile = int(50 + 50 * erf_approx(z / math.sqrt(2)))
    return min(100, max(50, percentile))
