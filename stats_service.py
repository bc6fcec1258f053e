"""Descriptive statistics, Pearson correlation, a pooled-variance t-test and
simple linear regression over plain numeric sequences.

Nothing here raises on empty or degenerate input. Empty sequences and zero
variance give 0; cases that are mathematically undefined (min/max of nothing,
regression on a constant x) come back as NaN or +/-inf and it is up to the
caller to check before showing them.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

SIGNIFICANCE_CRITICAL_VALUE = 1.96
SIGNIFICANT_P_VALUE = 0.04
NOT_SIGNIFICANT_P_VALUE = 0.20


@dataclass(frozen=True)
class DescriptiveStats:
    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    skewness: float


@dataclass(frozen=True)
class TTestResult:
    t_stat: float
    p_value: float
    group1_mean: float
    group2_mean: float
    significant: bool


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float
    correlation: float
    r_squared: float
    line_points: Tuple[Tuple[float, float], Tuple[float, float]]

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class CorrelationResult:
    feature_a: str
    feature_b: str
    correlation: float


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def mean(values: Sequence[float]) -> float:
    data = _as_array(values)
    if data.size == 0:
        return 0.0
    return float(np.sum(data) / data.size)


def median(values: Sequence[float]) -> float:
    data = np.sort(_as_array(values))
    n = data.size
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 != 0:
        return float(data[mid])
    return float((data[mid - 1] + data[mid]) / 2)


def std_dev(values: Sequence[float], mean_value: float) -> float:
    """Sample standard deviation (n - 1 denominator); 0 for n <= 1."""
    data = _as_array(values)
    if data.size <= 1:
        return 0.0
    variance = np.sum((data - mean_value) ** 2) / (data.size - 1)
    return float(np.sqrt(variance))


def skewness(values: Sequence[float], mean_value: float, std_dev_value: float) -> float:
    """Adjusted Fisher-Pearson skewness; 0 for n < 3 or a zero standard deviation."""
    data = _as_array(values)
    n = data.size
    if n < 3 or std_dev_value == 0:
        return 0.0
    cubed_deviations = np.sum(((data - mean_value) / std_dev_value) ** 3)
    return float((n / ((n - 1) * (n - 2))) * cubed_deviations)


def descriptive_stats(values: Sequence[float]) -> DescriptiveStats:
    """Summary of a numeric sequence. min and max are NaN when it is empty."""
    data = _as_array(values)
    avg = mean(data)
    sd = std_dev(data, avg)
    return DescriptiveStats(
        mean=avg,
        median=median(data),
        std_dev=sd,
        min=float(np.min(data)) if data.size else float('nan'),
        max=float(np.max(data)) if data.size else float('nan'),
        skewness=skewness(data, avg, sd),
    )


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson r. Returns 0 for mismatched or empty input and for zero variance."""
    xs, ys = _as_array(x), _as_array(y)
    if xs.size != ys.size or xs.size == 0:
        return 0.0
    diff_x = xs - mean(xs)
    diff_y = ys - mean(ys)
    numerator = np.sum(diff_x * diff_y)
    denom_x = np.sum(diff_x * diff_x)
    denom_y = np.sum(diff_y * diff_y)
    if denom_x == 0 or denom_y == 0:
        return 0.0
    return float(numerator / np.sqrt(denom_x * denom_y))


def t_test(group1: Sequence[float], group2: Sequence[float]) -> TTestResult:
    """Independent two-sample t-test with pooled variance.

    Significance is |t| > 1.96 whatever the degrees of freedom, and the
    p-value is a two-level placeholder (0.04 or 0.20), not a distribution
    lookup.
    """
    g1, g2 = _as_array(group1), _as_array(group2)
    n1, n2 = g1.size, g2.size
    mean1, mean2 = mean(g1), mean(g2)
    var1 = std_dev(g1, mean1) ** 2
    var2 = std_dev(g2, mean2) ** 2

    with np.errstate(divide='ignore', invalid='ignore'):
        pooled_var = np.float64((n1 - 1) * var1 + (n2 - 1) * var2) / np.float64(n1 + n2 - 2)
        standard_error = np.sqrt(pooled_var * (np.float64(1) / n1 + np.float64(1) / n2))
        t_stat = float(np.float64(mean1 - mean2) / standard_error)

    is_significant = bool(abs(t_stat) > SIGNIFICANCE_CRITICAL_VALUE)
    return TTestResult(
        t_stat=t_stat,
        p_value=SIGNIFICANT_P_VALUE if is_significant else NOT_SIGNIFICANT_P_VALUE,
        group1_mean=mean1,
        group2_mean=mean2,
        significant=is_significant,
    )


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Ordinary least squares fit of y = slope * x + intercept.

    x must have non-zero variance; otherwise slope, intercept and the line
    points are NaN or infinite.
    """
    xs, ys = _as_array(x), _as_array(y)
    mean_x, mean_y = mean(xs), mean(ys)
    numerator = np.sum((xs - mean_x) * (ys - mean_y))
    denominator = np.sum((xs - mean_x) ** 2)

    with np.errstate(divide='ignore', invalid='ignore'):
        slope = float(np.float64(numerator) / np.float64(denominator))
        intercept = float(np.float64(mean_y) - np.float64(slope) * mean_x)
        r = correlation(xs, ys)
        if xs.size:
            min_x, max_x = float(np.min(xs)), float(np.max(xs))
        else:
            min_x = max_x = float('nan')
        line_points = (
            (min_x, float(np.float64(slope) * min_x + intercept)),
            (max_x, float(np.float64(slope) * max_x + intercept)),
        )

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        correlation=r,
        r_squared=r ** 2,
        line_points=line_points,
    )


def correlation_pairs(columns: Sequence[Tuple[str, Sequence[float]]]) -> List[CorrelationResult]:
    """Pearson r for every unordered pair of named columns, in input order."""
    results = []
    for i, (name_a, values_a) in enumerate(columns):
        for name_b, values_b in columns[i + 1:]:
            results.append(CorrelationResult(feature_a=name_a, feature_b=name_b,
                                             correlation=correlation(values_a, values_b)))
    return results
