"""
Chi-squared significance testing for 2x2 win/non-win tables.

The test compares the success/failure counts of two groups of decks using
Yates' continuity correction and one degree of freedom.
"""

from scipy.stats import chi2

from .models import SignificanceResult

SIGNIFICANCE_LEVEL = 0.05
MIN_EXPECTED_FREQUENCY = 5
YATES_CORRECTION = 0.5
DEGREES_OF_FREEDOM = 1

INSUFFICIENT_DATA = SignificanceResult(
    p_value=None,
    is_significant=False,
    low_expected_frequency_warning=False,
)


def chi_squared_test(a: int, b: int, c: int, d: int) -> SignificanceResult:
    """
    Run a Yates-corrected chi-squared test on ``[[a, b], [c, d]]``.

    Args:
        a: Successes in group 1
        b: Failures in group 1
        c: Successes in group 2
        d: Failures in group 2

    Returns:
        SignificanceResult; ``p_value`` is None when any row or column
        total is zero

    Raises:
        ValueError: If any count is negative
    """
    if min(a, b, c, d) < 0:
        raise ValueError(f"Contingency counts must be non-negative: {(a, b, c, d)}")

    observed = ((a, b), (c, d))

    row_totals = (a + b, c + d)
    col_totals = (a + c, b + d)
    total = a + b + c + d

    if total == 0 or 0 in row_totals or 0 in col_totals:
        return INSUFFICIENT_DATA

    expected = [
        [row_totals[i] * col_totals[j] / total for j in range(2)]
        for i in range(2)
    ]

    low_expected_frequency = any(
        cell < MIN_EXPECTED_FREQUENCY for row in expected for cell in row
    )

    statistic = 0.0
    for i in range(2):
        for j in range(2):
            if expected[i][j] == 0:
                continue
            deviation = max(0.0, abs(observed[i][j] - expected[i][j]) - YATES_CORRECTION)
            statistic += deviation ** 2 / expected[i][j]

    p_value = 1 - float(chi2.cdf(statistic, DEGREES_OF_FREEDOM))

    return SignificanceResult(
        p_value=p_value,
        is_significant=p_value < SIGNIFICANCE_LEVEL,
        low_expected_frequency_warning=low_expected_frequency,
        statistic=statistic,
    )
