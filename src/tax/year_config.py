"""Federal income tax bracket tables by tax year.

Each table is stored as published: ascending upper limits, the marginal
rate inside the bracket, and the cumulative tax owed at the bracket's lower
boundary. The cumulative bases are kept verbatim rather than derived so a
lookup never has to walk the lower brackets.

Example:
    >>> from src.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2025)
    >>> config.single_brackets[0].upper_limit
    Decimal('11925')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TaxBracket:
    """One row of a progressive bracket table.

    Attributes:
        upper_limit: Highest taxable income in this bracket; None is unbounded.
        marginal_rate: Rate applied to income inside the bracket (0.22 = 22%).
        cumulative_base_tax: Tax owed on all income up to the previous limit.
    """

    upper_limit: Decimal | None
    marginal_rate: Decimal
    cumulative_base_tax: Decimal


def _validate_brackets(brackets: tuple[TaxBracket, ...], label: str) -> None:
    """Check ordering: strictly increasing limits, a single unbounded last row."""
    if not brackets:
        raise ValueError(f"{label}: bracket table is empty")
    if brackets[-1].upper_limit is not None:
        raise ValueError(f"{label}: last bracket must be unbounded")

    previous = Decimal("0")
    for bracket in brackets[:-1]:
        if bracket.upper_limit is None:
            raise ValueError(f"{label}: only the last bracket may be unbounded")
        if bracket.upper_limit <= previous:
            raise ValueError(
                f"{label}: upper limits must be strictly increasing "
                f"({bracket.upper_limit} after {previous})"
            )
        previous = bracket.upper_limit


@dataclass(frozen=True)
class TaxYearConfig:
    """Federal bracket tables for one tax year.

    Attributes:
        tax_year: The tax year these tables apply to.
        single_brackets: Brackets for single filers.
        mfj_brackets: Brackets for married filing jointly.
    """

    tax_year: int
    single_brackets: tuple[TaxBracket, ...]
    mfj_brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        _validate_brackets(self.single_brackets, f"{self.tax_year} single")
        _validate_brackets(self.mfj_brackets, f"{self.tax_year} mfj")


def _table(*rows: tuple[str | None, str, str]) -> tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(
            upper_limit=None if limit is None else Decimal(limit),
            marginal_rate=Decimal(rate),
            cumulative_base_tax=Decimal(base),
        )
        for limit, rate, base in rows
    )


# 2024 - IRS Rev. Proc. 2023-34
TAX_YEAR_2024 = TaxYearConfig(
    tax_year=2024,
    single_brackets=_table(
        ("11600", "0.10", "0"),
        ("47150", "0.12", "1160"),
        ("100525", "0.22", "5426"),
        ("191950", "0.24", "17168.5"),
        ("243725", "0.32", "39110.5"),
        ("609350", "0.35", "55678.5"),
        (None, "0.37", "183647.25"),
    ),
    mfj_brackets=_table(
        ("23200", "0.10", "0"),
        ("94300", "0.12", "2320"),
        ("201050", "0.22", "10852"),
        ("383900", "0.24", "34337"),
        ("487450", "0.32", "78221"),
        ("731200", "0.35", "111357"),
        (None, "0.37", "196669.5"),
    ),
)

# 2025 - IRS Rev. Proc. 2024-40
TAX_YEAR_2025 = TaxYearConfig(
    tax_year=2025,
    single_brackets=_table(
        ("11925", "0.10", "0"),
        ("48475", "0.12", "1192.5"),
        ("103350", "0.22", "5578.5"),
        ("197300", "0.24", "17651"),
        ("250525", "0.32", "40199"),
        ("626350", "0.35", "57231"),
        (None, "0.37", "188769.75"),
    ),
    mfj_brackets=_table(
        ("23850", "0.10", "0"),
        ("96950", "0.12", "2385"),
        ("206700", "0.22", "11157"),
        ("394600", "0.24", "35302"),
        ("501050", "0.32", "80398"),
        ("751600", "0.35", "114462"),
        (None, "0.37", "202154.5"),
    ),
)

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2024: TAX_YEAR_2024,
    2025: TAX_YEAR_2025,
}


def get_tax_year_config(year: int) -> TaxYearConfig:
    """Get the bracket tables for a specific tax year.

    Args:
        year: The tax year (e.g., 2025).

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        ValueError: If no configuration exists for the requested year.
    """
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ValueError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]
