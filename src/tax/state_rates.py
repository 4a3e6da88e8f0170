"""Flat state income tax rates used by the estimator.

Rates are percentages (``Decimal("4.4")`` means 4.4%). The estimator applies
one flat rate per state; states without a wage income tax carry ``0`` and
are still valid selections.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType

from src.core.config import settings

DEFAULT_STATE_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        code: Decimal(rate)
        for code, rate in {
            "AL": "5.0",
            "AK": "0",
            "AZ": "2.5",
            "AR": "3.9",
            "CA": "13.3",
            "CO": "4.4",
            "CT": "6.99",
            "DE": "6.6",
            "DC": "10.75",
            "FL": "0",
            "GA": "5.39",
            "HI": "11.0",
            "ID": "5.695",
            "IL": "4.95",
            "IN": "3.0",
            "IA": "3.8",
            "KS": "5.58",
            "KY": "4.0",
            "LA": "3.0",
            "ME": "7.15",
            "MD": "5.75",
            "MA": "5.0",
            "MI": "4.25",
            "MN": "9.85",
            "MS": "4.4",
            "MO": "4.7",
            "MT": "5.9",
            "NE": "5.2",
            "NV": "0",
            "NH": "0",
            "NJ": "10.75",
            "NM": "5.9",
            "NY": "10.9",
            "NC": "4.25",
            "ND": "2.5",
            "OH": "3.5",
            "OK": "4.75",
            "OR": "9.9",
            "PA": "3.07",
            "RI": "5.99",
            "SC": "6.2",
            "SD": "0",
            "TN": "0",
            "TX": "0",
            "UT": "4.55",
            "VT": "8.75",
            "VA": "5.75",
            "WA": "0",
            "WV": "4.82",
            "WI": "7.65",
            "WY": "0",
        }.items()
    }
)


def normalize_state_code(state: str | None) -> str:
    """Trim and upper-case a state selection; ``None`` becomes ``""``."""
    return (state or "").strip().upper()


def get_state_rates() -> Mapping[str, Decimal]:
    """Return the active state rate table.

    The configured ``STATE_RATES`` override replaces the built-in table
    entirely when set.
    """
    if settings.state_rates is not None:
        return MappingProxyType(dict(settings.state_rates))
    return DEFAULT_STATE_RATES
