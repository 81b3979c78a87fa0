"""
Transfer fee estimation.

A flat base fee plus a proportional component of the transferred amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..runtime.amount import to_minor_units


@dataclass
class FeeParams:
    """Fee schedule, in minor units."""

    # 0.01 whole units
    base_fee: int = 10_000_000
    # proportional part is amount / divisor, i.e. 0.001%
    amount_divisor: int = 100_000


def estimate_fee(amount: Union[str, int], params: Optional[FeeParams] = None) -> int:
    """
    Estimate the fee for transferring an amount.

    Args:
        amount: Whole-unit decimal string, or minor units as int
        params: Fee schedule

    Returns:
        Suggested fee in minor units
    """
    params = params or FeeParams()
    minor = to_minor_units(amount) if isinstance(amount, str) else amount
    return params.base_fee + minor // params.amount_divisor


__all__ = ["FeeParams", "estimate_fee"]
