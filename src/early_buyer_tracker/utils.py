"""
Utility functions for amount parsing, classification and aggregation.
"""

from typing import Any, Dict, Iterable, Optional
import math
import logging

from .models import AnalysisStats, WalletRow, WalletStatus

# Set up logging
logger = logging.getLogger(__name__)

MIN_MINT_LENGTH = 32
MAX_MINT_LENGTH = 60
MIN_LIMIT = 1
MAX_LIMIT = 100
DEFAULT_LIMIT = 50

# remaining / bought at or above this counts as still holding (fees, dust, rounding)
HOLDING_RATIO = 0.98


def is_valid_mint_address(address: Any) -> bool:
    """Loose check that a value looks like a base58 mint address."""
    return isinstance(address, str) and MIN_MINT_LENGTH <= len(address) <= MAX_MINT_LENGTH


def clamp_limit(limit: Any, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a requested wallet count into [1, 100], falling back to the default."""
    value = to_number(limit)
    if not value:
        value = default
    return int(max(MIN_LIMIT, min(MAX_LIMIT, value)))


def to_number(value: Any) -> Optional[float]:
    """Convert a number or numeric string to a finite float, else None."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def resolve_token_amount(*candidates: Any) -> Optional[float]:
    """
    Resolve a token amount from the provider's competing representations.

    Candidates are tried in order; the first one that converts to a finite
    number wins. Nested objects, booleans and unparsable strings are skipped.
    """
    for candidate in candidates:
        amount = to_number(candidate)
        if amount is not None:
            return amount
    return None


def raw_to_ui_amount(amount: Any, decimals: Any) -> float:
    """Scale a raw integer amount by 10^decimals (decimals default to 0)."""
    raw = to_number(amount) or 0.0
    places = int(to_number(decimals) or 0)
    return raw / (10 ** places) if places else raw


def resolve_supply_amount(value: Optional[Dict[str, Any]]) -> float:
    """Resolve a getTokenSupply value into a human-readable supply."""
    if not isinstance(value, dict):
        return 0.0

    amount = resolve_token_amount(value.get("uiAmount"), value.get("uiAmountString"))
    if amount is not None:
        return amount

    return raw_to_ui_amount(value.get("amount"), value.get("decimals"))


def classify_status(token_bought: Optional[float], remaining: Optional[float]) -> WalletStatus:
    """Classify a wallet by how much of its first buy it still holds."""
    if remaining is None:
        return WalletStatus.NO_ACTIVITY
    if remaining <= 0:
        return WalletStatus.SOLD_ALL

    bought = token_bought or 0
    ratio = remaining / bought if bought > 0 else 1
    return WalletStatus.HOLDING if ratio >= HOLDING_RATIO else WalletStatus.SOLD_PART


def supply_fraction(amount: Optional[float], total_supply: Optional[float]) -> Optional[float]:
    """Fraction of total supply, or None when either side is unknown."""
    if not total_supply or amount is None:
        return None
    return amount / total_supply


def summarize_rows(rows: Iterable[WalletRow], total_supply: float) -> AnalysisStats:
    """Fold wallet rows into summary statistics."""
    bought_sum = 0.0
    remaining_sum = 0.0

    for row in rows:
        bought_sum += to_number(row.token_bought) or 0.0
        remaining_sum += to_number(row.remaining_tokens) or 0.0

    return AnalysisStats(
        total_supply=total_supply,
        early_bought_sum=bought_sum,
        early_remaining_sum=remaining_sum,
    )


def shorten_address(address: str) -> str:
    if len(address) <= 12:
        return address
    return f"{address[:4]}...{address[-4:]}"


def format_number(number: Optional[float], decimals: int = 2) -> str:
    """Format a number with K/M/B suffixes."""
    if number is None:
        return "-"
    try:
        if number == 0:
            return "0"

        num = float(number)

        if abs(num) >= 1_000_000_000:
            return f"{num / 1_000_000_000:.{decimals}f}B"
        elif abs(num) >= 1_000_000:
            return f"{num / 1_000_000:.{decimals}f}M"
        elif abs(num) >= 1_000:
            return f"{num / 1_000:.{decimals}f}K"
        else:
            return f"{num:.{decimals}f}"
    except (ValueError, TypeError, OverflowError) as e:
        logger.warning(f"Error formatting number {number}: {e}")
        return str(number)


def format_percent(fraction: Optional[float], decimals: int = 2) -> str:
    """Format a supply fraction as a percentage."""
    if fraction is None:
        return "-"
    return f"{fraction * 100:.{decimals}f}%"
