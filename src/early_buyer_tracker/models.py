"""
Data models for early buyer tracking.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class WalletStatus(str, Enum):
    """Holding behaviour of a wallet relative to its first recorded buy."""
    HOLDING = "HOLDING"
    SOLD_PART = "SOLD PART"
    SOLD_ALL = "SOLD ALL"
    NO_ACTIVITY = "NO ACTIVITY"


@dataclass(frozen=True)
class TransferEvent:
    """A single token transfer into a wallet."""
    wallet: str
    signature: str
    block_time: Optional[float] = None
    token_bought: Optional[float] = None

    @property
    def sort_key(self) -> float:
        # Missing timestamps sort as epoch 0
        return self.block_time or 0


@dataclass(frozen=True)
class WalletRow:
    """An early buyer enriched with its current balances."""
    wallet: str
    signature: str
    sol_balance: Optional[float]
    status: WalletStatus
    token_bought: float
    pct_supply_bought: Optional[float]
    remaining_tokens: Optional[float]
    pct_supply_remaining: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wallet": self.wallet,
            "signature": self.signature,
            "sol_balance": self.sol_balance,
            "status": self.status.value,
            "token_bought": self.token_bought,
            "pct_supply_bought": self.pct_supply_bought,
            "remaining_tokens": self.remaining_tokens,
            "pct_supply_remaining": self.pct_supply_remaining,
        }


@dataclass(frozen=True)
class AnalysisStats:
    """Summary statistics over the early buyer rows."""
    total_supply: float
    early_bought_sum: float
    early_remaining_sum: float


@dataclass(frozen=True)
class AnalysisResult:
    """Complete early buyer analysis for one mint."""
    mint: str
    stats: AnalysisStats
    rows: List[WalletRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation using the wire field names."""
        return {
            "mint": self.mint,
            "stats": {
                "total_supply": self.stats.total_supply,
                "early_bought_sum": self.stats.early_bought_sum,
                "early_remaining_sum": self.stats.early_remaining_sum,
            },
            "rows": [row.to_dict() for row in self.rows],
        }
