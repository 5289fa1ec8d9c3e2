"""
Per-wallet enrichment with current SOL and token balances.
"""

import asyncio
import itertools
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from .models import TransferEvent, WalletRow
from .utils import classify_status, supply_fraction, to_number

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 5


async def map_limit(items: Sequence[T], limit: int,
                    fn: Callable[[T, int], Awaitable[R]]) -> List[R]:
    """
    Run `fn` over `items` with at most `limit` calls in flight.

    Workers pull the next unclaimed index from a shared counter until the
    items run out. Results are stored by index, so the output order matches
    the input order regardless of completion order.
    """
    results: List[Optional[R]] = [None] * len(items)
    cursor = itertools.count()

    async def worker() -> None:
        while True:
            # next() on a shared counter cannot hand the same index to two workers
            i = next(cursor)
            if i >= len(items):
                return
            results[i] = await fn(items[i], i)

    await asyncio.gather(*(worker() for _ in range(max(1, limit))))
    return results


async def _fetch_or_none(label: str, wallet: str, coro: Awaitable[float]) -> Optional[float]:
    try:
        return await coro
    except Exception as e:
        logger.warning(f"{label} lookup failed for {wallet}: {e}")
        return None


async def enrich_wallet(client, event: TransferEvent, mint: str,
                        total_supply: float) -> WalletRow:
    """Build a wallet row from a transfer event and the wallet's live balances."""
    wallet = event.wallet
    token_bought = to_number(event.token_bought) or 0.0

    sol_balance, remaining = await asyncio.gather(
        _fetch_or_none("SOL balance", wallet, client.get_sol_balance(wallet)),
        _fetch_or_none("Token balance", wallet, client.get_token_balance(wallet, mint)),
    )

    return WalletRow(
        wallet=wallet,
        signature=event.signature,
        sol_balance=sol_balance,
        status=classify_status(token_bought, remaining),
        token_bought=token_bought,
        pct_supply_bought=supply_fraction(token_bought, total_supply),
        remaining_tokens=remaining,
        pct_supply_remaining=supply_fraction(remaining, total_supply),
    )


async def enrich_wallets(client, events: Sequence[TransferEvent], mint: str,
                         total_supply: float,
                         concurrency: int = DEFAULT_CONCURRENCY) -> List[WalletRow]:
    """Enrich every discovered wallet, preserving discovery order."""
    async def enrich(event: TransferEvent, _index: int) -> WalletRow:
        return await enrich_wallet(client, event, mint, total_supply)

    return await map_limit(events, concurrency, enrich)
