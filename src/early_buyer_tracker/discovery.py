"""
Discovery of the earliest unique wallets to receive a mint.
"""

import logging
from typing import Any, Dict, List, Optional

from .models import TransferEvent
from .utils import resolve_token_amount, to_number

logger = logging.getLogger(__name__)

MAX_PAGES = 15
OVERSAMPLE_FACTOR = 8


def _transfer_amount(transfer: Dict[str, Any]) -> Optional[float]:
    token_amount = transfer.get("tokenAmount")
    nested = token_amount if isinstance(token_amount, dict) else {}
    return resolve_token_amount(
        nested.get("uiAmountString"),
        nested.get("uiAmount"),
        token_amount,
        transfer.get("amount"),
    )


def parse_transfer_events(transactions: List[Dict[str, Any]], mint: str) -> List[TransferEvent]:
    """Extract incoming transfers of a mint from enhanced transactions."""
    events = []

    for tx in transactions:
        if not isinstance(tx, dict):
            continue

        signature = tx.get("signature") or ""
        block_time = to_number(tx.get("timestamp") or tx.get("blockTime"))
        transfers = tx.get("tokenTransfers")
        if not isinstance(transfers, list):
            continue

        for transfer in transfers:
            if not isinstance(transfer, dict) or transfer.get("mint") != mint:
                continue

            to_user = transfer.get("toUserAccount")
            from_user = transfer.get("fromUserAccount")
            # Skip self transfers and entries without a receiver
            if not to_user or to_user == from_user:
                continue

            events.append(TransferEvent(
                wallet=to_user,
                signature=signature,
                block_time=block_time,
                token_bought=_transfer_amount(transfer),
            ))

    return events


def select_earliest_wallets(events: List[TransferEvent], want: int) -> List[TransferEvent]:
    """
    Keep the earliest event per receiving wallet, oldest first.

    Sorting is stable, so events with equal (or missing) timestamps keep the
    order in which they were collected.
    """
    by_wallet: Dict[str, TransferEvent] = {}

    for event in sorted(events, key=lambda e: e.sort_key):
        if event.wallet not in by_wallet:
            by_wallet[event.wallet] = event
        if len(by_wallet) >= want:
            break

    return list(by_wallet.values())[:want]


async def discover_early_buyers(client, mint: str, want: int,
                                max_pages: int = MAX_PAGES,
                                oversample: int = OVERSAMPLE_FACTOR) -> List[TransferEvent]:
    """
    Page backwards through a mint's history and return its first `want` receivers.

    Paging stops after `max_pages` pages, once `want * oversample` raw transfer
    events have been collected, or when the provider returns an empty page.
    Fewer than `want` wallets are returned if history runs out first.
    """
    before = None
    pages = 0
    events: List[TransferEvent] = []

    while pages < max_pages and len(events) < want * oversample:
        transactions = await client.fetch_transaction_page(mint, before)
        if not transactions:
            logger.debug(f"History for {mint} exhausted after {pages} pages")
            break

        page_events = parse_transfer_events(transactions, mint)
        events.extend(page_events)
        logger.debug(
            f"Page {pages + 1} for {mint}: {len(transactions)} txs, {len(page_events)} transfers")

        last = transactions[-1]
        before = (last.get("signature") if isinstance(last, dict) else None) or None
        pages += 1

    earliest = select_earliest_wallets(events, want)
    logger.info(
        f"Found {len(earliest)} early wallets for {mint} from {len(events)} transfers over {pages} pages")
    return earliest
