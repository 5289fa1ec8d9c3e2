"""
End-to-end early buyer analysis for a single mint.
"""

import logging
from typing import Any, Optional

from .api_clients import HeliusClient
from .config import Config
from .discovery import discover_early_buyers
from .enrichment import enrich_wallets
from .exceptions import ValidationError
from .models import AnalysisResult
from .utils import clamp_limit, is_valid_mint_address, summarize_rows

logger = logging.getLogger(__name__)


async def analyze_early_buyers(client, mint: Any, limit: Any, config: Config) -> AnalysisResult:
    """
    Find the first `limit` wallets to receive `mint` and report what they still hold.

    Supply and discovery failures propagate to the caller; balance lookups
    for individual wallets fail soft and show up as NO ACTIVITY rows.
    """
    if not is_valid_mint_address(mint):
        raise ValidationError("Invalid mint address.")

    want = clamp_limit(limit, default=config.default_limit)

    total_supply = await client.get_token_supply(mint)
    logger.info(f"Total supply for {mint}: {total_supply}")

    earliest = await discover_early_buyers(
        client, mint, want,
        max_pages=config.max_pages,
        oversample=config.oversample_factor,
    )

    rows = await enrich_wallets(
        client, earliest, mint, total_supply,
        concurrency=config.enrich_concurrency,
    )

    return AnalysisResult(
        mint=mint,
        stats=summarize_rows(rows, total_supply),
        rows=rows,
    )


async def run_analysis(mint: Any, limit: Any = None,
                       config: Optional[Config] = None) -> AnalysisResult:
    """Load configuration, open a provider client and run the analysis."""
    if config is None:
        config = Config.from_env()

    async with HeliusClient(config) as client:
        return await analyze_early_buyers(client, mint, limit, config)
