import asyncio
import json
import logging
from typing import Optional, List, Dict, Any

import aiohttp

from .config import Config
from .exceptions import ProviderError
from .utils import resolve_supply_amount, resolve_token_amount, to_number

# Set up logging
logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
COMMITMENT = "confirmed"


class HeliusClient:
    """Client for the Helius JSON-RPC and enhanced transactions APIs."""

    def __init__(self, config: Config):
        self.config = config
        self.api_key = config.helius_api_key
        self.rpc_url = config.helius_rpc_url
        self.api_url = config.helius_api_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HeliusClient":
        await self._get_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def call_rpc(self, method: str, params: List[Any]) -> Any:
        """Issue a JSON-RPC call and return its result."""
        session = await self._get_session()
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }

        try:
            async with session.post(self.rpc_url, params={"api-key": self.api_key}, json=payload) as resp:
                if resp.status < 200 or resp.status >= 300:
                    text = await resp.text()
                    raise ProviderError(f"RPC error: {resp.status} {text}", status=resp.status)
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ProviderError(f"RPC error: {method} failed: {e}") from e

        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise ProviderError(message or json.dumps(error))

        return data.get("result") if isinstance(data, dict) else None

    async def fetch_transaction_page(self, mint: str, before: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get one page of enhanced transactions for a mint, newest first."""
        session = await self._get_session()
        url = f"{self.api_url}/addresses/{mint}/transactions"
        params = {
            "api-key": self.api_key,
            "limit": str(self.config.page_size),
        }
        if before:
            params["before"] = before

        try:
            async with session.get(url, params=params) as resp:
                if resp.status < 200 or resp.status >= 300:
                    text = await resp.text()
                    raise ProviderError(f"Helius enhanced error: {resp.status} {text}", status=resp.status)
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ProviderError(f"Helius enhanced error: {e}") from e

        if not isinstance(data, list):
            logger.warning(f"Unexpected transactions payload for {mint}: {type(data).__name__}")
            return []
        return data

    async def get_token_supply(self, mint: str) -> float:
        """Get the human-readable total supply of a mint."""
        result = await self.call_rpc("getTokenSupply", [mint])
        value = result.get("value") if isinstance(result, dict) else None
        return resolve_supply_amount(value)

    async def get_sol_balance(self, wallet: str) -> float:
        """Get the SOL balance of a wallet."""
        result = await self.call_rpc("getBalance", [wallet, {"commitment": COMMITMENT}])
        lamports = result.get("value") if isinstance(result, dict) else None
        return (to_number(lamports) or 0) / LAMPORTS_PER_SOL

    async def get_token_balance(self, owner: str, mint: str) -> float:
        """Sum the balances of every token account an owner holds for a mint."""
        result = await self.call_rpc("getTokenAccountsByOwner", [
            owner,
            {"mint": mint},
            {"encoding": "jsonParsed", "commitment": COMMITMENT},
        ])

        accounts = result.get("value") if isinstance(result, dict) else None
        if not isinstance(accounts, list):
            return 0.0

        total = 0.0
        for account in accounts:
            try:
                token_amount = account["account"]["data"]["parsed"]["info"]["tokenAmount"]
            except (KeyError, TypeError):
                continue
            if not isinstance(token_amount, dict):
                continue
            amount = resolve_token_amount(token_amount.get("uiAmount"))
            if amount is not None:
                total += amount
        return total
