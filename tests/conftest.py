"""
Pytest fixtures for early-buyer-tracker tests
"""
import asyncio

import pytest

from early_buyer_tracker.config import Config

MINT = "Mint" + "1" * 40


class FakeHeliusClient:
    """Scripted stand-in for HeliusClient that records every call."""

    def __init__(self, pages=None, supply=1000.0, sol_balances=None, token_balances=None,
                 delay=0.0):
        self.pages = list(pages or [])
        self.supply = supply
        self.sol_balances = sol_balances or {}
        self.token_balances = token_balances or {}
        self.delay = delay
        self.page_calls = []
        self.balance_calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_transaction_page(self, mint, before=None):
        self.page_calls.append(before)
        index = len(self.page_calls) - 1
        if index >= len(self.pages):
            return []
        page = self.pages[index]
        if isinstance(page, Exception):
            raise page
        return page

    async def get_token_supply(self, mint):
        if isinstance(self.supply, Exception):
            raise self.supply
        return self.supply

    async def _lookup(self, table, wallet):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            value = table.get(wallet, 0.0)
            if isinstance(value, Exception):
                raise value
            return value
        finally:
            self.in_flight -= 1

    async def get_sol_balance(self, wallet):
        self.balance_calls.append(("sol", wallet))
        return await self._lookup(self.sol_balances, wallet)

    async def get_token_balance(self, owner, mint):
        self.balance_calls.append(("token", owner))
        return await self._lookup(self.token_balances, owner)


def make_tx(signature, timestamp, transfers):
    return {"signature": signature, "timestamp": timestamp, "tokenTransfers": transfers}


def make_transfer(to_user, amount, mint=MINT, from_user="Pool111"):
    return {
        "mint": mint,
        "fromUserAccount": from_user,
        "toUserAccount": to_user,
        "tokenAmount": amount,
    }


@pytest.fixture
def mint():
    return MINT


@pytest.fixture
def config():
    return Config(helius_api_key="test-key")
