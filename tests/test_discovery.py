"""Tests for early buyer discovery"""
import pytest

from conftest import FakeHeliusClient, MINT, make_transfer, make_tx
from early_buyer_tracker.discovery import (
    discover_early_buyers,
    parse_transfer_events,
    select_earliest_wallets,
)
from early_buyer_tracker.exceptions import ProviderError
from early_buyer_tracker.models import TransferEvent


def test_parse_transfer_events_filters_foreign_mints_and_self_transfers():
    txs = [
        make_tx("sig1", 100, [
            make_transfer("WalletA", 10),
            make_transfer("WalletB", 5, mint="OtherMint"),
            make_transfer("WalletC", 7, from_user="WalletC"),
            make_transfer(None, 3),
        ]),
    ]

    events = parse_transfer_events(txs, MINT)

    assert events == [TransferEvent("WalletA", "sig1", 100.0, 10.0)]


def test_parse_transfer_events_amount_representations():
    txs = [make_tx("sig", 1, [
        make_transfer("A", {"uiAmountString": "1.25", "uiAmount": 9}),
        make_transfer("B", {"uiAmount": 2.5}),
        make_transfer("C", 3),
        {"mint": MINT, "toUserAccount": "D", "amount": "4"},
        {"mint": MINT, "toUserAccount": "E"},
    ])]

    amounts = [e.token_bought for e in parse_transfer_events(txs, MINT)]

    assert amounts == [1.25, 2.5, 3.0, 4.0, None]


def test_parse_transfer_events_tolerates_malformed_records():
    txs = [
        None,
        {"signature": "s1"},
        {"signature": "s2", "tokenTransfers": "oops"},
        {"blockTime": 7, "tokenTransfers": [None, make_transfer("A", 1)]},
    ]

    events = parse_transfer_events(txs, MINT)

    assert len(events) == 1
    assert events[0].signature == ""
    assert events[0].block_time == 7.0


def test_select_earliest_wallets_dedups_and_sorts():
    events = [
        TransferEvent("WalletA", "a1", 5, 1),
        TransferEvent("WalletB", "b1", 1, 1),
        TransferEvent("WalletA", "a2", 9, 1),
    ]

    selected = select_earliest_wallets(events, 2)

    assert [(e.wallet, e.block_time) for e in selected] == [("WalletB", 1), ("WalletA", 5)]


def test_select_earliest_wallets_missing_time_sorts_first_and_ties_are_stable():
    events = [
        TransferEvent("W1", "s1", 10),
        TransferEvent("W2", "s2", None),
        TransferEvent("W3", "s3", 10),
        TransferEvent("W4", "s4", None),
    ]

    selected = select_earliest_wallets(events, 10)

    assert [e.wallet for e in selected] == ["W2", "W4", "W1", "W3"]


def test_select_earliest_wallets_respects_limit():
    events = [TransferEvent(f"W{i}", f"s{i}", i) for i in range(20)]

    selected = select_earliest_wallets(events, 3)

    assert [e.wallet for e in selected] == ["W0", "W1", "W2"]


def _page(prefix, count, start_time):
    return [
        make_tx(f"{prefix}{i}", start_time - i, [make_transfer(f"{prefix}-wallet{i}", 1)])
        for i in range(count)
    ]


@pytest.mark.asyncio
async def test_discovery_uses_last_signature_as_cursor():
    client = FakeHeliusClient(pages=[_page("p1-", 3, 100), _page("p2-", 3, 50)])

    await discover_early_buyers(client, MINT, want=10)

    assert client.page_calls == [None, "p1-2", "p2-2"]


@pytest.mark.asyncio
async def test_discovery_stops_on_empty_page():
    client = FakeHeliusClient(pages=[_page("p1-", 2, 100), [], _page("p3-", 2, 10)])

    result = await discover_early_buyers(client, MINT, want=50)

    assert len(client.page_calls) == 2
    assert len(result) == 2


@pytest.mark.asyncio
async def test_discovery_never_exceeds_page_cap():
    pages = [_page(f"p{n}-", 1, 10_000 - n * 10) for n in range(40)]
    client = FakeHeliusClient(pages=pages)

    result = await discover_early_buyers(client, MINT, want=100)

    assert len(client.page_calls) == 15
    assert len(result) == 15


@pytest.mark.asyncio
async def test_discovery_stops_after_oversampling_target():
    pages = [_page(f"p{n}-", 10, 10_000 - n * 100) for n in range(10)]
    client = FakeHeliusClient(pages=pages)

    # want=2 needs 16 raw events: two pages of 10
    result = await discover_early_buyers(client, MINT, want=2)

    assert len(client.page_calls) == 2
    assert len(result) == 2


@pytest.mark.asyncio
async def test_discovery_returns_oldest_wallets_first():
    newest = [make_tx("n1", 300, [make_transfer("Late", 1)]),
              make_tx("n2", 200, [make_transfer("Mid", 1)])]
    oldest = [make_tx("o1", 150, [make_transfer("Mid", 1)]),
              make_tx("o2", 100, [make_transfer("First", 1)])]
    client = FakeHeliusClient(pages=[newest, oldest])

    result = await discover_early_buyers(client, MINT, want=2)

    assert [(e.wallet, e.signature) for e in result] == [("First", "o2"), ("Mid", "o1")]


@pytest.mark.asyncio
async def test_discovery_propagates_provider_errors():
    client = FakeHeliusClient(pages=[_page("p1-", 2, 100), ProviderError("boom", status=500)])

    with pytest.raises(ProviderError):
        await discover_early_buyers(client, MINT, want=10)
