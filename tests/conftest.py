"""Shared fixtures: a scripted procurement contract and wallet."""

from unittest.mock import AsyncMock, Mock

import pytest
from web3 import Web3

from procurement.modules.errors import BoundaryUnavailable
from procurement.tender import ContractSession

OWNER = "0x" + "11" * 20
BIDDER = "0x" + "22" * 20
OUTSIDER = "0x" + "33" * 20
CONTRACT = "0x" + "aa" * 20
FACTORY = "0x" + "bb" * 20
NOW = 1_700_000_000

WRITE_METHODS = [
    "whitelist_bidder",
    "remove_whitelist_bidder",
    "set_bid_duration",
    "submit_bid",
    "end_bidding",
]
READ_METHODS = ["owner", "bidding_end_time", "ended", "check_if_whitelisted", "get_whitelist", "get_bids"]


class FakeWallet:
    def __init__(self, account):
        self.account = account
        self.connected = True
        self.listeners = []

    async def get_signer(self):
        if not self.account:
            raise BoundaryUnavailable("No wallet account available")
        return self.account

    async def is_connected(self):
        return self.connected

    def on_account_changed(self, callback):
        self.listeners.append(callback)

    def switch_account(self, account):
        self.account = account
        for callback in self.listeners:
            callback(account)


def make_contract(owner=OWNER, end_time=NOW + 3661, ended=False, whitelist=(BIDDER,), bids=((), ())):
    contract = Mock()
    contract.address = CONTRACT
    contract.owner = AsyncMock(return_value=Web3.to_checksum_address(owner))
    contract.bidding_end_time = AsyncMock(return_value=end_time)
    contract.ended = AsyncMock(return_value=ended)
    contract.check_if_whitelisted = AsyncMock(return_value=True)
    contract.get_whitelist = AsyncMock(return_value=[Web3.to_checksum_address(a) for a in whitelist])
    contract.get_bids = AsyncMock(return_value=(list(bids[0]), list(bids[1])))
    for name in WRITE_METHODS:
        setattr(contract, name, AsyncMock(return_value={"status": 1, "blockNumber": 1}))
    return contract


def make_session(contract, account=OWNER, factory=None, clock=lambda: NOW):
    reporter = Mock(pending=AsyncMock(), confirmed=AsyncMock(), failed=AsyncMock())
    return ContractSession(
        w3=Mock(),
        wallet=FakeWallet(account),
        factory=factory,
        reporter=reporter,
        clock=clock,
        contract_class=lambda w3, wallet, address: contract,
    )


def assert_no_boundary_calls(contract):
    for name in WRITE_METHODS + READ_METHODS:
        getattr(contract, name).assert_not_awaited()


@pytest.fixture
def contract():
    return make_contract(bids=((b"150.5", b"99"), (bytes.fromhex("22" * 20), bytes.fromhex("33" * 20))))


@pytest.fixture
def owner_session(contract):
    return make_session(contract, account=OWNER)


@pytest.fixture
def bidder_session(contract):
    return make_session(contract, account=BIDDER)
