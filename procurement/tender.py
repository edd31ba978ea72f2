# Copyright 2022 Cartesi Pte. Ltd.
#
# SPDX-License-Identifier: Apache-2.0
# Licensed under the Apache License, Version 2.0 (the "License"); you may not use
# this file except in compliance with the License. You may obtain a copy of the
# License at http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software distributed
# under the License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR
# CONDITIONS OF ANY KIND, either express or implied. See the License for the
# specific language governing permissions and limitations under the License.

import time
import traceback
from typing import Optional

from web3 import AsyncHTTPProvider, AsyncWeb3

from procurement.config import Config, load_config
from procurement.modules import Logger
from procurement.modules import BidCodec, BidLedger, Bid, Action
from procurement.modules import CountdownCalculator, CountdownStyle
from procurement.modules import ProcurementContract, ProcurementFactory, Web3Wallet
from procurement.modules import StatusReporter
from procurement.modules import Convertions as convert
from procurement.modules.errors import (
    BiddingClosed,
    BoundaryRejected,
    BoundaryUnavailable,
    InvalidAddress,
    InvalidDuration,
    NotOwner,
    NotWhitelisted,
    ProcurementError,
    SessionNotLoaded,
)

LOGGER = Logger(level="INFO", name=__name__).logger


class ContractSession:
    """Client-side view of one procurement contract and the actions run against it.

    State is only replaced by the session's own coroutines. Nothing serializes
    them: a refresh that finishes after a newer write wins.
    """

    def __init__(self, w3: AsyncWeb3, wallet, factory: Optional[ProcurementFactory] = None,
                 reporter: Optional[StatusReporter] = None, clock=time.time, contract_class=ProcurementContract):
        self.w3 = w3
        self.wallet = wallet
        self.factory = factory
        self.reporter = reporter or StatusReporter()
        self._clock = clock
        self._contract_class = contract_class
        self._unavailable = False
        self.caller: Optional[str] = None
        self.deployed_contracts = []
        self.last_action: Optional[Action] = None
        self._reset(None)
        wallet.on_account_changed(self._account_changed)

    def _reset(self, contract) -> None:
        self.contract = contract
        self.contract_address = contract.address if contract else None
        self.owner_address: Optional[str] = None
        self.is_owner = False
        self.bidding_end_time = 0
        self.is_active = False
        self.whitelist = set()
        self.ledger = BidLedger()

    @property
    def loaded(self) -> bool:
        return self.contract is not None

    @property
    def bids(self):
        return self.ledger.bids

    def now(self) -> int:
        return int(self._clock())

    def remaining(self) -> int:
        return CountdownCalculator.remaining(self.bidding_end_time, self.now())

    def countdown(self, style: CountdownStyle = CountdownStyle.LETTERS) -> str:
        return CountdownCalculator.countdown(self.bidding_end_time, self.now(), style)

    def lowest_bid(self) -> Bid:
        return self.ledger.lowest_bid()

    def is_whitelisted(self, address) -> bool:
        return bool(address) and convert.canonical_address(address) in self.whitelist

    # Local checks, all raised before any boundary call

    def _ensure_available(self) -> None:
        if self._unavailable:
            raise BoundaryUnavailable("Wallet or provider disconnected, reconnect before retrying")

    def _ensure_loaded(self) -> None:
        self._ensure_available()
        if not self.loaded:
            raise SessionNotLoaded("Please load the contract first")

    def _ensure_owner(self) -> None:
        self._ensure_loaded()
        if not self.is_owner:
            raise NotOwner(f"{self.caller} is not the owner of {self.contract_address}")

    def _ensure_open(self) -> None:
        if not self.is_active or self.remaining() == 0:
            raise BiddingClosed(f"Bidding on {self.contract_address} is closed")

    @staticmethod
    def _valid_address(address) -> str:
        if not convert.is_address(address):
            raise InvalidAddress(f"{address!r} is not a valid address")
        return convert.canonical_address(address)

    # Boundary plumbing

    async def _boundary(self, awaitable):
        try:
            return await awaitable
        except BoundaryUnavailable:
            self._unavailable = True
            raise

    async def _signer(self) -> str:
        self.caller = convert.canonical_address(await self._boundary(self.wallet.get_signer()))
        return self.caller

    async def _rejected(self, name: str, error: ProcurementError) -> ProcurementError:
        action = Action(name)
        action.fail(error)
        self.last_action = action
        LOGGER.info(f"{name} rejected locally: {error}")
        await self.reporter.failed(name, str(error))
        return error

    async def _run_action(self, name: str, pending: str, confirmed: str, operation, refresh=None) -> Action:
        """Runs one write as an action, then the reads that bring the session up to date.

        The action is confirmed as soon as ``operation`` returns. A mined write
        can not be withdrawn, so a failing ``refresh`` is raised without
        failing the action.
        """
        action = Action(name)
        self.last_action = action
        action.submit()
        await self.reporter.pending(name, pending)
        try:
            receipt = await self._boundary(operation())
        except Exception as e:
            action.fail(e)
            LOGGER.error(f"{name} failed: {e}\n{traceback.format_exc()}")
            await self.reporter.failed(name, f"{name} failed: {e}")
            raise
        action.confirm(receipt)
        await self.reporter.confirmed(name, confirmed)

        if refresh is not None:
            try:
                await self._boundary(refresh())
            except Exception as e:
                LOGGER.error(f"{name} confirmed but refreshing the session failed: {e}\n{traceback.format_exc()}")
                await self.reporter.failed(f"{name}_refresh", f"Refresh after {name} failed: {e}")
                raise
        return action

    def _account_changed(self, account) -> None:
        if not account:
            self._unavailable = True
            self.caller = None
            self.is_owner = False
            LOGGER.warning("Wallet disconnected")
            return
        self._unavailable = False
        self.caller = convert.canonical_address(account)
        self.is_owner = convert.same_address(self.owner_address, self.caller)
        LOGGER.info(f"Account switched to {self.caller}, owner: {self.is_owner}")

    async def reconnect(self) -> str:
        try:
            connected = await self.wallet.is_connected()
        except OSError as e:
            raise BoundaryUnavailable(f"Provider unreachable: {e}") from e
        if not connected:
            raise BoundaryUnavailable("Provider is not connected")
        self._unavailable = False
        caller = await self._signer()
        self.is_owner = convert.same_address(self.owner_address, caller)
        return caller

    # Reads

    async def load(self, address) -> Action:
        try:
            self._ensure_available()
            self._valid_address(address)
        except ProcurementError as e:
            raise await self._rejected("load", e)

        async def operation():
            # Everything is read before any field changes, a failed load keeps the previous session.
            contract = self._contract_class(self.w3, self.wallet, address)
            caller = await self._signer()
            owner = convert.canonical_address(await contract.owner())
            is_owner = convert.same_address(owner, caller)
            if not is_owner:
                LOGGER.warning(f"{caller} is not the owner of {contract.address}, owner actions are disabled")

            end_time = await contract.bidding_end_time()
            ended = await contract.ended()
            whitelist = await self._read_whitelist(contract, caller, is_owner)
            bids = await self._read_bids(contract, caller, is_owner)

            self._reset(contract)
            self.owner_address = owner
            self.is_owner = is_owner
            self.bidding_end_time = end_time
            self.is_active = not ended
            self.whitelist = whitelist
            self.ledger = BidLedger(bids)
            LOGGER.info(f"Loaded {contract.address}: owner {owner}, {len(whitelist)} whitelisted, {len(bids)} bids, left: {self.countdown(CountdownStyle.COLON)}")

        return await self._run_action("load", "Loading contract...", "Contract loaded", operation)

    @staticmethod
    async def _read_whitelist(contract, caller: str, is_owner: bool) -> set:
        try:
            addresses = await contract.get_whitelist()
        except BoundaryRejected as e:
            if is_owner:
                raise
            LOGGER.warning(f"Whitelist unreadable for {caller}: {e}")
            return {caller} if await contract.check_if_whitelisted(caller) else set()
        return {convert.canonical_address(address) for address in addresses}

    @staticmethod
    async def _read_bids(contract, caller: str, is_owner: bool) -> list:
        try:
            amounts, addresses = await contract.get_bids()
        except BoundaryRejected as e:
            if is_owner:
                raise
            LOGGER.warning(f"Bids unreadable for {caller}: {e}")
            return []
        return BidLedger.rebuild(amounts, addresses)

    async def refresh_status(self) -> None:
        self._ensure_loaded()
        end_time = await self._boundary(self.contract.bidding_end_time())
        ended = await self._boundary(self.contract.ended())
        self.bidding_end_time = end_time
        self.is_active = not ended
        LOGGER.info(f"Bidding ends at {end_time}, active: {self.is_active}, left: {self.countdown(CountdownStyle.COLON)}")

    async def refresh_whitelist(self) -> set:
        self._ensure_loaded()
        addresses = await self._boundary(self.contract.get_whitelist())
        self.whitelist = {convert.canonical_address(address) for address in addresses}
        return self.whitelist

    async def refresh_bids(self):
        self._ensure_loaded()
        amounts, addresses = await self._boundary(self.contract.get_bids())
        return self.ledger.replace(amounts, addresses)

    async def check_whitelisted(self) -> bool:
        self._ensure_loaded()
        caller = await self._signer()
        whitelisted = await self._boundary(self.contract.check_if_whitelisted(caller))
        whitelist = set(self.whitelist)
        if whitelisted:
            whitelist.add(caller)
        else:
            whitelist.discard(caller)
        self.whitelist = whitelist
        LOGGER.info(f"{caller} whitelisted: {whitelisted}")
        return whitelisted

    # Writes

    async def add_to_whitelist(self, address) -> Action:
        try:
            self._ensure_owner()
            bidder = self._valid_address(address)
        except ProcurementError as e:
            raise await self._rejected("whitelist_bidder", e)

        async def operation():
            return await self.contract.whitelist_bidder(bidder)

        return await self._run_action("whitelist_bidder", "Adding to whitelist...", f"{bidder} whitelisted", operation, refresh=self.refresh_whitelist)

    async def remove_from_whitelist(self, address) -> Action:
        try:
            self._ensure_owner()
            bidder = self._valid_address(address)
            if not self.is_whitelisted(bidder):
                raise NotWhitelisted(f"{bidder} is not whitelisted")
        except ProcurementError as e:
            raise await self._rejected("remove_whitelist_bidder", e)

        async def operation():
            return await self.contract.remove_whitelist_bidder(bidder)

        return await self._run_action("remove_whitelist_bidder", "Removing from whitelist...", f"{bidder} removed from whitelist", operation, refresh=self.refresh_whitelist)

    async def set_bid_duration(self, seconds) -> Action:
        try:
            self._ensure_owner()
            if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
                raise InvalidDuration(f"Bid duration {seconds!r} must be a positive number of seconds")
        except ProcurementError as e:
            raise await self._rejected("set_bid_duration", e)

        async def operation():
            return await self.contract.set_bid_duration(seconds)

        return await self._run_action("set_bid_duration", "Setting bid duration...", f"Bid duration set to {seconds}s", operation, refresh=self.refresh_status)

    async def submit_bid(self, amount_text) -> Action:
        try:
            self._ensure_loaded()
            self._ensure_open()
            if not self.is_whitelisted(self.caller):
                raise NotWhitelisted(f"{self.caller} is not whitelisted on {self.contract_address}")
            payload = BidCodec.encode_bid(amount_text)
        except ProcurementError as e:
            raise await self._rejected("submit_bid", e)

        async def operation():
            return await self.contract.submit_bid(payload)

        return await self._run_action("submit_bid", "Submitting bid...", "Bid submitted", operation)

    async def end_bidding(self) -> Action:
        try:
            self._ensure_owner()
        except ProcurementError as e:
            raise await self._rejected("end_bidding", e)

        async def operation():
            receipt = await self.contract.end_bidding()
            self.is_active = False
            return receipt

        async def refresh():
            await self.refresh_bids()
            self.bidding_end_time = await self.contract.bidding_end_time()

        return await self._run_action("end_bidding", "Ending bidding...", "Bidding ended", operation, refresh=refresh)

    # Factory

    def _ensure_factory(self) -> None:
        self._ensure_available()
        if self.factory is None:
            raise BoundaryUnavailable("No procurement factory configured")

    async def fetch_deployed_contracts(self) -> list:
        self._ensure_factory()
        caller = await self._signer()
        contracts = await self._boundary(self.factory.get_contracts_by_owner(caller))
        self.deployed_contracts = [convert.canonical_address(address) for address in contracts]
        return self.deployed_contracts

    async def create_contract(self) -> Action:
        try:
            self._ensure_factory()
        except ProcurementError as e:
            raise await self._rejected("create_contract", e)

        async def operation():
            return await self.factory.create_procurement_contract()

        return await self._run_action("create_contract", "Creating contract...", "Contract created", operation, refresh=self.fetch_deployed_contracts)


def open_session(config: Optional[Config] = None, account: Optional[str] = None) -> ContractSession:
    config = config or load_config()
    Logger.set_level(config.log_level)
    LOGGER.info(f"Opening session with {config}")

    w3 = AsyncWeb3(AsyncHTTPProvider(config.provider_url))
    wallet = Web3Wallet(w3, account=account)
    factory = ProcurementFactory(w3, wallet, config.factory_address)
    return ContractSession(w3, wallet, factory=factory, reporter=StatusReporter(config.status_server_url))
