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

import json
import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from web3 import AsyncWeb3, Web3
from web3.exceptions import ProviderConnectionError, TimeExhausted, Web3Exception

from procurement.modules.log import Logger
from procurement.modules.errors import BoundaryRejected, BoundaryUnavailable, InvalidAddress
from procurement.modules.convertions import Convertions as convert

LOGGER = Logger(level="INFO", name=__name__).logger

ABI_DIR = Path(__file__).parent / "abis"
TRANSPORT_ERRORS = (ProviderConnectionError, TimeExhausted, ConnectionError, OSError, asyncio.TimeoutError)


def load_abi(name: str) -> list:
    with open(ABI_DIR / f"{name}.json") as abi_file:
        return json.load(abi_file)


class Web3Wallet:
    """Signer capability backed by the node's managed accounts."""

    def __init__(self, w3: AsyncWeb3, account: Optional[str] = None):
        self.w3 = w3
        self._account = account
        self._disconnected = False
        self._listeners: List[Callable] = []

    async def get_signer(self) -> str:
        if self._disconnected:
            raise BoundaryUnavailable("Wallet disconnected, switch to an account to reconnect")
        if self._account:
            return self._account
        try:
            accounts = await self.w3.eth.accounts
        except TRANSPORT_ERRORS as e:
            raise BoundaryUnavailable(f"Wallet provider unreachable: {e}") from e
        if not accounts:
            raise BoundaryUnavailable("No wallet account available")
        self._account = accounts[0]
        return self._account

    async def is_connected(self) -> bool:
        return await self.w3.is_connected()

    def on_account_changed(self, callback: Callable) -> None:
        self._listeners.append(callback)

    def switch_account(self, account: Optional[str]) -> None:
        """Mirrors an accountsChanged event; ``None`` means disconnected."""
        self._account = account
        self._disconnected = not account
        LOGGER.info(f"Wallet account changed to {account}")
        for callback in self._listeners:
            callback(account)


class Boundary:
    def __init__(self, w3: AsyncWeb3, wallet, address: str, abi_name: str):
        if not convert.is_address(address):
            raise InvalidAddress(f"{address!r} is not a valid address")
        self.w3 = w3
        self.wallet = wallet
        self.address = convert.canonical_address(address)
        self.contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=load_abi(abi_name))

    async def call(self, function_name: str, *args):
        LOGGER.info(f"Calling {function_name}{args} on {self.address}")
        function = getattr(self.contract.functions, function_name)
        try:
            return await function(*args).call()
        except TRANSPORT_ERRORS as e:
            raise BoundaryUnavailable(f"{function_name} failed, provider unreachable: {e}") from e
        except Web3Exception as e:
            raise BoundaryRejected(f"{function_name} was rejected: {e}") from e

    async def transact(self, function_name: str, *args):
        """Sends a transaction and waits until it is mined."""
        signer = await self.wallet.get_signer()
        LOGGER.info(f"Sending {function_name}{args} to {self.address} from {signer}")
        function = getattr(self.contract.functions, function_name)
        try:
            tx_hash = await function(*args).transact({"from": signer})
            receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except TRANSPORT_ERRORS as e:
            raise BoundaryUnavailable(f"{function_name} failed, provider unreachable: {e}") from e
        except Web3Exception as e:
            raise BoundaryRejected(f"{function_name} was rejected: {e}") from e

        if receipt["status"] == 0:
            raise BoundaryRejected(f"{function_name} reverted in transaction {convert.binary2hex(receipt['transactionHash'])}")
        LOGGER.info(f"{function_name} mined in block {receipt['blockNumber']}")
        return receipt


class ProcurementContract(Boundary):
    def __init__(self, w3: AsyncWeb3, wallet, address: str):
        super().__init__(w3, wallet, address, "ProcurementContract")

    async def owner(self) -> str:
        return await self.call("owner")

    async def bidding_end_time(self) -> int:
        return int(await self.call("biddingEndTime"))

    async def ended(self) -> bool:
        return bool(await self.call("ended"))

    async def check_if_whitelisted(self, address: str) -> bool:
        return bool(await self.call("checkIfWhitelisted", Web3.to_checksum_address(address)))

    async def get_whitelist(self) -> List[str]:
        return list(await self.call("getWhitelist"))

    async def get_bids(self) -> Tuple[list, list]:
        amounts, addresses = await self.call("getBids")
        return list(amounts), list(addresses)

    async def whitelist_bidder(self, address: str):
        return await self.transact("whitelistBidder", Web3.to_checksum_address(address))

    async def remove_whitelist_bidder(self, address: str):
        return await self.transact("removeWhitelistBidder", Web3.to_checksum_address(address))

    async def set_bid_duration(self, seconds: int):
        return await self.transact("setBidDuration", seconds)

    async def submit_bid(self, payload: bytes):
        return await self.transact("submitBid", payload)

    async def end_bidding(self):
        return await self.transact("endBidding")


class ProcurementFactory(Boundary):
    def __init__(self, w3: AsyncWeb3, wallet, address: str):
        super().__init__(w3, wallet, address, "ProcurementFactory")

    async def get_contracts_by_owner(self, owner: str) -> List[str]:
        return list(await self.call("getContractsByOwner", Web3.to_checksum_address(owner)))

    async def create_procurement_contract(self):
        return await self.transact("createProcurementContract")
