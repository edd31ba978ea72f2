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

import math
import re
from enum import Enum
from typing import List, Optional, Sequence

from procurement.modules.log import Logger
from procurement.modules.codec import BidCodec
from procurement.modules.errors import MalformedPayload
from procurement.modules.convertions import Convertions as convert

LOGGER = Logger(level="INFO", name=__name__).logger

# parseFloat semantics: longest numeric prefix wins, trailing text is ignored.
FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def parse_float_prefix(text: str) -> float:
    match = FLOAT_PREFIX.match(text or "")
    if not match:
        return math.nan
    token = match.group(1)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


class Bid:
    def __init__(self, bidder_address: str, amount: str) -> None:
        if any(arg is None for arg in [bidder_address, amount]):
            raise ValueError("None of the arguments can be None")

        self._bidder_address = bidder_address
        self._amount = amount

    @property
    def bidder_address(self) -> str:
        return self._bidder_address

    @property
    def amount(self) -> str:
        return self._amount

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bid):
            return NotImplemented
        return self.bidder_address == other.bidder_address and self.amount == other.amount

    def __hash__(self) -> int:
        return hash((self.bidder_address, self.amount))

    def __repr__(self) -> str:
        return f"Address: {self.bidder_address}, Amount: {self.amount}"


NO_BIDS = Bid(bidder_address="No bids yet", amount="N/A")


class BidLedger:
    def __init__(self, bids: Optional[List[Bid]] = None) -> None:
        self._bids: List[Bid] = list(bids or [])

    @property
    def bids(self) -> List[Bid]:
        return list(self._bids)

    def __len__(self) -> int:
        return len(self._bids)

    @staticmethod
    def rebuild(raw_amounts: Sequence, raw_addresses: Sequence) -> List[Bid]:
        """Pairs amount and address payloads by position and decodes them.

        Indexes where either payload is missing are skipped silently, a payload
        that fails to decode only drops its own index.
        """
        bids = []
        for index, raw_amount in enumerate(raw_amounts):
            raw_address = raw_addresses[index] if index < len(raw_addresses) else None
            if convert.is_empty_payload(raw_amount) or convert.is_empty_payload(raw_address):
                continue
            try:
                amount = BidCodec.decode_amount(raw_amount)
                address = BidCodec.decode_address(raw_address)
            except MalformedPayload as e:
                LOGGER.warning(f"Skipping bid at index {index}: {e}")
                continue
            bids.append(Bid(bidder_address=address, amount=amount))
        return bids

    def replace(self, raw_amounts: Sequence, raw_addresses: Sequence) -> List[Bid]:
        self._bids = self.rebuild(raw_amounts, raw_addresses)
        LOGGER.info(f"Ledger rebuilt with {len(self._bids)} bids")
        return self.bids

    @staticmethod
    def lowest(bids: Sequence[Bid]) -> Bid:
        if not bids:
            return NO_BIDS

        lowest_bid = None
        lowest_amount = math.inf
        for bid in bids:
            amount = parse_float_prefix(bid.amount)
            if amount < lowest_amount:
                lowest_bid = bid
                lowest_amount = amount
        return lowest_bid if lowest_bid is not None else NO_BIDS

    def lowest_bid(self) -> Bid:
        return self.lowest(self._bids)


class ActionStatus(Enum):
    IDLE = 0
    SUBMITTING = 1
    CONFIRMED = 2
    FAILED = 3


class Action:
    def __init__(self, name: str) -> None:
        self._name = name
        self._status = ActionStatus.IDLE
        self._error: Optional[Exception] = None
        self._receipt = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> ActionStatus:
        return self._status

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def receipt(self):
        return self._receipt

    @property
    def done(self) -> bool:
        return self._status in (ActionStatus.CONFIRMED, ActionStatus.FAILED)

    def submit(self) -> None:
        if self._status != ActionStatus.IDLE:
            raise ValueError(f"Action {self.name} was already submitted")
        self._status = ActionStatus.SUBMITTING

    def confirm(self, receipt=None) -> None:
        if self._status != ActionStatus.SUBMITTING:
            raise ValueError(f"Action {self.name} is not submitting")
        self._receipt = receipt
        self._status = ActionStatus.CONFIRMED

    def fail(self, error: Exception) -> None:
        if self.done:
            raise ValueError(f"Action {self.name} already finished")
        self._error = error
        self._status = ActionStatus.FAILED

    def __repr__(self) -> str:
        return f"action: {self.name}, status: {self.status.name}"
