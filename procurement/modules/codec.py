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

from procurement.modules.convertions import Convertions as convert
from procurement.modules.errors import InvalidAmount, MalformedPayload

# Number() semantics of the bid form: whole text numeric, outer whitespace allowed.
DECIMAL_TEXT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


class BidCodec:
    """Transcodes bid amounts and bidder addresses to and from contract payloads.

    The amount payload is the UTF-8 text of the bid as typed. Nothing is
    encrypted: anyone who can read the contract storage can read every bid.
    """

    @staticmethod
    def encode_bid(amount_text: str) -> bytes:
        if not amount_text or not isinstance(amount_text, str):
            raise InvalidAmount("Bid amount can not be empty")
        if not DECIMAL_TEXT.match(amount_text):
            raise InvalidAmount(f"Bid amount {amount_text!r} is not a number")
        value = float(amount_text)
        if not math.isfinite(value) or value <= 0:
            raise InvalidAmount(f"Bid amount {amount_text!r} must be greater than 0")
        return amount_text.encode("utf-8")

    @staticmethod
    def _payload_bytes(hex_payload) -> bytes:
        hex_str = convert.to_hex_payload(hex_payload)
        try:
            return convert.hex2binary(hex_str)
        except ValueError as e:
            raise MalformedPayload(str(e)) from e

    @classmethod
    def decode_amount(cls, hex_payload) -> str:
        binary = cls._payload_bytes(hex_payload)
        try:
            return binary.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise MalformedPayload(f"Amount payload {convert.binary2hex(binary)} is not UTF-8 text") from e

    @classmethod
    def decode_address(cls, hex_payload) -> str:
        binary = cls._payload_bytes(hex_payload)
        return "0x" + "".join(f"{byte:02x}" for byte in binary)
