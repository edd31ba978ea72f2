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

import re

from web3 import Web3

HEX_BODY = re.compile(r"^[0-9a-fA-F]*$")


class Convertions:
    @staticmethod
    def strip_prefix(hex_str: str) -> str:
        return hex_str[2:] if hex_str[:2] in ("0x", "0X") else hex_str

    @staticmethod
    def is_hex(hex_str: str) -> bool:
        body = Convertions.strip_prefix(hex_str)
        return bool(body) and len(body) % 2 == 0 and bool(HEX_BODY.match(body))

    @staticmethod
    def hex2binary(hex_str: str) -> bytes:
        if not Convertions.is_hex(hex_str):
            raise ValueError(f"{hex_str!r} is not an even-length hex string")
        return bytes.fromhex(Convertions.strip_prefix(hex_str))

    @staticmethod
    def binary2hex(binary: bytes) -> str:
        return "0x" + bytes(binary).hex()

    @staticmethod
    def str2hex(string: str) -> str:
        return Convertions.binary2hex(string.encode("utf-8"))

    @staticmethod
    def to_hex_payload(payload) -> str:
        """Normalizes a contract payload to a 0x-prefixed hex string.

        web3 hands ``bytes`` outputs back as raw bytes while hex strings come
        from JSON-RPC dumps and tests; both end up in the same form.
        """
        if payload is None:
            return ""
        if isinstance(payload, (bytes, bytearray)):
            return Convertions.binary2hex(payload) if payload else ""
        return str(payload)

    @staticmethod
    def is_empty_payload(payload) -> bool:
        return Convertions.strip_prefix(Convertions.to_hex_payload(payload)) == ""

    @staticmethod
    def is_address(address) -> bool:
        return isinstance(address, str) and Web3.is_address(address)

    @staticmethod
    def canonical_address(address: str) -> str:
        return address.lower()

    @staticmethod
    def same_address(left, right) -> bool:
        if not left or not right:
            return False
        return left.lower() == right.lower()
