import pytest

from procurement.modules import BidCodec
from procurement.modules import Convertions as convert
from procurement.modules.errors import InvalidAmount, MalformedPayload


class TestEncodeBid:
    def test_encodes_original_text_as_utf8(self):
        assert BidCodec.encode_bid("150.5") == "150.5".encode("utf-8")

    @pytest.mark.parametrize("amount", ["150.5", " 42 ", "+7", "0.001", "1e3", "007", ".5"])
    def test_decode_recovers_trimmed_text(self, amount):
        payload = convert.binary2hex(BidCodec.encode_bid(amount))
        assert BidCodec.decode_amount(payload) == amount.strip()

    def test_keeps_formatting_instead_of_normalizing(self):
        assert BidCodec.encode_bid("0010.50") == b"0010.50"

    @pytest.mark.parametrize("amount", ["", "   ", "abc", "5abc", "0", "-1", "0.0", "inf", "nan", "1e999", "1_000", "0x10", "0b1", "0o7", None])
    def test_rejects_invalid_amounts(self, amount):
        with pytest.raises(InvalidAmount):
            BidCodec.encode_bid(amount)


class TestDecodeAmount:
    def test_hex_payload(self):
        assert BidCodec.decode_amount("0x3130") == "10"

    def test_raw_bytes_payload(self):
        assert BidCodec.decode_amount(b" 21 ") == "21"

    def test_uppercase_hex(self):
        assert BidCodec.decode_amount("0x3231") == BidCodec.decode_amount("0X3231")

    @pytest.mark.parametrize("payload", ["", "0x", "0x313", "0xzz", "0x31 30", "0xff", b""])
    def test_malformed(self, payload):
        with pytest.raises(MalformedPayload):
            BidCodec.decode_amount(payload)


class TestDecodeAddress:
    def test_twenty_bytes_render_as_lowercase_address(self):
        address = BidCodec.decode_address("0x" + "AB" * 19 + "0C")
        assert address == "0x" + "ab" * 19 + "0c"
        assert len(address) == 42

    def test_zero_padding(self):
        assert BidCodec.decode_address(bytes(20)) == "0x" + "00" * 20

    @pytest.mark.parametrize("payload", ["", "0x", "0x1", "0xgg"])
    def test_malformed(self, payload):
        with pytest.raises(MalformedPayload):
            BidCodec.decode_address(payload)
