import math

import pytest

from procurement.modules import Action, ActionStatus, Bid, BidLedger, NO_BIDS
from procurement.modules.models import parse_float_prefix

A = "0x" + "0a" * 20
B = "0x" + "0b" * 20
C = "0x" + "0c" * 20


class TestRebuild:
    def test_skips_empty_amount_index(self):
        bids = BidLedger.rebuild(["0x3130", "", "0x3231"], ["0x" + "0a" * 20, "0x" + "0b" * 20, "0x" + "0c" * 20])
        assert bids == [Bid(A, "10"), Bid(C, "21")]

    def test_skips_missing_or_empty_addresses(self):
        bids = BidLedger.rebuild([b"5", b"6", b"7"], [bytes.fromhex("0a" * 20), b"", None])
        assert bids == [Bid(A, "5")]

    def test_address_list_shorter_than_amounts(self):
        bids = BidLedger.rebuild(["0x35", "0x36"], ["0x" + "0a" * 20])
        assert len(bids) == 1

    def test_malformed_entry_does_not_abort(self):
        bids = BidLedger.rebuild(["0x35", "0xzz", "0xff", "0x37"], [A, B, C, A])
        assert bids == [Bid(A, "5"), Bid(A, "7")]

    def test_replace_swaps_ledger_wholesale(self):
        ledger = BidLedger([Bid(A, "1")])
        ledger.replace([b"9"], [bytes.fromhex("0b" * 20)])
        assert ledger.bids == [Bid(B, "9")]
        assert len(ledger) == 1


class TestLowest:
    def test_empty_returns_sentinel(self):
        lowest = BidLedger.lowest([])
        assert lowest is NO_BIDS
        assert (lowest.bidder_address, lowest.amount) == ("No bids yet", "N/A")

    def test_first_strict_minimum_wins_ties(self):
        assert BidLedger.lowest([Bid(A, "5"), Bid(B, "3"), Bid(C, "3")]) == Bid(B, "3")

    def test_numeric_not_lexicographic(self):
        assert BidLedger.lowest([Bid(A, "100"), Bid(B, "99.5")]) == Bid(B, "99.5")

    def test_numeric_prefix_ranks_suffixed_amounts(self):
        assert BidLedger.lowest([Bid(A, "10"), Bid(B, "9usd")]) == Bid(B, "9usd")

    def test_unparseable_amounts_never_win(self):
        assert BidLedger.lowest([Bid(A, "abc"), Bid(B, "12")]) == Bid(B, "12")
        assert BidLedger.lowest([Bid(A, "abc")]) is NO_BIDS

    def test_float_precision_keeps_first_of_equal_values(self):
        assert BidLedger.lowest([Bid(A, "0.30000000000000001"), Bid(B, "0.3")]) == Bid(A, "0.30000000000000001")

    def test_ledger_lowest_bid(self):
        assert BidLedger([Bid(A, "2"), Bid(B, "1e0")]).lowest_bid() == Bid(B, "1e0")


@pytest.mark.parametrize("text, expected", [
    ("12.5", 12.5), (" 12.5kg", 12.5), ("-3", -3.0), (".5", 0.5), ("1e2x", 100.0), ("7.", 7.0),
    ("Infinity", math.inf), ("-Infinity", -math.inf),
])
def test_parse_float_prefix(text, expected):
    assert parse_float_prefix(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "$5", "N/A"])
def test_parse_float_prefix_nan(text):
    assert math.isnan(parse_float_prefix(text))


class TestAction:
    def test_confirm_path(self):
        action = Action("submit_bid")
        assert action.status == ActionStatus.IDLE
        action.submit()
        assert action.status == ActionStatus.SUBMITTING
        action.confirm({"status": 1})
        assert action.status == ActionStatus.CONFIRMED
        assert action.receipt == {"status": 1}
        assert action.done

    def test_fail_path(self):
        action = Action("end_bidding")
        action.submit()
        error = RuntimeError("reverted")
        action.fail(error)
        assert action.status == ActionStatus.FAILED
        assert action.error is error

    def test_no_resubmission(self):
        action = Action("end_bidding")
        action.submit()
        with pytest.raises(ValueError):
            action.submit()

    def test_confirm_requires_submission(self):
        with pytest.raises(ValueError):
            Action("load").confirm()

    def test_finished_action_can_not_fail(self):
        action = Action("load")
        action.submit()
        action.confirm()
        with pytest.raises(ValueError):
            action.fail(RuntimeError())
