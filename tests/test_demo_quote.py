import random
import unittest

from app.services.demo_quote import base_price_for, synthesize_quote


class FixedRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value

    def randrange(self, stop: int) -> int:
        return stop // 2


class DemoQuoteTest(unittest.TestCase):
    def test_base_price_lookup_by_symbol_fragment(self):
        self.assertEqual(base_price_for("^NSEI"), 25000.0)
        self.assertEqual(base_price_for("^BSESN"), 82000.0)
        self.assertEqual(base_price_for("^NSEBANK"), 52000.0)
        self.assertEqual(base_price_for("RELIANCE.NS"), 2800.0)
        self.assertEqual(base_price_for("tcs.ns"), 4200.0)
        self.assertEqual(base_price_for("HDFC.NS"), 1800.0)
        self.assertEqual(base_price_for("INFY.NS"), 1000.0)

    def test_bank_fragment_is_checked_before_hdfc(self):
        self.assertEqual(base_price_for("HDFCBANK.NS"), 52000.0)

    def test_nifty_demo_quote_stays_within_one_percent(self):
        rng = random.Random(42)
        for _ in range(200):
            quote = synthesize_quote("^NSEI", rng=rng, market_open_checker=lambda: True)

            self.assertTrue(quote.is_demo)
            self.assertGreaterEqual(quote.price, 24750.0)
            self.assertLessEqual(quote.price, 25250.0)
            self.assertGreaterEqual(quote.day_high, quote.price)
            self.assertGreaterEqual(quote.price, quote.day_low)
            self.assertEqual(quote.previous_close, 25000.0)
            self.assertGreaterEqual(quote.volume, 0)
            self.assertLess(quote.volume, 10_000_000)

    def test_change_fields_are_derived_from_price(self):
        quote = synthesize_quote("RELIANCE.NS", rng=FixedRandom(1.0), market_open_checker=lambda: True)

        self.assertEqual(quote.price, 2828.0)
        self.assertEqual(quote.change, 28.0)
        self.assertEqual(quote.change_percent, 1.0)
        self.assertEqual(quote.day_high, 2856.28)
        self.assertEqual(quote.day_low, 2799.72)

        quote = synthesize_quote("RELIANCE.NS", rng=FixedRandom(0.0), market_open_checker=lambda: True)
        self.assertEqual(quote.price, 2772.0)
        self.assertEqual(quote.change, -28.0)
        self.assertEqual(quote.change_percent, -1.0)

    def test_market_state_follows_market_hours(self):
        open_quote = synthesize_quote("TCS.NS", market_open_checker=lambda: True)
        closed_quote = synthesize_quote("TCS.NS", market_open_checker=lambda: False)

        self.assertEqual(open_quote.market_state, "REGULAR")
        self.assertEqual(closed_quote.market_state, "CLOSED")

    def test_symbol_and_currency_are_set(self):
        quote = synthesize_quote("infy.ns", market_open_checker=lambda: False)

        self.assertEqual(quote.symbol, "infy.ns")
        self.assertEqual(quote.currency, "INR")
        self.assertTrue(quote.timestamp.endswith("Z"))
        self.assertTrue(quote.to_payload()["isDemo"])


if __name__ == "__main__":
    unittest.main()
