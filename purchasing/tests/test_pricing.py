from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from purchasing.pricing import (
    to_number, line_total, line_totals, recompute, format_money,
)


def product(initial, selling):
    return SimpleNamespace(initial_price=Decimal(initial), selling_price=Decimal(selling))


class ToNumberTests(SimpleTestCase):

    def test_strips_thousands_separators(self):
        self.assertEqual(to_number("10,000"), Decimal("10000"))
        self.assertEqual(to_number("1,250,000.50"), Decimal("1250000.50"))

    def test_blank_and_garbage_read_as_zero(self):
        for value in (None, "", "   ", "abc", "12abc", "NaN", "Infinity"):
            with self.subTest(value=value):
                self.assertEqual(to_number(value), Decimal("0"))

    def test_numbers_pass_through(self):
        self.assertEqual(to_number(3), Decimal("3"))
        self.assertEqual(to_number(Decimal("2.5")), Decimal("2.5"))

    def test_amounts_too_large_to_store_read_as_zero(self):
        self.assertEqual(to_number("1e30"), Decimal("0"))
        self.assertEqual(to_number(Decimal("1e30")), Decimal("0"))
        self.assertEqual(to_number("10,000,000,000,000"), Decimal("0"))
        self.assertEqual(to_number("9,999,999,999,999.99"), Decimal("9999999999999.99"))


class LineTotalTests(SimpleTestCase):

    def test_price_times_quantity(self):
        self.assertEqual(line_total("10,000", "3"), Decimal("30000.00"))

    def test_unparsable_quantity_gives_zero(self):
        self.assertEqual(line_total("10000", ""), Decimal("0.00"))

    def test_largest_storable_line_does_not_overflow(self):
        expected = Decimal("9999999999999.99") * Decimal("2147483647")
        self.assertEqual(line_total("9,999,999,999,999.99", "2147483647"), expected)

    def test_both_totals(self):
        self.assertEqual(
            line_totals("10000", "15000", 3),
            {"total_initial_price": Decimal("30000"), "total_selling_price": Decimal("45000")},
        )


class RecomputeTests(SimpleTestCase):

    def setUp(self):
        self.state = {
            "product_id": None,
            "stock": "3",
            "initial_price": "10,000",
            "selling_price": "15,000",
            "total_initial_price": "0",
            "total_selling_price": "0",
        }

    def test_stock_change_recomputes_both_totals(self):
        patch = recompute(self.state, "stock")
        self.assertEqual(patch["total_initial_price"], Decimal("30000"))
        self.assertEqual(patch["total_selling_price"], Decimal("45000"))

    def test_editing_stock_to_five(self):
        self.state["stock"] = "5"
        patch = recompute(self.state, "stock")
        self.assertEqual(patch["total_initial_price"], Decimal("50000"))
        self.assertEqual(patch["total_selling_price"], Decimal("75000"))

    def test_initial_price_change_only_touches_its_total(self):
        self.state["initial_price"] = "12,000"
        patch = recompute(self.state, "initial_price")
        self.assertEqual(patch, {"total_initial_price": Decimal("36000")})

    def test_selling_price_change_only_touches_its_total(self):
        self.state["selling_price"] = "20000"
        patch = recompute(self.state, "selling_price")
        self.assertEqual(patch, {"total_selling_price": Decimal("60000")})

    def test_blank_stock_gives_zero_totals(self):
        self.state["stock"] = ""
        patch = recompute(self.state, "stock")
        self.assertEqual(patch["total_initial_price"], Decimal("0"))
        self.assertEqual(patch["total_selling_price"], Decimal("0"))

    def test_oversized_price_reads_as_zero(self):
        self.state.update(stock="1", initial_price="1e30", selling_price="1")
        patch = recompute(self.state, "stock")
        self.assertEqual(patch["total_initial_price"], Decimal("0"))
        self.assertEqual(patch["total_selling_price"], Decimal("1"))

    def test_product_selection_copies_default_prices(self):
        blank = {"product_id": 7, "stock": "", "initial_price": "", "selling_price": ""}
        patch = recompute(blank, "product_id", lambda pk: product("10000", "15000"))
        self.assertEqual(patch, {
            "initial_price": Decimal("10000"),
            "selling_price": Decimal("15000"),
        })
        self.assertNotIn("total_initial_price", patch)

    def test_unknown_product_leaves_fields_unchanged(self):
        self.assertEqual(recompute(self.state, "product_id", lambda pk: None), {})

    def test_other_fields_do_not_patch(self):
        self.assertEqual(recompute(self.state, "total_initial_price"), {})


class FormatMoneyTests(SimpleTestCase):

    def test_formats_with_currency_and_grouping(self):
        self.assertEqual(format_money(Decimal("30000"), "IDR"), "IDR 30,000.00")
        self.assertEqual(format_money("1,500.5", "USD"), "USD 1,500.50")
