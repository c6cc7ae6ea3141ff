"""
Testes das tabelas de materiais
"""

import unittest

from cutsheet.catalog import (
    DEFAULT_STOCK_TABLE, default_sheet_stocks, default_stock_table, normalize_sheet_stocks,
    normalize_stock_lengths, stock_lengths_for
)


class TestStockLengths(unittest.TestCase):

    def test_normalize_drops_invalid_and_duplicates(self):
        values = [6000, "5500", 5500.4, -1, 0, "x", None, float("nan"), 7000]
        self.assertEqual(normalize_stock_lengths(values), [5500, 6000, 7000])

    def test_normalize_empty(self):
        self.assertEqual(normalize_stock_lengths(None), [])

    def test_stock_lengths_for_section(self):
        stock = stock_lengths_for("FB")
        self.assertEqual([s.length for s in stock], [5500, 6000])
        self.assertEqual(stock[0].id, "5500")
        self.assertEqual(stock[0].name, "5500mm")

    def test_unknown_section(self):
        with self.assertRaises(KeyError):
            stock_lengths_for("Z")

    def test_default_table_is_a_copy(self):
        table = default_stock_table()
        table["FB"].append(1)
        self.assertEqual(DEFAULT_STOCK_TABLE["FB"], [5500, 6000])


class TestSheetStocks(unittest.TestCase):

    def test_defaults(self):
        sheets = default_sheet_stocks()
        self.assertEqual([(s.id, s.width, s.height) for s in sheets],
                         [("3x6", 914, 1829), ("4x8", 1219, 2438), ("5x10", 1524, 3048)])

    def test_normalize(self):
        rows = [
            {"name": "grande", "width": 2000, "height": 3000},
            {"id": "p", "name": "pequena", "width": "500", "height": 400.2},
            {"id": "p", "name": "repetida", "width": 100, "height": 100},
            {"name": "", "width": 100, "height": 100},
            {"name": "zero", "width": 0, "height": 100},
        ]
        sheets = normalize_sheet_stocks(rows)
        self.assertEqual([(s.id, s.name, s.width, s.height) for s in sheets],
                         [("p", "pequena", 500, 400), ("grande", "grande", 2000, 3000)])


if __name__ == '__main__':
    unittest.main()
