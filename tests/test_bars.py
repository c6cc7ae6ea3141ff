"""
Testes do otimizador de barras
"""

import unittest
from collections import Counter

from cutsheet.bars import BarCuttingOptimizer, build_pattern, estimate_purchased_length, max_repeat_count
from cutsheet.models import BarCuttingOptions, BarCuttingRequest, BarRemnant, Piece, SourceType, StockLength
from cutsheet.utils import summarize_bars


def make_request(stock, pieces, remnants=(), **options):
    return BarCuttingRequest(
        stock=[StockLength(length=n) for n in stock],
        pieces=[Piece(length=length, quantity=qty) for length, qty in pieces],
        remnants=[BarRemnant(length=n) for n in remnants],
        options=BarCuttingOptions(**options),
    )


class BarAssertions:

    def assertConserved(self, result, pieces):
        produced = Counter()
        for bar in result.bars:
            for cut in bar.cuts:
                produced[cut] += bar.repeat_count
        requested = Counter()
        for length, qty in pieces:
            requested[length] += qty
        self.assertEqual(produced, requested)

    def assertBarArithmetic(self, result, kerf):
        for bar in result.bars:
            self.assertEqual(sum(bar.cuts) + bar.kerf_total + bar.remainder, bar.stock_length)
            self.assertEqual(bar.kerf_total, kerf * len(bar.cuts))
            self.assertGreaterEqual(bar.remainder, 0)


class TestYieldMode(BarAssertions, unittest.TestCase):

    def setUp(self):
        self.optimizer = BarCuttingOptimizer()

    def test_scenario_three_lengths_on_6000(self):
        pieces = [(1500, 2), (1800, 2), (2000, 2)]
        request = make_request([6000], pieces, kerf_mm=3)
        result = self.optimizer.solve(request)

        self.assertTrue(result.ok)
        self.assertEqual([b.cuts for b in result.bars], [[2000, 2000, 1800], [1800, 1500, 1500]])
        self.assertEqual([b.remainder for b in result.bars], [191, 1191])
        self.assertTrue(all(b.source_type == SourceType.STOCK for b in result.bars))
        self.assertEqual(result.summary.purchased_bars_count, 2)
        self.assertEqual(result.summary.by_purchased_stock, {6000: 2})
        self.assertConserved(result, pieces)
        self.assertBarArithmetic(result, 3)

        self.assertEqual(self.optimizer.solve(request), result)

    def test_summary_totals(self):
        result = self.optimizer.solve(make_request([6000], [(1500, 2), (1800, 2), (2000, 2)], kerf_mm=3))
        summary = result.summary

        self.assertEqual(summary.total_stock, 12000)
        self.assertEqual(summary.total_remainder, 191 + 1191)
        self.assertEqual(summary.total_kerf, 18)
        self.assertEqual(summary.total_used, 12000 - 1382)
        self.assertAlmostEqual(summary.yield_pct, (12000 - 1382) / 12000 * 100)
        self.assertEqual(summary.need_total, 6)
        self.assertEqual(summary.made_total, 6)
        self.assertEqual(summary.optimize_mode, "global")
        self.assertFalse(summary.stacking_mode)
        self.assertEqual(summarize_bars(result.bars, 6, 3, False, "global"), summary)

    def test_remnant_preferred_when_it_wastes_less(self):
        for mode in ("global", "greedy"):
            result = self.optimizer.solve(
                make_request([6000], [(3900, 1)], remnants=[4000], optimize_mode=mode)
            )
            self.assertEqual(result.bars[0].source_type, SourceType.REMNANT)
            self.assertEqual(result.summary.purchased_bars_count, 0)
            self.assertEqual(result.summary.used_remnants, [4000])

    def test_remnant_wins_exact_tie(self):
        for mode in ("global", "greedy"):
            result = self.optimizer.solve(
                make_request([6000], [(1000, 1)], remnants=[6000], optimize_mode=mode)
            )
            self.assertEqual(result.bars[0].source_type, SourceType.REMNANT)
            self.assertEqual(result.summary.purchased_bars_count, 0)

    def test_remnant_consumed_once(self):
        result = self.optimizer.solve(
            make_request([6000], [(2500, 1), (1000, 1)], remnants=[3000])
        )

        self.assertTrue(result.ok)
        self.assertEqual(
            [(b.source_type, b.cuts) for b in result.bars],
            [(SourceType.REMNANT, [2500]), (SourceType.STOCK, [1000])],
        )
        self.assertEqual(result.summary.used_remnants_count, 1)

    def test_remnant_longer_than_stock_extends_feasibility(self):
        result = self.optimizer.solve(make_request([6000], [(7000, 1)], remnants=[8000]))
        self.assertTrue(result.ok)
        self.assertEqual(result.bars[0].stock_length, 8000)
        self.assertEqual(result.bars[0].remainder, 1000)

    def test_second_oversized_piece_fails_once_remnant_is_used(self):
        result = self.optimizer.solve(make_request([6000], [(7000, 2)], remnants=[8000]))
        self.assertFalse(result.ok)
        self.assertEqual(result.error_type, "infeasible")
        self.assertIn("7000", result.error)
        self.assertEqual(result.bars, [])

    def test_greedy_mode(self):
        pieces = [(700, 1), (500, 3)]
        result = self.optimizer.solve(make_request([1000, 1200], pieces, optimize_mode="greedy"))
        self.assertTrue(result.ok)
        self.assertEqual([(b.stock_length, b.cuts) for b in result.bars], [(1200, [700, 500]), (1000, [500, 500])])
        self.assertEqual(result.summary.optimize_mode, "greedy")
        self.assertConserved(result, pieces)

    def test_global_mode_picks_cheapest_total(self):
        pieces = [(900, 1), (600, 2)]
        result = self.optimizer.solve(make_request([1000, 1500], pieces))
        self.assertEqual([(b.stock_length, b.cuts) for b in result.bars], [(1500, [900, 600]), (1000, [600])])
        self.assertEqual(result.summary.total_stock, 2500)

    def test_conservation_many_pieces(self):
        pieces = [(2350, 3), (1780, 5), (1200, 7), (640, 9), (95, 4)]
        for mode in ("global", "greedy"):
            result = self.optimizer.solve(
                make_request([5500, 6000, 7000], pieces, remnants=[3100, 2400], kerf_mm=2, optimize_mode=mode)
            )
            self.assertTrue(result.ok)
            self.assertConserved(result, pieces)
            self.assertBarArithmetic(result, 2)
            self.assertLessEqual(result.summary.used_remnants_count, 2)


class TestStackingMode(BarAssertions, unittest.TestCase):

    def setUp(self):
        self.optimizer = BarCuttingOptimizer()

    def test_scenario_single_length(self):
        result = self.optimizer.solve(make_request([6000], [(1000, 10)], stacking_mode=True))

        self.assertTrue(result.ok)
        self.assertEqual(len(result.bars), 2)
        self.assertEqual(result.bars[0].cuts, [1000] * 6)
        self.assertEqual(result.bars[0].repeat_count, 1)
        self.assertEqual(result.bars[0].remainder, 0)
        self.assertEqual(result.bars[1].cuts, [1000] * 4)
        self.assertEqual(result.bars[1].remainder, 2000)
        self.assertEqual(sum(len(b.cuts) * b.repeat_count for b in result.bars), 10)
        self.assertEqual(result.summary.optimize_mode, "stacking")

    def test_pattern_repeats(self):
        result = self.optimizer.solve(make_request([6000], [(1000, 12)], stacking_mode=True))

        self.assertEqual(len(result.bars), 1)
        self.assertEqual(result.bars[0].repeat_count, 2)
        self.assertEqual(result.summary.purchased_bars_count, 2)
        self.assertEqual(result.summary.by_purchased_stock, {6000: 2})
        self.assertEqual(result.summary.total_stock, 12000)

    def test_mixed_lengths_interleave(self):
        pieces = [(2000, 4), (1000, 4)]
        result = self.optimizer.solve(make_request([6000], pieces, stacking_mode=True))

        self.assertEqual(len(result.bars), 1)
        self.assertEqual(result.bars[0].cuts, [2000, 1000, 2000, 1000])
        self.assertEqual(result.bars[0].repeat_count, 2)
        self.assertConserved(result, pieces)

    def test_uses_largest_stock(self):
        result = self.optimizer.solve(make_request([5500, 6000, 7000], [(1000, 3)], stacking_mode=True))
        self.assertEqual(result.bars[0].stock_length, 7000)

    def test_remnants_drained_first(self):
        result = self.optimizer.solve(
            make_request([6000], [(1000, 3)], remnants=[2500], stacking_mode=True)
        )

        self.assertEqual(result.bars[0].source_type, SourceType.REMNANT)
        self.assertEqual(result.bars[0].cuts, [1000, 1000])
        self.assertEqual(result.bars[0].remainder, 500)
        self.assertEqual(result.bars[1].cuts, [1000])
        self.assertEqual(result.summary.used_remnants, [2500])
        self.assertEqual(result.summary.purchased_bars_count, 1)

    def test_piece_only_fitting_used_remnant_fails(self):
        result = self.optimizer.solve(
            make_request([6000], [(7000, 2)], remnants=[8000], stacking_mode=True)
        )
        self.assertFalse(result.ok)
        self.assertEqual(result.error_type, "infeasible")
        self.assertIn("7000", result.error)

    def test_conservation_with_kerf(self):
        pieces = [(2350, 3), (1780, 5), (1200, 7), (640, 9)]
        result = self.optimizer.solve(
            make_request([6000, 7000], pieces, remnants=[3000], kerf_mm=3, stacking_mode=True)
        )
        self.assertTrue(result.ok)
        self.assertConserved(result, pieces)
        self.assertBarArithmetic(result, 3)


class TestPatternHelpers(unittest.TestCase):

    def test_pattern_never_exceeds_demand(self):
        cuts, need, remainder, kerf_total = build_pattern(6000, Counter({1000: 4}), 0)
        self.assertEqual(cuts, [1000] * 4)
        self.assertEqual(need, Counter({1000: 4}))
        self.assertEqual(remainder, 2000)
        self.assertEqual(kerf_total, 0)

    def test_max_repeat_count(self):
        self.assertEqual(max_repeat_count(Counter({2000: 5, 1000: 9}), Counter({2000: 2, 1000: 2})), 2)

    def test_estimate_uses_smallest_fitting_stock(self):
        self.assertEqual(estimate_purchased_length([1000, 1500], [600, 600], 0), 2000)
        self.assertEqual(estimate_purchased_length([1000], [], 0), 0)
        self.assertEqual(estimate_purchased_length([1000], [1200], 0), float("inf"))


class TestValidation(unittest.TestCase):

    def setUp(self):
        self.optimizer = BarCuttingOptimizer()

    def test_empty_demand(self):
        result = self.optimizer.solve(make_request([6000], []))
        self.assertFalse(result.ok)
        self.assertEqual(result.error_type, "input_validation")

    def test_empty_catalog(self):
        result = self.optimizer.solve(make_request([], [(1000, 1)], remnants=[6000]))
        self.assertFalse(result.ok)
        self.assertEqual(result.error_type, "input_validation")

    def test_feasibility_boundary(self):
        ok = self.optimizer.solve(make_request([6000], [(5997, 1)], kerf_mm=3))
        self.assertTrue(ok.ok)
        self.assertEqual(ok.bars[0].remainder, 0)

        for stacking in (False, True):
            failed = self.optimizer.solve(make_request([6000], [(5998, 1)], kerf_mm=3, stacking_mode=stacking))
            self.assertFalse(failed.ok)
            self.assertEqual(failed.error_type, "infeasible")
            self.assertIn("5998", failed.error)

    def test_piece_longer_than_everything(self):
        result = self.optimizer.solve(make_request([5500, 6000], [(1000, 2), (7000, 1)], remnants=[5000]))
        self.assertFalse(result.ok)
        self.assertIn("7000", result.error)
        self.assertIsNone(result.summary)


if __name__ == '__main__':
    unittest.main()
