"""
Tests for GA operations: crossover operators, validation and random draws.
"""

import unittest
import numpy as np
from pathlib import Path

from ga_crossover.data_models import Individual, ValueWithIndex
from ga_crossover.validation import (
    InvalidArgumentError,
    build_position_index,
    check_cut_points,
    check_same_length,
    is_permutation_of,
)
from ga_crossover.random_utils import (
    create_rng,
    gen_int_rand_number,
    generate_cut_points,
    generate_mask,
)
from ga_crossover.crossover import (
    alternate_n_cut_points,
    order_based,
    order_based_with_mask,
    apply_crossover,
    crossover_statistics,
)


class TestNCutPointCrossover(unittest.TestCase):
    """Test n-cut-point crossover."""

    def test_empty_cut_points_copies_parents(self):
        """Without cut points each offspring is a copy of its parent."""
        child1, child2 = alternate_n_cut_points([1, 2, 3], [4, 5, 6], [])

        self.assertEqual(child1, [1, 2, 3])
        self.assertEqual(child2, [4, 5, 6])

    def test_two_cut_points(self):
        """Cut points [1, 2] swap only the middle gene."""
        child1, child2 = alternate_n_cut_points(
            ['A', 'B', 'C'], ['X', 'Y', 'Z'], [1, 2]
        )

        self.assertEqual(child1, ['A', 'Y', 'C'])
        self.assertEqual(child2, ['X', 'B', 'Z'])

    def test_single_cut_point(self):
        """One cut point swaps the whole tail."""
        child1, child2 = alternate_n_cut_points([0, 0, 0, 0, 0], [1, 1, 1, 1, 1], [3])

        self.assertEqual(child1, [0, 0, 0, 1, 1])
        self.assertEqual(child2, [1, 1, 1, 0, 0])

    def test_cut_point_at_zero_swaps_from_start(self):
        """A cut at position 0 makes the first segment come from the other parent."""
        child1, child2 = alternate_n_cut_points("abcd", "wxyz", [0, 2])

        self.assertEqual(child1, ['w', 'x', 'c', 'd'])
        self.assertEqual(child2, ['a', 'b', 'y', 'z'])

    def test_repeated_cut_point_stops_later_switches(self):
        """The counter advances once per position, so a repeat is never matched."""
        child1, child2 = alternate_n_cut_points("ABCD", "WXYZ", [1, 1, 3])

        self.assertEqual(child1, ['A', 'X', 'Y', 'Z'])
        self.assertEqual(child2, ['W', 'B', 'C', 'D'])

    def test_complementary_assignment(self):
        """Each position holds both parent genes across the two offspring."""
        rng = np.random.default_rng(3)
        parent1 = list(rng.integers(0, 100, size=20))
        parent2 = list(rng.integers(100, 200, size=20))

        child1, child2 = alternate_n_cut_points(parent1, parent2, [2, 5, 11, 17])

        self.assertEqual(len(child1), len(parent1))
        self.assertEqual(len(child2), len(parent1))
        for i in range(len(parent1)):
            self.assertEqual({child1[i], child2[i]}, {parent1[i], parent2[i]})

    def test_parents_not_modified(self):
        """Parents are left untouched."""
        parent1 = [1, 2, 3, 4]
        parent2 = [5, 6, 7, 8]

        alternate_n_cut_points(parent1, parent2, [1])

        self.assertEqual(parent1, [1, 2, 3, 4])
        self.assertEqual(parent2, [5, 6, 7, 8])

    def test_numpy_cut_points_accepted(self):
        """Cut points drawn by numpy work unchanged."""
        child1, _ = alternate_n_cut_points([1, 2, 3], [4, 5, 6], np.array([1, 2]))

        self.assertEqual(child1, [1, 5, 3])

    def test_length_mismatch_rejected(self):
        """Parents of different length are rejected."""
        with self.assertRaises(InvalidArgumentError):
            alternate_n_cut_points([1, 2, 3], [4, 5], [1])

    def test_unsorted_cut_points_rejected(self):
        """Descending cut points are rejected."""
        with self.assertRaises(InvalidArgumentError):
            alternate_n_cut_points([1, 2, 3, 4], [5, 6, 7, 8], [2, 1])

    def test_out_of_range_cut_points_rejected(self):
        """Cut points outside [0, L) are rejected."""
        with self.assertRaises(InvalidArgumentError):
            alternate_n_cut_points([1, 2, 3], [4, 5, 6], [3])
        with self.assertRaises(InvalidArgumentError):
            alternate_n_cut_points([1, 2, 3], [4, 5, 6], [-1])

    def test_invalid_argument_is_value_error(self):
        """Callers catching ValueError also catch precondition failures."""
        with self.assertRaises(ValueError):
            alternate_n_cut_points([1], [2, 3], [])


class TestOrderBasedCrossover(unittest.TestCase):
    """Test order-based crossover."""

    def test_worked_example(self):
        """Free genes follow their order in the other parent."""
        child1, child2 = order_based_with_mask(
            [1, 2, 3, 4], [4, 3, 2, 1], [True, False, False, True]
        )

        self.assertEqual(child1, [1, 3, 2, 4])
        self.assertEqual(child2, [4, 2, 3, 1])

    def test_full_mask_copies_parents(self):
        """An all-true mask inherits every gene directly."""
        child1, child2 = order_based_with_mask([2, 0, 1], [1, 2, 0], [True] * 3)

        self.assertEqual(child1, [2, 0, 1])
        self.assertEqual(child2, [1, 2, 0])

    def test_empty_mask_reorders_as_other_parent(self):
        """An all-false mask takes the other parent's ordering."""
        child1, child2 = order_based_with_mask([2, 0, 1], [1, 2, 0], [False] * 3)

        self.assertEqual(child1, [1, 2, 0])
        self.assertEqual(child2, [2, 0, 1])

    def test_offspring_are_permutations(self):
        """Random masks always yield permutations of the parents' genes."""
        rng = np.random.default_rng(42)
        parent1 = [int(g) for g in rng.permutation(30)]
        parent2 = [int(g) for g in rng.permutation(30)]

        for _ in range(20):
            child1, child2 = order_based(parent1, parent2, rng)
            self.assertEqual(sorted(child1), sorted(parent1))
            self.assertEqual(sorted(child2), sorted(parent1))

    def test_masked_positions_keep_parent_gene(self):
        """Positions with a set mask bit keep the parent's gene."""
        rng = np.random.default_rng(11)
        parent1 = [int(g) for g in rng.permutation(15)]
        parent2 = [int(g) for g in rng.permutation(15)]
        mask = generate_mask(15, rng)

        child1, child2 = order_based_with_mask(parent1, parent2, mask)

        for i, inherited in enumerate(mask):
            if inherited:
                self.assertEqual(child1[i], parent1[i])
                self.assertEqual(child2[i], parent2[i])

    def test_same_seed_same_offspring(self):
        """The operator is deterministic for a fixed seed."""
        parent1 = ['a', 'b', 'c', 'd', 'e', 'f']
        parent2 = ['f', 'd', 'b', 'a', 'e', 'c']

        first = order_based(parent1, parent2, np.random.default_rng(5))
        second = order_based(parent1, parent2, np.random.default_rng(5))

        self.assertEqual(first, second)

    def test_tuple_genes(self):
        """Any hashable gene type works."""
        parent1 = [(0, 0), (1, 1), (2, 2)]
        parent2 = [(2, 2), (0, 0), (1, 1)]

        child1, _ = order_based_with_mask(parent1, parent2, [False, True, False])

        self.assertEqual(child1, [(2, 2), (1, 1), (0, 0)])

    def test_missing_gene_rejected(self):
        """A gene absent from the other parent is rejected."""
        with self.assertRaises(InvalidArgumentError):
            order_based_with_mask([1, 2, 3], [1, 2, 4], [False, False, False])

    def test_missing_gene_at_fixed_position_rejected(self):
        """Non-permutation parents are rejected even when the odd gene is masked."""
        with self.assertRaises(InvalidArgumentError):
            order_based_with_mask([5, 2], [9, 2], [True, False])

    def test_duplicate_gene_rejected(self):
        """Duplicate genes would collide on index and are rejected."""
        with self.assertRaises(InvalidArgumentError):
            order_based_with_mask([1, 1, 2], [1, 2, 1], [False, False, False])

    def test_mask_length_mismatch_rejected(self):
        """The mask must cover every position."""
        with self.assertRaises(InvalidArgumentError):
            order_based_with_mask([1, 2, 3], [3, 2, 1], [True])

    def test_length_mismatch_rejected(self):
        """Parents of different length are rejected."""
        with self.assertRaises(InvalidArgumentError):
            order_based([1, 2, 3], [3, 2], np.random.default_rng(0))


class TestValidation(unittest.TestCase):
    """Test precondition helpers."""

    def test_check_same_length(self):
        """Returns the shared length."""
        self.assertEqual(check_same_length([1, 2], [3, 4]), 2)

    def test_check_cut_points_accepts_repeats(self):
        """Non-decreasing cut points are accepted."""
        check_cut_points([1, 1, 3], 5)

    def test_check_cut_points_rejects_non_integers(self):
        """Floats and booleans are not cut points."""
        with self.assertRaises(InvalidArgumentError):
            check_cut_points([1.5], 5)
        with self.assertRaises(InvalidArgumentError):
            check_cut_points([True], 5)

    def test_build_position_index(self):
        """Index maps each gene to its position."""
        self.assertEqual(build_position_index(['c', 'a', 'b']), {'c': 0, 'a': 1, 'b': 2})

    def test_build_position_index_unhashable(self):
        """Unhashable genes are rejected with a clear error."""
        with self.assertRaises(InvalidArgumentError):
            build_position_index([[1], [2]])

    def test_is_permutation_of(self):
        """Permutation check covers length, duplicates and membership."""
        self.assertTrue(is_permutation_of([1, 2, 3], [3, 1, 2]))
        self.assertFalse(is_permutation_of([1, 2, 3], [3, 1]))
        self.assertFalse(is_permutation_of([1, 1, 2], [1, 2, 1]))
        self.assertFalse(is_permutation_of([1, 2, 3], [1, 2, 4]))

    def test_value_with_index_orders_by_index(self):
        """Pairs sort by index only."""
        pairs = [ValueWithIndex(2, 'x'), ValueWithIndex(0, 'z'), ValueWithIndex(1, 'y')]

        self.assertEqual([p.value for p in sorted(pairs)], ['z', 'y', 'x'])
        self.assertEqual(ValueWithIndex(1, 'a'), ValueWithIndex(1, 'b'))


class TestRandomUtils(unittest.TestCase):
    """Test random draws."""

    def setUp(self):
        """Set up RNG."""
        self.rng = np.random.default_rng(42)

    def test_gen_int_rand_number_inclusive(self):
        """Both bounds can be drawn."""
        draws = {gen_int_rand_number(self.rng, 0, 1) for _ in range(200)}

        self.assertEqual(draws, {0, 1})

    def test_generate_mask(self):
        """Mask has one boolean per position."""
        mask = generate_mask(50, self.rng)

        self.assertEqual(len(mask), 50)
        self.assertTrue(all(isinstance(bit, bool) for bit in mask))
        self.assertIn(True, mask)
        self.assertIn(False, mask)

    def test_generate_cut_points(self):
        """Cut points are distinct, ascending and within [1, L)."""
        for _ in range(20):
            cut_points = generate_cut_points(10, 3, self.rng)
            self.assertEqual(len(cut_points), 3)
            self.assertEqual(cut_points, sorted(set(cut_points)))
            self.assertTrue(all(1 <= c < 10 for c in cut_points))

    def test_generate_cut_points_limits(self):
        """Zero cut points is fine; more than L - 1 is not."""
        self.assertEqual(generate_cut_points(5, 0, self.rng), [])
        self.assertEqual(generate_cut_points(5, 4, self.rng), [1, 2, 3, 4])
        with self.assertRaises(InvalidArgumentError):
            generate_cut_points(5, 5, self.rng)

    def test_create_rng(self):
        """Seeded generators reproduce; unseeded ones report their seed."""
        rng_a, seed_a = create_rng(123)
        rng_b, _ = create_rng(123)
        self.assertEqual(seed_a, 123)
        self.assertEqual(rng_a.integers(0, 1000), rng_b.integers(0, 1000))

        _, seed = create_rng()
        self.assertIsInstance(seed, int)


class TestApplyCrossover(unittest.TestCase):
    """Test crossover dispatch on individuals."""

    def setUp(self):
        """Set up test parents."""
        self.parent_a = Individual(
            id="tour_a",
            path=Path("parents/tour_a.csv"),
            features=[0, 1, 2, 3, 4, 5, 6, 7]
        )
        self.parent_b = Individual(
            id="tour_b",
            path=Path("parents/tour_b.csv"),
            features=[3, 7, 0, 5, 1, 6, 2, 4]
        )
        self.rng = np.random.default_rng(42)

    def test_n_cut_point_explicit(self):
        """Explicit cut points are used and reported."""
        (child_a, child_b), info = apply_crossover(
            self.parent_a, self.parent_b,
            {'strategy': 'n_cut_point', 'cut_points': [4]},
            self.rng
        )

        self.assertEqual(child_a.features, [0, 1, 2, 3, 1, 6, 2, 4])
        self.assertEqual(child_b.features, [3, 7, 0, 5, 4, 5, 6, 7])
        self.assertEqual(info['cut_points'], [4])
        self.assertTrue(info['applied'])

    def test_n_cut_point_drawn(self):
        """Without explicit cut points the configured number is drawn."""
        _, info = apply_crossover(
            self.parent_a, self.parent_b,
            {'strategy': 'n_cut_point', 'num_cut_points': 3},
            self.rng
        )

        self.assertEqual(len(info['cut_points']), 3)

    def test_order_based(self):
        """Order-based children are permutations and keep masked genes."""
        (child_a, child_b), info = apply_crossover(
            self.parent_a, self.parent_b, {'strategy': 'order_based'}, self.rng
        )

        self.assertTrue(child_a.is_permutation_of(self.parent_a))
        self.assertTrue(child_b.is_permutation_of(self.parent_a))
        for i, inherited in enumerate(info['mask']):
            if inherited:
                self.assertEqual(child_a.features[i], self.parent_a.features[i])
                self.assertEqual(child_b.features[i], self.parent_b.features[i])

    def test_children_metadata(self):
        """Children record parents and strategy."""
        (child_a, child_b), _ = apply_crossover(
            self.parent_a, self.parent_b, {'strategy': 'order_based'}, self.rng
        )

        self.assertEqual(child_a.id, "tour_a_x_tour_b_a")
        self.assertEqual(child_a.path, Path("parents/tour_a_x_tour_b_a.csv"))
        self.assertEqual(child_a.metadata['parent_ids'], ["tour_a", "tour_b"])
        self.assertEqual(child_b.metadata['parent_ids'], ["tour_b", "tour_a"])
        self.assertEqual(child_b.metadata['crossover_strategy'], 'order_based')

    def test_zero_probability_copies_parents(self):
        """With probability 0 no recombination happens."""
        (child_a, child_b), info = apply_crossover(
            self.parent_a, self.parent_b,
            {'strategy': 'order_based', 'probability': 0.0},
            self.rng
        )

        self.assertFalse(info['applied'])
        self.assertEqual(child_a.features, self.parent_a.features)
        self.assertEqual(child_b.features, self.parent_b.features)
        self.assertIsNot(child_a.features, self.parent_a.features)

    def test_unknown_strategy(self):
        """Unknown strategies are rejected."""
        with self.assertRaises(ValueError):
            apply_crossover(self.parent_a, self.parent_b, {'strategy': 'pmx'}, self.rng)

    def test_crossover_statistics(self):
        """Statistics count inherited genes per parent."""
        children, _ = apply_crossover(
            self.parent_a, self.parent_b,
            {'strategy': 'n_cut_point', 'cut_points': [4]},
            self.rng
        )

        stats = crossover_statistics(children, (self.parent_a, self.parent_b))

        self.assertEqual(stats['length'], 8)
        self.assertEqual(stats['child_a_from_parent_a'], 4)
        self.assertEqual(stats['child_a_from_parent_b'], 4)
        self.assertFalse(stats['child_a_is_permutation'])


def run_tests():
    """Run all tests in this module."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestNCutPointCrossover))
    suite.addTests(loader.loadTestsFromTestCase(TestOrderBasedCrossover))
    suite.addTests(loader.loadTestsFromTestCase(TestValidation))
    suite.addTests(loader.loadTestsFromTestCase(TestRandomUtils))
    suite.addTests(loader.loadTestsFromTestCase(TestApplyCrossover))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == '__main__':
    import sys
    success = run_tests()
    sys.exit(0 if success else 1)
