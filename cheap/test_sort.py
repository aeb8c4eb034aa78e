import unittest
from cheap.sort import *
from cheap.stats import TallyCounter
import numpy as np
import random


class MyTestCase(unittest.TestCase):

    def setUp(self):
        """Set up for each test"""
        self.a = [random.randint(0, 100) for _ in range(random.randint(0, 300))]

    def test_IsSorted(self):
        self.assertTrue(isSorted([]))
        self.assertTrue(isSorted([1, 1, 2]))
        self.assertFalse(isSorted([2, 1]))
        self.assertTrue(isSorted([3, 9, 1, 2], 2))
        self.assertTrue(isSorted([3, 2, 1], better=lambda a, b: a > b))

    def test_SmallSort(self):
        a = [9, 4, 7, 1, 0]
        smallSort(a, 1, 4)
        self.assertEqual(a, [9, 1, 4, 7, 0])

    def test_Merge(self):
        a = [-1, 1, 4, 6, 9, 2, 3, 5, 10, 11, 99]
        merge(a, 1, 5, 10, checked=True)
        self.assertEqual(a, [-1, 1, 2, 3, 4, 5, 6, 9, 10, 11, 99])

    def test_MergeRandom(self):
        for _ in range(20):
            left = sorted(random.randint(0, 30) for _ in range(random.randint(0, 40)))
            right = sorted(random.randint(0, 30) for _ in range(random.randint(0, 40)))
            a = left + right
            merge(a, 0, len(left), len(a), checked=True)
            self.assertEqual(a, sorted(left + right))

    def test_MergeSort(self):
        a = list(self.a)
        cnt = TallyCounter()
        mergeSort(a, counter=cnt)
        self.assertEqual(a, sorted(self.a))
        if len(a) > 1:
            self.assertGreater(cnt.compares, 0)

    def test_MergeSortChecked(self):
        a = [random.random() for _ in range(100)]
        b = list(a)
        mergeSort(a, checked=True)
        self.assertEqual(a, sorted(b))

    def test_MergeSortNumpy(self):
        a = np.random.default_rng(3).permutation(257)
        mergeSort(a)
        self.assertTrue(np.array_equal(a, np.arange(257)))

    def test_MergeSortReverse(self):
        a = list(self.a)
        mergeSort(a, better=lambda x, y: x > y)
        self.assertEqual(a, sorted(self.a, reverse=True))

    def test_HeapSortLeft(self):
        a = list(self.a)
        heapSortLeft(a)
        self.assertEqual(a, sorted(self.a))

    def test_HeapSortRight(self):
        a = list(self.a)
        heapSortRight(a, checked=len(a) < 100)
        self.assertEqual(a, sorted(self.a))

    def test_RunningSortLeft(self):
        a = list(self.a)
        runningSortLeft(a, len(a) + 1)
        self.assertEqual(a, sorted(self.a))
        a = [5, 4, 3, 2, 1, 0]
        runningSortLeft(a, 2)
        self.assertEqual(a, [4, 3, 2, 1, 0, 5])

    def test_RunningSortRight(self):
        a = list(self.a)
        runningSortRight(a, len(a) + 1)
        self.assertEqual(a, sorted(self.a, reverse=True))
        a = [0, 1, 2, 3, 4, 5]
        runningSortRight(a, 2, checked=True)
        self.assertEqual(a, [5, 0, 1, 2, 3, 4])

    def test_Runs(self):
        # every run size leaves the multiset intact
        for run in range(0, 8):
            a = list(self.a)
            runningSortLeft(a, run)
            self.assertEqual(sorted(a), sorted(self.a))


if __name__ == "__main__":
    unittest.main()
