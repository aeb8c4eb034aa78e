"""
In-place sorts built on the centered heap. Each works on any mutable sequence (list or numpy array),
uses O(1) auxiliary memory and reports comparisons and swaps to an optional counter.
"""

import logging

from cheap.heap import CenteredHeap
from cheap.stats import NullCounter

logger = logging.getLogger(__name__)

SMALL_RUN = 4

# merge candidates
_LO, _MD, _HI = 0, 1, 2


def _less(a, b):
    return a < b


def isSorted(a, lo=0, hi=None, better=None):
    """
    Check that a[lo:hi] is in order, i.e. no element is better than its predecessor
    :param a: the sequence
    :param better: strict ordering predicate; defaults to a < b
    :return: True if sorted
    """
    if hi is None:
        hi = len(a)
    assert 0 <= lo <= hi <= len(a), "isSorted(pre): length invariants"
    if better is None:
        better = _less
    for i in range(lo + 1, hi):
        if better(a[i], a[i - 1]):
            return False
    return True


def smallSort(a, lo, hi, counter=None, better=None):
    """
    Insertion sort of a[lo:hi], for short runs.
    """
    assert 0 <= lo <= hi <= len(a), "smallSort(pre): length invariants"
    if counter is None:
        counter = NullCounter()
    if better is None:
        better = _less
    for i in range(lo + 1, hi):
        j = i
        while j > lo:
            counter.countCompare()
            if not better(a[j], a[j - 1]):
                break
            a[j - 1], a[j] = a[j], a[j - 1]
            counter.countSwap()
            j -= 1


def merge(a, lo, md, hi, counter=None, better=None, checked=False):
    """
    Merge the sorted runs a[lo:md] and a[md:hi] in place.
    A centered heap starting empty at md collects the left-run elements displaced by the output;
    it slides right as the output position catches up with it.

    ---|------|------|-----|---
       lo   ch.lo  ch.hi  hi

    :param a: the sequence
    :param counter: receives comparison and swap counts
    :param better: strict ordering predicate; defaults to a < b
    :param checked: verify heap invariants and sortedness along the way
    """
    if counter is None:
        counter = NullCounter()
    if better is None:
        better = _less
    if checked:
        assert isSorted(a, lo, md, better), "merge(pre): lo to md not sorted"
        assert isSorted(a, md, hi, better), "merge(pre): md to hi not sorted"
    ch = CenteredHeap.overBuffer(a, md, md, md, better=better, counter=counter, checked=checked)

    for ix in range(lo, hi):
        if ix >= ch.hi:
            # only the right run is left, already in place
            break

        best = None
        if ix < ch.lo:
            best, value = _LO, a[ix]
        if not ch.isEmpty():
            candidate = a[ch.center]
            if best is None:
                best, value = _MD, candidate
            else:
                counter.countCompare()
                if better(candidate, value):
                    best, value = _MD, candidate
        if ch.hi < hi:
            candidate = a[ch.hi]
            if best is None:
                best, value = _HI, candidate
            else:
                counter.countCompare()
                if better(candidate, value):
                    best, value = _HI, candidate
        if best is None:
            raise RuntimeError("merge: no candidate for output slot " + str(ix))

        if best == _LO:
            continue
        if ix < ch.lo:
            if best == _MD:
                ch.popPush(ix)
            else:
                ch.pushRightFrom(ix)
        elif ix == ch.lo:
            if best == _MD:
                ch.popLeft()
            else:
                ch.slideRight()
        else:
            raise RuntimeError("merge: output slot %d overtook the heap at %d" % (ix, ch.lo))

    if checked:
        assert isSorted(a, lo, hi, better), "merge(post): not sorted after merge"


def mergeSort(a, lo=0, hi=None, counter=None, better=None, checked=False):
    """
    Top-down merge sort of a[lo:hi] using the in-place centered heap merge
    :param a: the sequence
    :param counter: receives comparison and swap counts
    :param better: strict ordering predicate; defaults to a < b
    """
    if hi is None:
        hi = len(a)
    assert 0 <= lo <= hi <= len(a), "mergeSort(pre): length invariants"
    if hi - lo <= SMALL_RUN:
        smallSort(a, lo, hi, counter, better)
        return
    md = (lo + hi) // 2
    logger.debug("mergeSort: lo=%d, md=%d, hi=%d", lo, md, hi)
    mergeSort(a, lo, md, counter, better, checked)
    mergeSort(a, md, hi, counter, better, checked)
    merge(a, lo, md, hi, counter, better, checked)


def _reverse(a):
    i, j = 0, len(a) - 1
    while i < j:
        a[i], a[j] = a[j], a[i]
        i += 1
        j -= 1


def heapSortLeft(a, counter=None, better=None, checked=False):
    """
    Heap sort: span the whole sequence with a heap centered at the right end and pop everything to the left.
    """
    n = len(a)
    if n == 0:
        return
    ch = CenteredHeap.overBuffer(a, 0, n - 1, n, better=better, counter=counter, checked=checked)
    while not ch.isEmpty():
        ch.popLeft()


def heapSortRight(a, counter=None, better=None, checked=False):
    """
    Heap sort: span the whole sequence with a heap centered at the left end, pop everything to the right
    (which leaves it in reverse order), then reverse.
    """
    n = len(a)
    if n == 0:
        return
    ch = CenteredHeap.overBuffer(a, 0, 0, n, better=better, counter=counter, checked=checked)
    while not ch.isEmpty():
        ch.popRight()
    _reverse(a)


def runningSortLeft(a, run, counter=None, better=None, checked=False):
    """
    Sort only within a sliding window: starting at the left, absorb elements from the right
    until the heap holds run elements, then pop one to the left for each one absorbed.
    The result is fully sorted when run >= len(a).
    :param run: the window size
    """
    n = len(a)
    if n == 0:
        return
    run = max(run, 1)
    ch = CenteredHeap.overBuffer(a, 0, better=better, counter=counter, checked=checked)
    while ch.lo < n:
        if ch.hi < n:
            ch.absorbRight()
        if len(ch) >= run or ch.hi == n:
            ch.popLeft()
        if checked and n < 200:
            logger.debug("runningSortLeft %s", ch)


def runningSortRight(a, run, counter=None, better=None, checked=False):
    """
    Mirror image of runningSortLeft: start at the right, absorb from the left, pop to the right.
    Best elements end up on the right, so with run >= len(a) the result is in reverse order.
    """
    n = len(a)
    if n == 0:
        return
    run = max(run, 1)
    ch = CenteredHeap.overBuffer(a, n, better=better, counter=counter, checked=checked)
    while ch.hi > 0:
        if ch.lo > 0:
            ch.absorbLeft()
        if len(ch) >= run or ch.lo == 0:
            ch.popRight()
        if checked and n < 200:
            logger.debug("runningSortRight %s", ch)
