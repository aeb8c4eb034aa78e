import logging

import numpy as np

from cheap.stats import NullCounter

logger = logging.getLogger(__name__)


class EmptyHeapError(RuntimeError):
    """Pop requested on a heap with no live elements."""


class CapacityExceededError(RuntimeError):
    """Push requested when the buffer has no free slot on the requested side."""


def childOffsets(o):
    """
    The two children of the node at signed offset o from the center.
    The root (offset 0) has one child on each side; any other node has two children on its own side.
    :param o: signed offset
    :return: tuple (near child, far child)
    """
    if o == 0:
        return (-1, 1)
    if o > 0:
        return (2 * o, 2 * o + 1)
    return (2 * o, 2 * o - 1)


def parentOffset(o):
    """
    The parent of the node at signed offset o, half the distance from the center rounded down.
    :param o: signed, non-zero offset
    :return: the parent's offset (0 for offsets -1 and 1)
    """
    assert o != 0, "c-heap state: can't find parent of center node"
    if o > 0:
        return o // 2
    return -(-o // 2)


class CenteredHeap:
    """
    Double-ended binary heap over a fixed window of an array.
    The best element sits at the center; elements to its left form one implicit binary heap
    and elements to its right another, both rooted at the center. Values can be pushed at and
    popped to either end of the window, so the window can slide along a shared buffer without
    touching anything outside it.

    The window is half-open: slots lo <= i < hi are live, and an empty heap has lo == center == hi.
    """

    POLICIES = ("directional", "midpoint")

    def __init__(self, capacity, better=None, reverse=False, origin=None, policy="directional",
                 counter=None, checked=False):
        """
        Initialise an empty heap with its own buffer.
        :param capacity: the number of slots in the buffer
        :param better: strict ordering predicate better(a, b); defaults to a < b
        :param reverse: with the default predicate, keep the greatest value at the center instead
        :param origin: slot where the empty window starts; defaults to the middle of the buffer
        :param policy: where to put the center when recentering, "directional" or "midpoint"
        :param counter: receives countCompare()/countSwap() calls
        :param checked: verify all invariants before and after every operation
        """
        if capacity < 0:
            raise ValueError("Capacity must be non-negative: " + str(capacity))
        if origin is None:
            origin = capacity // 2
        if not 0 <= origin <= capacity:
            raise ValueError("Origin must lie in [0, %d]: %s" % (capacity, origin))
        self._setup(np.empty(capacity, dtype=object), origin, origin, origin,
                    better, reverse, policy, counter, checked)

    @classmethod
    def overBuffer(cls, buffer, lo=0, center=None, hi=None, better=None, reverse=False,
                   policy="directional", counter=None, checked=False):
        """
        Create a heap whose window is a region of a caller-owned mutable sequence (list or numpy array).
        Slots outside [lo, hi) are left untouched. A non-empty window is heapified around its center.
        :param buffer: the sequence to operate on in place
        :param lo: first live slot
        :param center: slot of the root; defaults to lo
        :param hi: one past the last live slot; defaults to lo (an empty window)
        :return: the heap
        """
        heap = cls.__new__(cls)
        if hi is None:
            hi = lo
        if center is None:
            center = lo
        heap._setup(buffer, lo, center, hi, better, reverse, policy, counter, checked)
        if lo < hi:
            heap.recenter()
        return heap

    def _setup(self, buffer, lo, center, hi, better, reverse, policy, counter, checked):
        if policy not in self.POLICIES:
            raise ValueError("Unknown recenter policy: " + str(policy))
        if better is None:
            better = (lambda a, b: a > b) if reverse else (lambda a, b: a < b)
        self._elements = buffer
        self._lo = lo
        self._c = center
        self._hi = hi
        self._better = better
        self.policy = policy
        self.counter = counter if counter is not None else NullCounter()
        self.checked = checked
        self.checkRange()

    # Window state

    @property
    def lo(self):
        return self._lo

    @property
    def center(self):
        return self._c

    @property
    def hi(self):
        return self._hi

    @property
    def buffer(self):
        return self._elements

    def __len__(self):
        """
        The number of elements in the heap currently.
        :return: the number of live slots
        """
        return self._hi - self._lo

    def capacity(self):
        """
        Size of the underlying buffer
        :return: the number of slots the window may range over
        """
        return len(self._elements)

    def isEmpty(self):
        return self._lo == self._hi

    def peek(self):
        """
        The best element, which is kept at the center; does not change the heap
        :return: the element, or None if the heap is empty
        """
        if self.isEmpty():
            return None
        return self._elements[self._c]

    def __getitem__(self, o):
        """
        Retrieve an element by its signed offset from the center (offset 0 is the root)
        :param o: offset
        :return: the element at this offset
        """
        i = self._c + o
        if not self._lo <= i < self._hi:
            raise IndexError("Offset outside the heap window: " + str(o))
        return self._elements[i]

    def __iter__(self):
        # window order, not sorted order
        for i in range(self._lo, self._hi):
            yield self._elements[i]

    def _slot(self, i):
        s = str(self._elements[i])
        dot = ":"
        if i == self._lo:
            s += ":lo"
            dot = "."
        if i == self._c:
            s += dot + "c"
            dot = "."
        if i == self._hi:
            s += dot + "hi"
        return s

    def __str__(self):
        """
        The whole buffer with window markers, e.g. [7 3:lo 1.c 4 8:hi 2]
        """
        n = len(self._elements)
        if n < 100:
            return "[" + " ".join(self._slot(i) for i in range(n)) + "]"
        head = " ".join(self._slot(i) for i in range(40))
        tail = " ".join(self._slot(i) for i in range(n - 40, n))
        return "[" + head + " ... " + tail + "]"

    def __repr__(self):
        return "CenteredHeap(lo=%d, c=%d, hi=%d) %s" % (self._lo, self._c, self._hi, self)

    # Primitives

    def _bt(self, i, j):
        """Is the element in slot i better than the element in slot j."""
        self.counter.countCompare()
        return self._better(self._elements[i], self._elements[j])

    def _swap(self, i, j):
        self.counter.countSwap()
        a = self._elements
        a[i], a[j] = a[j], a[i]

    def _inWindow(self, i):
        return self._lo <= i < self._hi

    def _siftUp(self, i):
        """Move the element in slot i towards the center while it is better than its parent."""
        c = self._c
        n = i
        while n != c:
            p = c + parentOffset(n - c)
            if not self._bt(n, p):
                break
            self._swap(n, p)
            n = p
        if self.checked:
            logger.debug("siftUp(%d) stopped at %d", i, n)

    def _siftDown(self, i):
        """Move the element in slot i away from the center while a child in the window is better."""
        c = self._c
        n = i
        while True:
            best = n
            for o in childOffsets(n - c):
                ch = c + o
                if self._inWindow(ch) and self._bt(ch, best):
                    best = ch
            if best == n:
                break
            self._swap(n, best)
            n = best
        if self.checked:
            logger.debug("siftDown(%d) stopped at %d", i, n)

    def _assertForeign(self, i):
        assert 0 <= i < len(self._elements), "c-heap error: slot outside buffer: " + str(i)
        assert not self._inWindow(i), "c-heap error: slot already inside c-heap: " + str(i)

    # Validity

    def checkRange(self):
        """
        Check the marker invariants: the window lies in the buffer and the center lies in the window.
        """
        lo, c, hi = self._lo, self._c, self._hi
        assert 0 <= lo and hi <= len(self._elements), "c-heap state: markers outside array"
        assert lo == c == hi or lo <= c < hi, "c-heap state: markers invalid"

    def isValid(self):
        """
        Walk the window and test the heap order: no element is better than its parent.
        Does not count comparisons.
        :return: True if the heap order holds
        """
        a = self._elements
        c = self._c
        for i in range(self._lo, self._hi):
            if i != c:
                p = c + parentOffset(i - c)
                if self._better(a[i], a[p]):
                    logger.error("c-heap check failed: a[%d]=%r better than a[%d]=%r in %r", i, a[i], p, a[p], self)
                    return False
        return True

    def check(self):
        """
        Full invariant check; a failure means an earlier operation is broken.
        """
        self.checkRange()
        assert self.isValid(), "c-heap state: heap invariant failed"

    # Recentering

    def recenter(self, center=None):
        """
        Rebuild the heap order of the whole window around a center, bottom-up, one side at a time
        and the root last. Costs O(w log w) for a window of w elements.
        :param center: slot of the new center; defaults to the current one
        """
        if center is not None:
            assert self._lo <= center < self._hi, "c-heap error: center outside window: " + str(center)
            self._c = center
        self.checkRange()
        lo, c, hi = self._lo, self._c, self._hi
        if self.checked:
            logger.debug("recenter start %r", self)
        for m in range((c - lo) // 2, 0, -1):
            self._siftDown(c - m)
        for m in range((hi - 1 - c) // 2, 0, -1):
            self._siftDown(c + m)
        if lo < hi:
            self._siftDown(c)
        if self.checked:
            logger.debug("recenter end %r", self)
            self.check()

    def _newCenter(self, towards):
        """Center for a window whose old center just left it; towards is the slot the window is moving to."""
        if self.policy == "midpoint":
            return (self._lo + self._hi - 1) // 2
        return towards

    # Boundary operations

    def absorbLeft(self):
        """
        Extend the window one slot to the left, taking in the element already in that slot.
        """
        if self._lo == 0:
            raise CapacityExceededError("c-heap error: attempt to push past array boundary")
        if self.checked:
            self.check()
        lop = self._lo - 1
        if self.isEmpty():
            self._c = lop
        self._lo = lop
        self._siftUp(lop)
        if self.checked:
            self.check()

    def absorbRight(self):
        """
        Extend the window one slot to the right, taking in the element already in that slot.
        """
        if self._hi >= len(self._elements):
            raise CapacityExceededError("c-heap error: attempt to push when c-heap full")
        if self.checked:
            self.check()
        self._hi += 1
        self._siftUp(self._hi - 1)
        if self.checked:
            self.check()

    def pushLeft(self, item):
        """
        Insert an element in the slot left of the window; the center does not move.
        :param item: the element
        """
        if self._lo == 0:
            raise CapacityExceededError("c-heap error: attempt to push past array boundary")
        self._elements[self._lo - 1] = item
        self.absorbLeft()

    def pushRight(self, item):
        """
        Insert an element in the slot right of the window; the center does not move.
        :param item: the element
        """
        if self._hi >= len(self._elements):
            raise CapacityExceededError("c-heap error: attempt to push when c-heap full")
        self._elements[self._hi] = item
        self.absorbRight()

    def pushLeftFrom(self, i):
        """
        Swap the element in foreign slot i into the slot left of the window and absorb it.
        :param i: index of a slot outside the window
        """
        self._assertForeign(i)
        if self._lo == 0:
            raise CapacityExceededError("c-heap error: attempt to push past array boundary")
        self._swap(i, self._lo - 1)
        self.absorbLeft()

    def pushRightFrom(self, i):
        """
        Swap the element in foreign slot i into the slot right of the window and absorb it.
        :param i: index of a slot outside the window
        """
        self._assertForeign(i)
        if self._hi >= len(self._elements):
            raise CapacityExceededError("c-heap error: attempt to push when c-heap full")
        self._swap(i, self._hi)
        self.absorbRight()

    def popLeft(self):
        """
        Remove the best element, leaving it in the leftmost slot, which drops out of the window.
        Recenters if the center itself drops out.
        :return: the element
        """
        if self.isEmpty():
            raise EmptyHeapError("c-heap error: pop when empty")
        if self.checked:
            self.check()
        lo = self._lo
        lop = lo + 1
        if lo == self._c:
            self._lo = lop
            if lop < self._hi:
                self._c = self._newCenter(self._hi - 1)
                if self.checked:
                    logger.debug("popLeft: center left the window, recentering at %d", self._c)
                self.recenter()
            else:
                self._c = lop
        else:
            self._swap(self._c, lo)
            self._lo = lop
            self._siftDown(self._c)
        if self.checked:
            self.check()
        return self._elements[lo]

    def popRight(self):
        """
        Remove the best element, leaving it in the rightmost slot, which drops out of the window.
        Recenters if the center itself drops out.
        :return: the element
        """
        if self.isEmpty():
            raise EmptyHeapError("c-heap error: pop when empty")
        if self.checked:
            self.check()
        hip = self._hi - 1
        if hip == self._c:
            self._hi = hip
            if self._lo < hip:
                self._c = self._newCenter(self._lo)
                if self.checked:
                    logger.debug("popRight: center left the window, recentering at %d", self._c)
                self.recenter()
            else:
                self._c = self._lo
        else:
            self._swap(hip, self._c)
            self._hi = hip
            self._siftDown(self._c)
        if self.checked:
            self.check()
        return self._elements[hip]

    def popPush(self, i):
        """
        Pop the best element into foreign slot i and push the element that was there.
        The window does not change.
        :param i: index of a slot outside the window
        :return: the popped element
        """
        if self.isEmpty():
            raise EmptyHeapError("c-heap error: attempted to pop from an empty range")
        self._assertForeign(i)
        if self.checked:
            self.check()
        self._swap(i, self._c)
        self._siftDown(self._c)
        if self.checked:
            self.check()
        return self._elements[i]

    def pushPop(self, i):
        """
        Push the element in foreign slot i, then pop the best element into slot i.
        Nothing moves if the heap is empty or slot i already holds an element no worse than the best.
        The window does not change.
        :param i: index of a slot outside the window
        :return: the element left in slot i
        """
        self._assertForeign(i)
        if self.isEmpty() or not self._bt(self._c, i):
            return self._elements[i]
        if self.checked:
            self.check()
        self._swap(i, self._c)
        self._siftDown(self._c)
        if self.checked:
            self.check()
        return self._elements[i]

    def slideRight(self):
        """
        Move the element right of the window to the window's leftmost slot, which drops out,
        and shift the window one slot to the right. Recenters if the center drops out.
        """
        if self._hi >= len(self._elements):
            raise CapacityExceededError("c-heap error: attempt to slide right past array bounds")
        if self.checked:
            self.check()
        if self.isEmpty():
            self._lo += 1
            self._c += 1
            self._hi += 1
        else:
            lo, hi = self._lo, self._hi
            self._swap(lo, hi)
            if self._c == lo:
                self._lo, self._hi = lo + 1, hi + 1
                self._c = self._newCenter(hi)
                self.recenter()
            else:
                # the old lo was a leaf, so only the moved element needs placing
                self._siftUp(hi)
                self._lo, self._hi = lo + 1, hi + 1
        if self.checked:
            self.check()

    def slideLeft(self):
        """
        Move the element left of the window to the window's rightmost slot, which drops out,
        and shift the window one slot to the left. Recenters if the center drops out.
        """
        if self._lo == 0:
            raise CapacityExceededError("c-heap error: attempt to slide left past array bounds")
        if self.checked:
            self.check()
        if self.isEmpty():
            self._lo -= 1
            self._c -= 1
            self._hi -= 1
        else:
            lop, hip = self._lo - 1, self._hi - 1
            self._swap(lop, hip)
            if self._c == hip:
                self._lo, self._hi = lop, hip
                self._c = self._newCenter(lop)
                self.recenter()
            else:
                self._siftUp(lop)
                self._lo, self._hi = lop, hip
        if self.checked:
            self.check()
