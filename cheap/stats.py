"""
Instrumentation for heap and sort operations: counts of element comparisons and swaps.
"""


class NullCounter:
    """Counter that records nothing; the default when no statistics are wanted."""

    def countCompare(self):
        pass

    def countSwap(self):
        pass

    def copyTo(self, target):
        pass


class TallyCounter:
    """Counter that tallies every comparison and swap."""

    def __init__(self):
        self.compares = 0
        self.swaps = 0

    def countCompare(self):
        self.compares += 1

    def countSwap(self):
        self.swaps += 1

    def copyTo(self, target):
        """
        Store the tallies in a dict
        :param target: dict receiving "compares" and "swaps"
        """
        target["compares"] = self.compares
        target["swaps"] = self.swaps

    def reset(self):
        self.compares = 0
        self.swaps = 0

    def __repr__(self):
        return "TallyCounter(compares=%d, swaps=%d)" % (self.compares, self.swaps)
