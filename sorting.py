"""Sorters - build the predicate tiers for one grouping layer.

A Sorter sees the full candidate list of its pass and returns a
NamedPredicateSet; the pipeline partitions by all sorters' sets at once.
"""
from grouping import NamedPredicateSet


class Sorter:
    def __init__(self, name):
        self.name = name

    def sort(self, candidates):
        raise NotImplementedError


class TieredSorter(Sorter):
    """Fixed tiers, independent of the candidates"""
    def __init__(self, name, predicates):
        super().__init__(name)
        self.predicates = list(predicates)

    def sort(self, candidates):
        return NamedPredicateSet(self.name, self.predicates)


def _range_predicate(low, high):
    # Open interval; None leaves that side unbounded
    def predicate(item):
        if low is not None and item <= low:
            return False
        if high is not None and item >= high:
            return False
        return True
    return predicate


class ThresholdSorter(Sorter):
    """Tiers from ordered (low, high) open-interval bounds.

    ``ThresholdSorter("BiggerGroup", [(100, None), (0, 50), (None, 0)])``
    puts ids above 100 first, then ids in (0, 50), then negatives.
    """
    def __init__(self, name, bounds):
        super().__init__(name)
        self.bounds = [tuple(b) for b in bounds]

    def sort(self, candidates):
        return NamedPredicateSet(
            self.name,
            [_range_predicate(low, high) for low, high in self.bounds],
        )


class PreferredIdsSorter(Sorter):
    """Two tiers: a preferred id set first, everything else after"""
    def __init__(self, preferred_ids, name="PreferredIds"):
        super().__init__(name)
        self.preferred_ids = frozenset(preferred_ids)

    def sort(self, candidates):
        preferred = self.preferred_ids
        return NamedPredicateSet(self.name, [
            lambda item: item in preferred,
            lambda item: True,
        ])
