"""Predicate grouping - ordered, exclusive, hierarchical partitioning.

A NamedPredicateSet is one partition layer: its predicates are tiers in
priority order. Each item lands in the group of the first predicate it
satisfies; items matching none of them are dropped. Stacking several sets
subdivides every group of the previous layer.
"""


class NamedPredicateSet:
    """A diagnostic name plus an ordered list of ``item -> bool`` callables."""

    def __init__(self, name, predicates):
        self.name = name
        self.predicates = list(predicates)

    def __repr__(self):
        return f"NamedPredicateSet({self.name!r}, tiers={len(self.predicates)})"


def group_exclusive(items, predicate_set):
    """Split items into one group per predicate (first match wins).

    Groups come back in predicate order and may be empty. Items that match
    no predicate are not in any group.
    """
    groups = [[] for _ in predicate_set.predicates]
    for item in items:
        for index, predicate in enumerate(predicate_set.predicates):
            if predicate(item):
                groups[index].append(item)
                break
    return groups


def group_hierarchical(items, predicate_sets):
    """Partition items by each predicate set in turn.

    With no predicate sets the input is returned as a single group, even when
    it is empty. Otherwise the result only holds non-empty groups, ordered by
    tier of the first set, then by tier of the next set within it, and so on.
    """
    if not predicate_sets:
        return [list(items)]

    first, rest = predicate_sets[0], predicate_sets[1:]
    results = []
    for group in group_exclusive(items, first):
        if not group:
            continue
        for sub_group in group_hierarchical(group, rest):
            if sub_group:
                results.append(sub_group)
    return results


def shuffle(items, rng):
    """Shuffle a list in place with the given numpy Generator."""
    if len(items) > 1:
        rng.shuffle(items)
    return items


def flatten(groups):
    flat = []
    for group in groups:
        flat.extend(group)
    return flat
