"""Filter rules and the filter chain.

A FilterRule narrows a candidate list for one user. The FilterChain runs
rules in declaration order, feeding each rule's output into the next.
"""
import logging

logger = logging.getLogger(__name__)


class FilterRule:
    def __init__(self, name):
        self.name = name

    def filter(self, user_id, candidates):
        raise NotImplementedError


class FilterChain:
    """Ordered filter rules with short-circuit on empty"""
    def __init__(self, rules=None):
        self.rules = list(rules or [])

    def filter(self, user_id, candidates):
        """Apply every rule in order.

        A rule that raises aborts the chain and the exception propagates.
        Once a rule leaves nothing, the remaining rules are skipped and an
        empty list is returned.
        """
        result = list(candidates)
        for rule in self.rules:
            result = list(rule.filter(user_id, result))
            if not result:
                logger.debug("filter %s left no candidates for user %s", rule.name, user_id)
                return []
        return result


class OddIdFilter(FilterRule):
    """Keep odd candidate ids, negative ones included (-3 % 2 == 1)"""
    def __init__(self):
        super().__init__("OddId")

    def filter(self, user_id, candidates):
        return [c for c in candidates if c % 2 == 1]


class PredicateFilter(FilterRule):
    """Keep candidates satisfying an arbitrary predicate"""
    def __init__(self, predicate, name="Predicate"):
        super().__init__(name)
        self.predicate = predicate

    def filter(self, user_id, candidates):
        return [c for c in candidates if self.predicate(c)]


class ServedHistoryFilter(FilterRule):
    """Remove ids already recorded as served in the history store.

    Reads the same key the PersistenceDecorator writes, so stacking both
    keeps a user from being shown an id twice.
    """
    def __init__(self, store, memory_key):
        super().__init__("ServedHistory")
        self.store = store
        self.memory_key = memory_key

    def filter(self, user_id, candidates):
        served = self.store.served(self.memory_key)
        if not served:
            return list(candidates)
        return [c for c in candidates if c not in served]
