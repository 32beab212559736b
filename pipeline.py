"""Core recommendation pipeline.

recall -> shuffle -> filter -> group sort -> shuffle within groups -> flatten
-> post sort -> flatten -> truncate
"""
import logging

import numpy as np

from errors import CollaboratorError, RecommendError
from filtering import FilterChain
from grouping import flatten, group_hierarchical, shuffle

logger = logging.getLogger(__name__)


class Recommender:
    """Anything that can filter, group and fetch candidates.

    Decorators implement the same four methods, so they nest freely.
    """

    def filter(self, candidates):
        raise NotImplementedError

    def group_sort(self, candidates):
        raise NotImplementedError

    def post_sort(self, candidates):
        raise NotImplementedError

    def fetch(self, size):
        raise NotImplementedError


class RecommendBuilder:
    """Composition root: wires collaborators and decorators into a Recommender"""

    def build(self):
        raise NotImplementedError


def _collaborate(stage, fn, *args):
    try:
        return fn(*args)
    except RecommendError:
        raise
    except Exception as e:
        logger.warning("%s failed: %s", stage, e)
        raise CollaboratorError(stage, e) from e


class RecommendPipeline(Recommender):
    def __init__(self, user_id, recaller, filter_rules=None, sorters=None,
                 post_sorters=None, rng=None, seed=None):
        self.user_id = user_id
        self.recaller = recaller
        self.filter_chain = FilterChain(filter_rules)
        self.sorters = list(sorters or [])
        self.post_sorters = list(post_sorters or [])
        # One generator per pipeline; share across threads only if externally locked
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def filter(self, candidates):
        return _collaborate("filter", self.filter_chain.filter, self.user_id, candidates)

    def _predicate_sets(self, sorters, candidates):
        # Every sorter sees the same full list, not the previous layer's groups
        return [
            _collaborate(f"sort:{sorter.name}", sorter.sort, candidates)
            for sorter in sorters
        ]

    def group_sort(self, candidates):
        return group_hierarchical(candidates, self._predicate_sets(self.sorters, candidates))

    def post_sort(self, candidates):
        return group_hierarchical(candidates, self._predicate_sets(self.post_sorters, candidates))

    def fetch(self, size):
        if size <= 0:
            return []

        candidates = list(_collaborate("recall", self.recaller.recall))
        if not candidates:
            logger.debug("recall returned nothing for user %s", self.user_id)
            return []

        # Randomize recall order so it never leaks into tie-breaks
        shuffle(candidates, self.rng)

        filtered = self.filter(candidates)
        if not filtered:
            return []

        groups = self.group_sort(filtered)
        for group in groups:
            shuffle(group, self.rng)
        flat = flatten(groups)

        post_groups = self.post_sort(flat)
        flat = flatten(post_groups)

        logger.debug(
            "user %s: recalled=%d filtered=%d groups=%d post_groups=%d available=%d",
            self.user_id, len(candidates), len(filtered), len(groups),
            len(post_groups), len(flat),
        )
        return flat[:min(size, len(flat))]
