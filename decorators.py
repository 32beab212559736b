"""Recommender decorators.

Each wraps another Recommender and adds one behavior to ``fetch``:
- EmptyResultEscalation: empty result becomes NoCandidatesError
- PersistenceDecorator: served ids are appended to a history store
- RetryDecorator: re-fetch the shortfall until the quota is met

They forward ``filter``/``group_sort``/``post_sort`` untouched and compose by
nesting, e.g. ``RetryDecorator(PersistenceDecorator(pipeline, store), 3)``.
"""
import logging
import time

from errors import NoCandidatesError, PersistenceError
from pipeline import Recommender, RecommendPipeline

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_KEY = "recommender:memory"


class RecommenderDecorator(Recommender):
    def __init__(self, recommender):
        self.recommender = recommender

    def filter(self, candidates):
        return self.recommender.filter(candidates)

    def group_sort(self, candidates):
        return self.recommender.group_sort(candidates)

    def post_sort(self, candidates):
        return self.recommender.post_sort(candidates)

    def fetch(self, size):
        return self.recommender.fetch(size)


class EmptyResultEscalation(RecommenderDecorator):
    """Turn a successful-but-empty fetch into an error.

    ``error_factory`` is an exception class or zero-argument callable; a
    fresh exception is built for every empty fetch.
    """
    def __init__(self, recommender, error_factory=NoCandidatesError):
        super().__init__(recommender)
        self.error_factory = error_factory

    def fetch(self, size):
        result = self.recommender.fetch(size)
        if not result:
            raise self.error_factory()
        return result


def new_no_candidates_recommender(user_id, recaller, filter_rules=None, sorters=None,
                                  post_sorters=None, error_factory=NoCandidatesError,
                                  rng=None, seed=None):
    """Build a pipeline that raises instead of returning an empty list"""
    pipeline = RecommendPipeline(
        user_id, recaller, filter_rules, sorters, post_sorters, rng=rng, seed=seed,
    )
    return EmptyResultEscalation(pipeline, error_factory)


class PersistenceDecorator(RecommenderDecorator):
    """Record every served id in an append-only history store.

    Members are scored with the epoch-seconds time of the write. The history
    is never read here; pair with ServedHistoryFilter to exclude served ids.
    If the write fails the fetched ids are not returned; they ride along on
    the raised PersistenceError instead.
    """
    def __init__(self, recommender, store, memory_key=DEFAULT_MEMORY_KEY, clock=time.time):
        super().__init__(recommender)
        self.store = store
        self.memory_key = memory_key
        self.clock = clock

    def fetch(self, size):
        result = self.recommender.fetch(size)
        if not result:
            return result

        score = float(int(self.clock()))
        try:
            self.store.append(self.memory_key, result, score)
        except Exception as e:
            logger.warning("recording %d served ids under %s failed: %s",
                           len(result), self.memory_key, e)
            raise PersistenceError(result, e) from e
        return result


class RetryDecorator(RecommenderDecorator):
    """Fetch again for the shortfall until ``size`` is reached.

    Results are appended as-is: no dedup across attempts, and the attempt
    that crosses ``size`` is not truncated. The first error aborts the
    whole call and everything gathered so far is dropped.
    """
    def __init__(self, recommender, retry_count):
        super().__init__(recommender)
        if retry_count < 1:
            raise ValueError(f"retry_count must be >= 1, got {retry_count}")
        self.retry_count = retry_count

    def fetch(self, size):
        result = []
        fetch_size = size
        for attempt in range(self.retry_count):
            result.extend(self.recommender.fetch(fetch_size))
            if len(result) >= size:
                break
            fetch_size = size - len(result)
            logger.debug("attempt %d/%d short by %d", attempt + 1, self.retry_count, fetch_size)
        return result
