import numpy as np

from candidates import StaticRecaller
from config import Settings
from filtering import FilterRule, OddIdFilter, PredicateFilter
from main import MATCH_IDS, DemoBuilder, bigger_group_sorter
from pipeline import RecommendPipeline
from sorting import PreferredIdsSorter, TieredSorter

TIER_0 = {101, 201, 301, 401, 601, 991}
TIER_1 = {1, 3, 5, 7, 9}


def _demo_pipeline(seed=None):
    return RecommendPipeline(
        0,
        StaticRecaller(MATCH_IDS),
        filter_rules=[OddIdFilter()],
        sorters=[bigger_group_sorter()],
        seed=seed,
    )


def test_pipeline_end_to_end():
    results = _demo_pipeline().fetch(100)
    assert len(results) == 11
    assert set(results[:6]) == TIER_0
    assert set(results[6:]) == TIER_1


def test_end_to_end_tier_order_holds_for_many_seeds():
    for seed in range(25):
        results = _demo_pipeline(seed).fetch(100)
        assert set(results[:6]) == TIER_0
        assert set(results[6:]) == TIER_1


def test_seeded_pipelines_are_reproducible():
    assert _demo_pipeline(3).fetch(100) == _demo_pipeline(3).fetch(100)


def test_injected_generator_is_used():
    rng = np.random.default_rng(11)
    pipeline = RecommendPipeline(0, StaticRecaller(MATCH_IDS), rng=rng)
    assert pipeline.rng is rng


def test_truncates_to_size_from_top_tier():
    results = _demo_pipeline().fetch(4)
    assert len(results) == 4
    assert set(results) <= TIER_0


def test_non_positive_size_returns_empty():
    assert _demo_pipeline().fetch(0) == []
    assert _demo_pipeline().fetch(-3) == []


def test_empty_recall_returns_empty():
    assert RecommendPipeline(0, StaticRecaller([])).fetch(10) == []


def test_filter_to_nothing_returns_empty():
    pipeline = RecommendPipeline(
        0, StaticRecaller([2, 4, 6]), filter_rules=[OddIdFilter(), PredicateFilter(lambda c: True)],
    )
    assert pipeline.fetch(10) == []


def test_no_sorters_keeps_everything():
    results = RecommendPipeline(0, StaticRecaller(range(10)), seed=1).fetch(100)
    assert sorted(results) == list(range(10))


def test_unmatched_candidates_are_dropped():
    sorter = TieredSorter("small", [lambda x: x < 3])
    results = RecommendPipeline(0, StaticRecaller(range(10)), sorters=[sorter]).fetch(100)
    assert sorted(results) == [0, 1, 2]


class SpyRule(FilterRule):
    """Records what reaches the filter chain; optionally sorts its output"""
    def __init__(self, sort_output=False):
        super().__init__("Spy")
        self.sort_output = sort_output
        self.seen = []

    def filter(self, user_id, candidates):
        self.seen.append(list(candidates))
        return sorted(candidates) if self.sort_output else list(candidates)


class SpyPreferredSorter(PreferredIdsSorter):
    def __init__(self, preferred_ids):
        super().__init__(preferred_ids)
        self.seen = []

    def sort(self, candidates):
        self.seen.append(list(candidates))
        return super().sort(candidates)


def test_post_sort_lifts_preferred_ids_without_shuffle():
    post = SpyPreferredSorter([9, 1])
    pipeline = RecommendPipeline(
        0,
        StaticRecaller(MATCH_IDS),
        filter_rules=[OddIdFilter()],
        sorters=[bigger_group_sorter()],
        post_sorters=[post],
        seed=5,
    )
    results = pipeline.fetch(100)
    flat = post.seen[0]
    assert set(flat[:6]) == TIER_0
    expected = [x for x in flat if x in (1, 9)] + [x for x in flat if x not in (1, 9)]
    assert results == expected


def test_post_sort_single_catch_all_tier_keeps_order():
    post = TieredSorter("all", [lambda x: True])
    seen = []

    class SpyTiered(TieredSorter):
        def sort(self, candidates):
            seen.append(list(candidates))
            return post.sort(candidates)

    for seed in range(5):
        seen.clear()
        pipeline = RecommendPipeline(
            0, StaticRecaller(MATCH_IDS), [OddIdFilter()], [bigger_group_sorter()],
            post_sorters=[SpyTiered("spy", [])], seed=seed,
        )
        assert pipeline.fetch(100) == seen[0]


def test_recall_order_is_shuffled_before_filtering():
    orders = []
    for seed in range(5):
        spy = SpyRule()
        RecommendPipeline(0, StaticRecaller(MATCH_IDS), [spy], seed=seed).fetch(100)
        assert sorted(spy.seen[0]) == sorted(MATCH_IDS)
        orders.append(spy.seen[0])
    assert any(order != MATCH_IDS for order in orders)


def test_each_group_is_shuffled_after_grouping():
    # Filter output is sorted, so only the in-group shuffle can reorder a tier
    tier_orders = set()
    for seed in range(10):
        pipeline = RecommendPipeline(
            0, StaticRecaller(MATCH_IDS), [OddIdFilter(), SpyRule(sort_output=True)],
            [bigger_group_sorter()], seed=seed,
        )
        results = pipeline.fetch(100)
        assert set(results[:6]) == TIER_0
        assert set(results[6:]) == TIER_1
        tier_orders.add(tuple(results[:6]))
    assert len(tier_orders) > 1
    assert tier_orders != {tuple(sorted(TIER_0))}


def test_sorters_see_the_same_full_filtered_list():
    seen = []

    class SpySorter(TieredSorter):
        def sort(self, candidates):
            seen.append(sorted(candidates))
            return super().sort(candidates)

    sorters = [
        SpySorter("a", [lambda x: x > 100, lambda x: True]),
        SpySorter("b", [lambda x: True]),
    ]
    RecommendPipeline(0, StaticRecaller(MATCH_IDS), [OddIdFilter()], sorters).fetch(100)
    expected = sorted(TIER_0 | TIER_1)
    assert seen == [expected, expected]


def test_intermediate_operations_are_callable():
    pipeline = _demo_pipeline()
    filtered = pipeline.filter([1, 2, 101, 102])
    assert filtered == [1, 101]
    assert pipeline.group_sort(filtered) == [[101], [1]]
    assert pipeline.post_sort([101, 1]) == [[101, 1]]


def test_demo_builder_without_store_or_retry():
    recommender = DemoBuilder(Settings(seed=2)).build()
    assert isinstance(recommender, RecommendPipeline)
    assert len(recommender.fetch(100)) == 11
