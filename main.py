"""Example usage - recommend odd ids, big ids first"""
import logging

from candidates import StaticRecaller
from config import Settings
from decorators import PersistenceDecorator, RetryDecorator
from filtering import OddIdFilter
from history_store import RedisHistoryStore
from pipeline import RecommendBuilder, RecommendPipeline
from sorting import ThresholdSorter

MATCH_IDS = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10,
             101, 201, 301, 401, 500, 601, 700, 800, 991, 1000]


def bigger_group_sorter():
    """Ids above 100 first, then (0, 50), then negatives"""
    return ThresholdSorter("BiggerGroup", [(100, None), (0, 50), (None, 0)])


class DemoBuilder(RecommendBuilder):
    def __init__(self, settings, store=None):
        self.settings = settings
        self.store = store

    def build(self):
        recommender = RecommendPipeline(
            self.settings.user_id,
            StaticRecaller(MATCH_IDS, name="Match"),
            filter_rules=[OddIdFilter()],
            sorters=[bigger_group_sorter()],
            post_sorters=None,
            seed=self.settings.seed,
        )

        store = self.store
        if store is None and self.settings.redis_url:
            store = RedisHistoryStore.from_url(self.settings.redis_url)
        if store is not None:
            recommender = PersistenceDecorator(recommender, store, self.settings.memory_key)

        if self.settings.retry_count > 0:
            recommender = RetryDecorator(recommender, self.settings.retry_count)
        return recommender


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    recommender = DemoBuilder(settings).build()

    print(f"Recommending for user {settings.user_id} (size={settings.fetch_size})")
    print("=" * 60)

    results = recommender.fetch(settings.fetch_size)

    print(f"\n{len(results)} recommendations:")
    print("-" * 60)
    for i, candidate_id in enumerate(results, 1):
        print(f"{i:2d}. {candidate_id}")


if __name__ == "__main__":
    main()
