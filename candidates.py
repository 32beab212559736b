"""Candidate recall - the raw, unfiltered candidate pool.

Recallers are the first stage of the pipeline. They return candidate ids in
no particular order; the pipeline shuffles them before anything else runs.
"""


class Recaller:
    def __init__(self, name):
        self.name = name

    def recall(self):
        raise NotImplementedError


class StaticRecaller(Recaller):
    """Fixed pool of ids, e.g. a pre-computed match list"""
    def __init__(self, candidate_ids, name="Static"):
        super().__init__(name)
        self.candidate_ids = list(candidate_ids)

    def recall(self):
        # Fresh copy each call: the pipeline shuffles in place
        return list(self.candidate_ids)


class CallableRecaller(Recaller):
    """Adapts any zero-argument function returning ids"""
    def __init__(self, fn, name=None):
        super().__init__(name or getattr(fn, "__name__", "Callable"))
        self.fn = fn

    def recall(self):
        return list(self.fn())


class MergedRecaller(Recaller):
    """Concatenates several recallers, keeping the first occurrence of each id"""
    def __init__(self, recallers, name="Merged"):
        super().__init__(name)
        self.recallers = list(recallers)

    def recall(self):
        seen = set()
        merged = []
        for recaller in self.recallers:
            for candidate_id in recaller.recall():
                if candidate_id not in seen:
                    seen.add(candidate_id)
                    merged.append(candidate_id)
        return merged
