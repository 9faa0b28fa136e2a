"""
Worker assignment policies

A policy picks the worker whose snapshot is embedded in a new reservation.
"""

import random
from typing import Optional, Protocol, Sequence

from ...errors import NoWorkersAvailable, NotFound
from ...schemas import Worker


class AssignmentPolicy(Protocol):
    def select_worker(self, workers: Sequence[Worker]) -> Worker: ...


class RandomAssignmentPolicy:
    """Uniform random choice over every worker, no load or skill balancing"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select_worker(self, workers: Sequence[Worker]) -> Worker:
        if not workers:
            raise NoWorkersAvailable()
        return self.rng.choice(list(workers))


class FixedAssignmentPolicy:
    """Always assigns the worker with the given id"""

    def __init__(self, worker_id: str):
        self.worker_id = worker_id

    def select_worker(self, workers: Sequence[Worker]) -> Worker:
        if not workers:
            raise NoWorkersAvailable()
        for worker in workers:
            if worker.id == self.worker_id:
                return worker
        raise NotFound("Worker", self.worker_id)
