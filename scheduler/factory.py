import logging
from typing import List, Optional
import numpy as np
from core.individual import Individual
from core.state import SchedulingData
from core.workload import WorkloadTracker
from exceptions.custom_errors import PopulationInitializationError

logger = logging.getLogger(__name__)


class IndividualFactory:
    """
    Builds random, feasibility-aware individuals.

    For every date, then every shift in chronological order, then every ward, the
    candidate pool is the statically eligible nurses (qualification, ward access,
    hierarchy, not blocked) narrowed by a per-individual `WorkloadTracker`.
    Charge slots are filled first from charge/admin nurses, the remaining slots
    uniformly at random without replacement. A pool smaller than the requirement
    is assigned whole. With the starvation override on, a short slot takes every
    workload-feasible nurse first and is then topped up from eligible nurses
    over a soft limit.
    """

    def __init__(self, data: SchedulingData, rng: Optional[np.random.Generator] = None):
        self.data = data
        self.rng = rng if rng is not None else np.random.default_rng()

    def create_random(self) -> Individual:
        data = self.data
        ind = Individual.empty(data.shape)
        tracker = WorkloadTracker(data)
        override = data.policy.allow_constraint_override_on_starvation

        for d in range(data.num_days):
            for s in range(data.num_shifts):
                feasible = tracker.feasible(d, s)
                for w in range(data.num_wards):
                    need = int(data.required[w, s])
                    if need == 0:
                        continue
                    need_charge = int(data.required_charge[w, s])
                    eligible = data.eligible[d, w, s]
                    chosen = self.pick(eligible & feasible, need, need_charge)
                    if override and len(chosen) < need:
                        # top up from eligible nurses over a soft limit, not already on this shift
                        spare = eligible & ~feasible & ~ind.genes[d, :, s, :].any(axis=0)
                        missing = need - len(chosen)
                        charge_left = min(max(need_charge - int(data.is_charge[chosen].sum()), 0), missing)
                        chosen += self.pick(spare, missing, charge_left)

                    for n in chosen:
                        ind.genes[d, w, s, n] = True
                        tracker.assign(n, d, s)
                    feasible[chosen] = False
        return ind

    def pick(self, pool: np.ndarray, need: int, need_charge: int) -> List[int]:
        """Choose up to `need` nurses from `pool`, charge nurses first."""
        chosen: List[int] = []
        if need_charge:
            charge_pool = np.flatnonzero(pool & self.data.is_charge)
            take = min(need_charge, len(charge_pool))
            chosen.extend(self.rng.choice(charge_pool, size=take, replace=False).tolist())

        rest = pool.copy()
        rest[chosen] = False
        rest_pool = np.flatnonzero(rest)
        take = min(need - len(chosen), len(rest_pool))
        if take > 0:
            chosen.extend(self.rng.choice(rest_pool, size=take, replace=False).tolist())
        return chosen

    def create_population(self, size: int) -> List[Individual]:
        """Build `size` independent random individuals."""
        if size < 1:
            raise PopulationInitializationError(f"Population size must be positive, got {size}")
        try:
            population = [self.create_random() for _ in range(size)]
        except (IndexError, ValueError) as e:
            raise PopulationInitializationError(f"Failed to build the initial population: {e}") from e
        logger.info(f"🧬 Initial population of {size} individuals built")
        return population


def create_random(data: SchedulingData, seed: Optional[int] = None) -> Individual:
    """Build one random individual; the same seed always yields the same genes."""
    return IndividualFactory(data, np.random.default_rng(seed)).create_random()
