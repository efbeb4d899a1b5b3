import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np
from core.constraint_manager import ConstraintManager, build_constraint_manager
from core.individual import Individual
from core.state import SchedulingData
from exceptions.custom_errors import (
    FitnessEvaluationError,
    InvalidIndividualError,
    PopulationInitializationError,
)
from scheduler.factory import IndividualFactory
from scheduler.fitness import evaluate_fitness
from scheduler.operators import crossover, mutate, repair, tournament_selection
from schemas.schedule.roster import GenerationStats
from utils.constants import LOG_EVERY_N_GENERATIONS

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """
    Outcome of one genetic search.

    Attributes:
        best (Individual): The best individual by rank key over the whole run.
        generations (int): Number of generations evaluated.
        history (List[GenerationStats]): Best, average and worst fitness per generation.
        converged (bool): Whether the success threshold was reached.
        stop_reason (str): "threshold", "generations" or "timeout".
        wall_time (float): Seconds spent in the search.
    """

    best: Individual
    generations: int
    history: List[GenerationStats] = field(default_factory=list)
    converged: bool = False
    stop_reason: str = "generations"
    wall_time: float = 0.0


def configure_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Configure the random generator every stochastic step of a run draws from."""
    return np.random.default_rng(seed)


class GeneticSolver:
    def __init__(self, data: SchedulingData, rng: Optional[np.random.Generator] = None):
        self.data = data
        self.settings = data.settings
        self.rng = rng if rng is not None else configure_rng(self.settings.seed)
        self.factory = IndividualFactory(data, self.rng)
        self.constraints: ConstraintManager = build_constraint_manager(data)

    def evaluate(self, ind: Individual) -> Individual:
        """Run the constraint evaluator and the fitness function on one individual."""
        if ind.evaluated:
            return ind
        try:
            ind.check_shape(self.data.shape)
            violations = self.constraints.apply_all(ind)
            evaluate_fitness(ind, self.data, violations)
        except InvalidIndividualError:
            raise
        except Exception as e:
            raise FitnessEvaluationError(f"Failed to evaluate individual: {e}") from e
        if not 0.0 <= ind.fitness <= 1.0:
            raise FitnessEvaluationError(f"Fitness {ind.fitness} outside [0, 1]")
        return ind

    def evaluate_population(self, population: List[Individual], pool: Optional[ThreadPoolExecutor]):
        if pool is None:
            for ind in population:
                self.evaluate(ind)
        else:
            list(pool.map(self.evaluate, population))

    def record(self, generation: int, population: List[Individual]) -> GenerationStats:
        fitness = np.array([ind.fitness for ind in population])
        return GenerationStats(
            generation=generation,
            bestFitness=float(population[0].fitness),
            averageFitness=float(fitness.mean()),
            worstFitness=float(fitness.min()),
            populationSize=len(population),
        )

    def next_generation(self, population: List[Individual]) -> List[Individual]:
        """Elitism, then tournament selection, crossover, mutation and repair until the population is full."""
        s = self.settings
        size = len(population)
        elite_count = min(size, int(math.floor(s.eliteRate * size)))
        offspring = [ind.copy() for ind in population[:elite_count]]

        while len(offspring) < size:
            parent_a = tournament_selection(population, s.tournamentSize, self.rng)
            parent_b = tournament_selection(population, s.tournamentSize, self.rng)
            if self.rng.random() < s.crossoverRate:
                children = crossover(parent_a, parent_b, self.rng)
            else:
                children = (parent_a.copy(), parent_b.copy())

            for child in children:
                if len(offspring) >= size:
                    break
                if self.rng.random() < s.mutationRate:
                    mutate(child, self.data, self.rng)
                if s.repair:
                    repair(child, self.data, self.rng)
                child.check_shape(self.data.shape)
                offspring.append(child)
        return offspring

    def run(self) -> SearchResult:
        """
        Run the genetic search.

        Each generation is evaluated, sorted by rank key and recorded. The search
        stops when the best individual has no CRITICAL violation and reaches the
        success threshold, when the generation cap is reached, or when the
        wall-clock timeout expires. Non-convergence is not an error.

        Returns:
            SearchResult: The best individual found plus the convergence history.
        """
        s = self.settings
        logger.info(
            f"🚀 Genetic search: population={s.populationSize}, generations={s.generations}, "
            f"seed={s.seed}, workers={s.workers}"
        )
        start = time.monotonic()
        deadline = start + s.timeoutSeconds if s.timeoutSeconds else None

        population = self.factory.create_population(s.populationSize)
        if not population:
            raise PopulationInitializationError("Initial population is empty")

        history: List[GenerationStats] = []
        best: Optional[Individual] = None
        stop_reason = "generations"
        converged = False

        pool = ThreadPoolExecutor(max_workers=s.workers) if s.workers > 1 else None
        try:
            for generation in range(s.generations):
                self.evaluate_population(population, pool)
                population.sort(key=lambda ind: ind.rank_key, reverse=True)
                history.append(self.record(generation, population))

                leader = population[0]
                if best is None or leader.rank_key > best.rank_key:
                    best = leader.copy()

                if generation % LOG_EVERY_N_GENERATIONS == 0:
                    logger.info(
                        f"Generation {generation}: best={leader.fitness:.4f} "
                        f"avg={history[-1].averageFitness:.4f} critical={leader.critical}"
                    )

                if leader.critical == 0 and leader.fitness >= s.successThreshold:
                    stop_reason, converged = "threshold", True
                    logger.info(f"✅ Success threshold reached at generation {generation}")
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    stop_reason = "timeout"
                    logger.info(f"⏱ Timeout after generation {generation}")
                    break
                if generation + 1 < s.generations:
                    population = self.next_generation(population)
        finally:
            if pool is not None:
                pool.shutdown(wait=True)

        wall_time = time.monotonic() - start
        logger.info(
            f"▶️ Search complete: {len(history)} generations, best fitness = {best.fitness:.4f}, "
            f"critical = {best.critical}, stop = {stop_reason}, ⏱ {wall_time:.2f} s"
        )
        return SearchResult(
            best=best,
            generations=len(history),
            history=history,
            converged=converged,
            stop_reason=stop_reason,
            wall_time=wall_time,
        )


def run_search(data: SchedulingData, rng: Optional[np.random.Generator] = None) -> SearchResult:
    """Run one genetic search over `data` with its own settings."""
    return GeneticSolver(data, rng).run()
