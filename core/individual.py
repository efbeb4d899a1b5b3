from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np
from core.violations import Violation
from exceptions.custom_errors import InvalidIndividualError


@dataclass
class SubScores:
    """The five fitness sub-scores of an individual, each in [0, 100]."""

    coverage: float = 0.0
    fairness: float = 0.0
    preferences: float = 0.0
    constraints: float = 0.0
    qualifications: float = 0.0


@dataclass
class Individual:
    """
    One candidate schedule.

    `genes[d, w, s, n]` is True when nurse `n` works shift `s` of ward `w` on date
    `d`. A slot's nurse list is read off in ascending nurse-index order, so a nurse
    can never appear twice in the same slot.
    """

    genes: np.ndarray
    fitness: float = 0.0
    scores: Optional[SubScores] = None
    violations: List[Violation] = field(default_factory=list)
    critical: int = 0
    evaluated: bool = False

    @classmethod
    def empty(cls, shape: Tuple[int, int, int, int]) -> "Individual":
        return cls(genes=np.zeros(shape, dtype=bool))

    def copy(self) -> "Individual":
        """Structural copy: the gene tensor is duplicated, evaluation results are carried over."""
        return Individual(
            genes=self.genes.copy(),
            fitness=self.fitness,
            scores=self.scores,
            violations=self.violations,
            critical=self.critical,
            evaluated=self.evaluated,
        )

    def invalidate(self):
        """Drop evaluation results after the genes changed."""
        self.fitness = 0.0
        self.scores = None
        self.violations = []
        self.critical = 0
        self.evaluated = False

    def nurses_at(self, d: int, w: int, s: int) -> List[int]:
        return np.flatnonzero(self.genes[d, w, s]).tolist()

    def counts(self) -> np.ndarray:
        """`(D, W, S)` number of nurses assigned to every slot."""
        return self.genes.sum(axis=3)

    @property
    def rank_key(self) -> Tuple[bool, float]:
        """
        Sort key for selection: any CRITICAL violation ranks an individual below
        every individual without one, whatever their fitness.
        """
        return (self.critical == 0, self.fitness)

    def check_shape(self, shape: Tuple[int, int, int, int]):
        if self.genes.shape != tuple(shape) or self.genes.dtype != np.bool_:
            raise InvalidIndividualError(
                f"Malformed individual: genes {self.genes.shape}/{self.genes.dtype}, expected {tuple(shape)}/bool"
            )
