"""Per-cell prediction values and the rule for combining them."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class PredictionKind(Enum):
    FREE = "free"
    MINE = "mine"
    CONTRADICTION = "contradiction"
    PROBABILITY = "probability"


_CERTAIN = (PredictionKind.FREE, PredictionKind.MINE)


@dataclass(frozen=True)
class Prediction:
    """
    Classification of one hidden cell.

    ``probability`` and ``weight`` are only meaningful for PROBABILITY.
    ``weight`` counts how many sources were averaged into the value; a weight
    of 0 (fresh classification) counts as one source when averaging.
    """

    kind: PredictionKind
    probability: float = 0.0
    weight: int = 0

    @classmethod
    def free(cls) -> "Prediction":
        return cls(PredictionKind.FREE, 0.0)

    @classmethod
    def mine(cls) -> "Prediction":
        return cls(PredictionKind.MINE, 1.0)

    @classmethod
    def contradiction(cls) -> "Prediction":
        return cls(PredictionKind.CONTRADICTION)

    @classmethod
    def of_probability(cls, probability: float, weight: int = 0) -> "Prediction":
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability must be within [0, 1].")
        if weight < 0:
            raise ValueError("weight must be non-negative.")
        return cls(PredictionKind.PROBABILITY, float(probability), weight)

    @classmethod
    def from_probability(cls, probability: float) -> "Prediction":
        """Classify a finalized mine probability."""
        if probability == 0.0:
            return cls.free()
        if probability == 1.0:
            return cls.mine()
        return cls.of_probability(probability, 0)

    def is_certain(self) -> bool:
        return self.kind in _CERTAIN

    def combine(self, other: "Prediction") -> "Prediction":
        """
        Merge two classifications of the same cell.

        Contradiction absorbs everything and Free with Mine is a Contradiction.
        A certainty wins over a probability. Two probabilities average by
        weight. The operation is commutative and associative.
        """
        a, b = self.kind, other.kind
        if PredictionKind.CONTRADICTION in (a, b):
            return Prediction.contradiction()
        if a in _CERTAIN and b in _CERTAIN:
            return self if a == b else Prediction.contradiction()
        if a in _CERTAIN:
            return self
        if b in _CERTAIN:
            return other

        n1 = max(self.weight, 1)
        n2 = max(other.weight, 1)
        n = n1 + n2
        p = (self.probability * n1 + other.probability * n2) / n
        return Prediction(PredictionKind.PROBABILITY, p, n)

    __or__ = combine

    def symbol(self) -> str:
        """One-character rendering used by the text formatters."""
        if self.kind == PredictionKind.FREE:
            return "S"
        if self.kind == PredictionKind.MINE:
            return "M"
        if self.kind == PredictionKind.CONTRADICTION:
            return "!"
        # 0..9 tenths of a mine, rounded down so only certainty shows as M
        return str(min(int(self.probability * 10), 9))


def combine_all(predictions: Iterable[Prediction]) -> Optional[Prediction]:
    """Fold combine() over an iterable; returns None for an empty input."""
    result: Optional[Prediction] = None
    for prediction in predictions:
        result = prediction if result is None else result.combine(prediction)
    return result
