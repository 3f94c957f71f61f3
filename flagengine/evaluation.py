"""
This submodule contains the public types returned by feature evaluation.
"""

from typing import Any, Iterable, Tuple


class FeatureNotFound(Exception):
    """
    Raised when an evaluation requests a feature id that is not present in the configuration.
    """

    def __init__(self, feature_id: str):
        super(FeatureNotFound, self).__init__('Feature with id "%s" not found.' % feature_id)
        self._feature_id = feature_id

    @property
    def feature_id(self) -> str:
        return self._feature_id


class EvaluationResult:
    """
    The return type of :func:`flagengine.client.FeatureClient.evaluate()`, combining the value a
    feature resolved to with the ordered reasoning trace that explains how it was calculated.
    """

    def __init__(self, value: Any, reasoning: Iterable[str]):
        """Constructs an instance."""
        self.__value = value
        self.__reasoning = tuple(reasoning)

    @property
    def value(self) -> Any:
        """The result of the evaluation. This is whatever the configuration document held for the
        matching segment, rollout or feature default; the engine never interprets it.
        """
        return self.__value

    @property
    def reasoning(self) -> Tuple[str, ...]:
        """One human-readable entry per decision step, in the order the decisions were made.

        Entries are never reordered or deduplicated, so the trace can be read as a narration of
        the whole evaluation.
        """
        return self.__reasoning

    def __eq__(self, other) -> bool:
        return isinstance(other, EvaluationResult) and self.value == other.value and self.reasoning == other.reasoning

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __str__(self) -> str:
        return "(value=%s, reasoning=%s)" % (self.value, list(self.reasoning))

    def __repr__(self) -> str:
        return self.__str__()


class SimulationBucket:
    """
    One row of a rollout simulation produced by :func:`flagengine.client.FeatureClient.simulate()`:
    a distinct result value, how many simulated users received it, and what share of the
    simulated population that is.
    """

    __slots__ = ['_value', '_count', '_percentage']

    def __init__(self, value: Any, count: int, percentage: float):
        self._value = value
        self._count = count
        self._percentage = percentage

    @property
    def value(self) -> Any:
        return self._value

    @property
    def count(self) -> int:
        return self._count

    @property
    def percentage(self) -> float:
        """The share of simulated users, from 0 to 100."""
        return self._percentage

    def __eq__(self, other) -> bool:
        return isinstance(other, SimulationBucket) and self._value == other._value and self._count == other._count and self._percentage == other._percentage

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __repr__(self) -> str:
        return "SimulationBucket(value=%r, count=%d, percentage=%.2f)" % (self._value, self._count, self._percentage)


__all__ = ['EvaluationResult', 'FeatureNotFound', 'SimulationBucket']
