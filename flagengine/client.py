"""
This submodule contains the client class that provides most of the engine's functionality.
"""

import traceback
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from flagengine.config import Config
from flagengine.context import UserContext
from flagengine.evaluation import EvaluationResult, FeatureNotFound, SimulationBucket
from flagengine.impl.evaluator import Evaluator
from flagengine.impl.model import FeatureConfig
from flagengine.impl.util import stringify_value, value_key


def _new_user_id() -> str:
    return str(uuid.uuid4())


class FeatureClient:
    """The feature-flag evaluation client.

    A client wraps one configuration document. The document is decoded and indexed once, when
    the client is constructed; every evaluation after that is a read-only walk of it, and the
    user being evaluated is always passed in. A single instance can therefore be shared by
    concurrent callers without any locking.
    """

    def __init__(self, document: Union[FeatureConfig, dict, str], config: Optional[Config] = None):
        """Constructs a new client instance.

        :param document: the configuration document, either already decoded as a
            :class:`flagengine.impl.model.FeatureConfig`, as a dict in its JSON shape, or as JSON text
        :param config: optional engine configuration; see :class:`flagengine.config.Config`
        """
        self._config = config or Config.default()
        self._logger = self._config.logger

        if isinstance(document, FeatureConfig):
            self._feature_config = document
        elif isinstance(document, str):
            self._feature_config = FeatureConfig.from_json(document)
        else:
            self._feature_config = FeatureConfig(document)

        self._evaluator = Evaluator(self._feature_config.lookup, self._config.bucket_separator)
        self._logger.info("Loaded feature configuration with %d groups and %d features" % (len(self._feature_config.groups), len(self._feature_config)))

    @property
    def feature_config(self) -> FeatureConfig:
        return self._feature_config

    def evaluate(self, feature_id: str, context: UserContext) -> EvaluationResult:
        """Calculates the value of a feature for a given user, together with the reasoning that led to it.

        :param feature_id: the unique id of the feature
        :param context: the user to evaluate for
        :return: the resolved value and the ordered reasoning trace
        :raises FeatureNotFound: if the configuration has no feature with this id
        :raises ValueError: if the context is invalid
        """
        if not context.valid:
            raise ValueError("Context was invalid for feature evaluation (%s)" % context.error)
        try:
            return self._evaluator.evaluate(feature_id, context)
        except FeatureNotFound:
            self._logger.warning("Evaluation requested for unknown feature: " + feature_id)
            raise

    def value(self, feature_id: str, context: UserContext, default: Any = None) -> Any:
        """Calculates the value of a feature for a given user.

        Unlike :func:`evaluate()`, this never raises: an unknown feature, an invalid context or an
        unexpected error is logged and ``default`` is returned instead.

        :param feature_id: the unique id of the feature
        :param context: the user to evaluate for
        :param default: the value to return if the feature cannot be evaluated; if None, any
            fallback registered in :class:`flagengine.config.Config` ``defaults`` is used
        :return: the resolved value, or the default
        """
        default = self._config.get_default(feature_id, default)

        if not context.valid:
            self._logger.warning("Context was invalid for feature evaluation (%s); returning default value" % context.error)
            return default

        try:
            return self._evaluator.evaluate(feature_id, context).value
        except FeatureNotFound:
            self._logger.warning("Unknown feature \"%s\"; returning default value: %s" % (feature_id, stringify_value(default)))
            return default
        except Exception as e:
            self._logger.error("Unexpected error while evaluating feature \"%s\": %s" % (feature_id, repr(e)))
            self._logger.debug(traceback.format_exc())
            return default

    def all_features_state(self, context: UserContext) -> Dict[str, EvaluationResult]:
        """Evaluates every feature in the configuration for one user.

        Features are returned in the order the configuration declares them. A feature whose
        evaluation fails unexpectedly is logged and left out of the result.

        :param context: the user to evaluate for
        :return: a dict of feature id to evaluation result; empty if the context is invalid
        """
        if not context.valid:
            self._logger.warning("Context was invalid for all_features_state (%s); returning empty state" % context.error)
            return {}

        state: Dict[str, EvaluationResult] = {}
        for feature_id in self._feature_config.feature_ids:
            try:
                state[feature_id] = self._evaluator.evaluate(feature_id, context)
            except Exception as e:
                self._logger.error("Error evaluating feature \"%s\" in all_features_state: %s" % (feature_id, repr(e)))
                self._logger.debug(traceback.format_exc())
        return state

    def simulate(self, feature_id: str, attributes: Optional[Mapping[str, str]] = None, num_users: Optional[int] = None,
                 id_factory: Optional[Callable[[], str]] = None) -> List[SimulationBucket]:
        """Estimates how a feature's values are distributed across a population of users.

        Each simulated user gets a fresh id from ``id_factory`` and the same ``attributes``, so
        the split reflects the rollout percentages that apply to users with those attributes.
        Because bucketing is deterministic, the same ids always produce the same distribution.

        :param feature_id: the unique id of the feature
        :param attributes: the attributes every simulated user shares
        :param num_users: how many users to simulate; defaults to ``Config.simulation_users``
        :param id_factory: produces a user id per simulated user; defaults to random UUIDs
        :return: one entry per distinct value, ordered by the value's JSON text
        :raises FeatureNotFound: if the configuration has no feature with this id
        :raises ValueError: if ``num_users`` is not a positive integer or the attributes are invalid
        """
        if num_users is None:
            num_users = self._config.simulation_users
        if isinstance(num_users, bool) or not isinstance(num_users, int) or num_users < 1:
            raise ValueError("num_users must be a positive integer")

        base_context = UserContext.create('', attributes)
        if not base_context.valid:
            raise ValueError("Context was invalid for simulation (%s)" % base_context.error)
        self._feature_config.require(feature_id)

        next_id = id_factory or _new_user_id
        tallies: Dict[str, List[Any]] = {}
        for _ in range(num_users):
            result = self._evaluator.evaluate(feature_id, base_context.with_user_id(next_id()))
            key = value_key(result.value)
            if key in tallies:
                tallies[key][1] += 1
            else:
                tallies[key] = [result.value, 1]

        self._logger.debug("Simulated %d users for feature \"%s\": %d distinct values" % (num_users, feature_id, len(tallies)))
        return [SimulationBucket(value, count, count * 100.0 / num_users)
                for _, (value, count) in sorted(tallies.items(), key=lambda item: stringify_value(item[1][0]))]


__all__ = ['FeatureClient', 'Config']
