from typing import Any, Callable, List, Optional, Tuple

from flagengine.context import UserContext
from flagengine.evaluation import EvaluationResult, FeatureNotFound
from flagengine.impl.bucketer import DEFAULT_BUCKET_SEPARATOR, evaluate_rollout
from flagengine.impl.matcher import match_segment
from flagengine.impl.model import Feature, Rollout
from flagengine.impl.util import log, stringify_value

# The Evaluator is responsible for calculating the value of a feature for a user, and for
# narrating every decision it makes along the way. It is not aware of where the configuration
# came from; it only needs a function that finds a feature, and the id of the group that owns
# it, by feature id.
#
# The Evaluator holds no per-user state: the user is passed to every call, so one instance can
# serve any number of concurrent evaluations.

FeatureLookup = Callable[[str], Optional[Tuple[Feature, str]]]


class Evaluator:
    """
    Encapsulates the feature evaluation logic.
    """

    def __init__(self, get_feature: FeatureLookup, bucket_separator: str = DEFAULT_BUCKET_SEPARATOR):
        """
        :param get_feature: function provided by the client that takes a feature id and returns
            the feature together with its owning group id, or None
        :param bucket_separator: joins user id and group id into the rollout hash key
        """
        self.__get_feature = get_feature
        self.__bucket_separator = bucket_separator

    def evaluate(self, feature_id: str, context: UserContext) -> EvaluationResult:
        entry = self.__get_feature(feature_id)
        if entry is None:
            raise FeatureNotFound(feature_id)
        feature, group_id = entry

        reasoning: List[str] = []
        attributes = context.attributes

        for segment in feature.segments:
            match = match_segment(segment, attributes)
            reasoning.extend(match.reasoning)
            if not match.matched:
                reasoning.append('Segment did not match: %s' % segment.describe())
                continue

            reasoning.append('Segment matched: %s' % segment.describe())
            value = self._apply_rollout(segment.rollout, segment.value, context, group_id, 'Segment', reasoning)
            reasoning.append('Final value from segment: %s' % stringify_value(value))
            log.debug('Feature "%s" resolved to %s from a segment for user "%s"' % (feature_id, stringify_value(value), context.user_id))
            return EvaluationResult(value, reasoning)

        reasoning.append('No segments matched. Using default value.')
        value = self._apply_rollout(feature.rollout, feature.value, context, group_id, 'Feature', reasoning)
        reasoning.append('Final value: %s' % stringify_value(value))
        log.debug('Feature "%s" resolved to %s from its default for user "%s"' % (feature_id, stringify_value(value), context.user_id))
        return EvaluationResult(value, reasoning)

    def _apply_rollout(self, rollout: Optional[Rollout], value: Any, context: UserContext, group_id: str, level: str, reasoning: List[str]) -> Any:
        if rollout is None:
            reasoning.append('No %s-level rollout applied.' % level.lower())
            return value

        result = evaluate_rollout(rollout, value, context.user_id, group_id, self.__bucket_separator)
        reasoning.extend(result.reasoning)
        reasoning.append('%s-level rollout applied: %s%% users get %s, others get %s' % (
            level, rollout.percentage, stringify_value(value), stringify_value(rollout.secondary_value)))
        return result.value
