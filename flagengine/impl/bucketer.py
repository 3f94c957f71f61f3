from dataclasses import dataclass, field
from typing import Any, List

import mmh3

from flagengine.impl.model.feature_config import Rollout
from flagengine.impl.util import stringify_value

DEFAULT_BUCKET_SEPARATOR = '-'
BUCKET_COUNT = 100


@dataclass(frozen=True)
class RolloutResult:
    value: Any
    bucket: int
    reasoning: List[str] = field(default_factory=list)


def bucket(user_id: str, group_id: str, separator: str = DEFAULT_BUCKET_SEPARATOR) -> int:
    """
    Maps a user to one of 100 buckets for the rollouts of a feature group.

    The bucket depends only on the user id and group id, so a user stays in the same rollout
    cohort across evaluations and processes, and every feature in a group splits its users the
    same way.
    """
    hash_key = '%s%s%s' % (user_id, separator, group_id)
    hash_val = mmh3.hash(hash_key, 0, signed=False)
    return abs(hash_val) % BUCKET_COUNT


def evaluate_rollout(rollout: Rollout, current_value: Any, user_id: str, group_id: str,
                     separator: str = DEFAULT_BUCKET_SEPARATOR) -> RolloutResult:
    user_bucket = bucket(user_id, group_id, separator)
    reasoning = ['Evaluating rollout: Hash(%s, %s) = %d, Rollout percentage = %s%%' % (user_id, group_id, user_bucket, rollout.percentage)]

    if user_bucket < rollout.percentage:
        reasoning.append('User falls within rollout percentage. Using value: %s' % stringify_value(current_value))
        return RolloutResult(current_value, user_bucket, reasoning)

    reasoning.append('User does not fall within rollout percentage. Using secondary value: %s' % stringify_value(rollout.secondary_value))
    return RolloutResult(rollout.secondary_value, user_bucket, reasoning)
