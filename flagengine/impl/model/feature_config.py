import json
from typing import Any, Dict, List, Optional, Tuple

from flagengine.evaluation import FeatureNotFound
from flagengine.impl.model.entity import *
from flagengine.impl.util import log

NEGATION_PREFIX = '!'


class Rollout:
    __slots__ = ['_percentage', '_secondary_value']

    def __init__(self, data: dict):
        self._percentage = req_number(data, 'percentage')
        if self._percentage < 0 or self._percentage > 100:
            raise ValueError('error in feature configuration: rollout percentage %s is outside the range 0-100' % self._percentage)
        self._secondary_value = data.get('secondaryValue')

    @property
    def percentage(self) -> float:
        return self._percentage

    @property
    def secondary_value(self) -> Any:
        return self._secondary_value


def _opt_rollout(data: dict) -> Optional[Rollout]:
    rollout = opt_dict(data, 'rollout')
    return None if rollout is None else Rollout(rollout)


def _parse_combo(combo: Any) -> Optional[Dict[str, List[str]]]:
    if not isinstance(combo, dict):
        return None
    for key, tokens in combo.items():
        if not isinstance(key, str) or not isinstance(tokens, list):
            return None
        if any(not isinstance(token, str) for token in tokens):
            return None
    return combo


class Segment:
    """
    Segments are decoded leniently: a segment entry that is not an object, match data that is
    not a mapping of attribute to string tokens, or a rollout that does not decode all leave the
    segment unusable. An unusable segment never matches at evaluation time, so the rest of the
    document is still served.
    """

    __slots__ = ['_data', '_combo', '_value', '_rollout', '_usable']

    def __init__(self, data: Any):
        self._data = data
        self._combo = None
        self._value = None
        self._rollout = None
        self._usable = False
        if not isinstance(data, dict):
            return

        self._combo = _parse_combo(data.get('combo'))
        self._value = data.get('value')
        try:
            self._rollout = _opt_rollout(data)
        except ValueError as e:
            log.warning('Ignoring segment with invalid rollout %s: %s' % (self.describe(), e))
            return
        self._usable = self._combo is not None

    @property
    def combo(self) -> Optional[Dict[str, List[str]]]:
        """The attribute constraints, or None if the match data was malformed."""
        return self._combo

    @property
    def usable(self) -> bool:
        return self._usable

    @property
    def value(self) -> Any:
        return self._value

    @property
    def rollout(self) -> Optional[Rollout]:
        return self._rollout

    def describe(self) -> str:
        """The segment's match data as JSON, or the whole entry if it was not an object."""
        shown = self._data.get('combo') if isinstance(self._data, dict) else self._data
        return json.dumps(shown, separators=(',', ':'), default=str)


class Feature(ModelEntity):
    __slots__ = ['_data', '_id', '_description', '_type', '_value', '_segments', '_rollout']

    def __init__(self, data: dict):
        super().__init__(data)
        self._id = req_str(data, 'id')
        self._description = opt_str(data, 'description') or ''
        self._type = opt_str(data, 'type') or ''
        self._value = data.get('value')
        self._segments = list(Segment(item) for item in opt_list(data, 'segments'))
        self._rollout = _opt_rollout(data)

    @property
    def id(self) -> str:
        return self._id

    @property
    def description(self) -> str:
        return self._description

    @property
    def type(self) -> str:
        return self._type

    @property
    def value(self) -> Any:
        return self._value

    @property
    def segments(self) -> List[Segment]:
        return self._segments

    @property
    def rollout(self) -> Optional[Rollout]:
        return self._rollout


class FeatureGroup:
    __slots__ = ['_id', '_description', '_features']

    def __init__(self, data: dict):
        self._id = req_str(data, 'id')
        self._description = opt_str(data, 'description') or ''
        self._features = list(Feature(item) for item in opt_dict_list(data, 'features'))

    @property
    def id(self) -> str:
        return self._id

    @property
    def description(self) -> str:
        return self._description

    @property
    def features(self) -> List[Feature]:
        return self._features


class FeatureConfig(ModelEntity):
    """
    The root of a configuration document. Building one walks every group and feature once to
    index features by id; after that the instance is never modified, so it can be shared by any
    number of concurrent evaluations.
    """

    __slots__ = ['_data', '_groups', '_index']

    def __init__(self, data: dict):
        super().__init__(data)
        self._groups = list(FeatureGroup(item) for item in opt_dict_list(data, 'groups'))
        self._index: Dict[str, Tuple[Feature, str]] = {}
        for group in self._groups:
            for feature in group.features:
                if feature.id in self._index:
                    log.warning('Feature id "%s" is declared more than once; the declaration in group "%s" takes precedence' % (feature.id, group.id))
                self._index[feature.id] = (feature, group.id)

    @classmethod
    def from_json(cls, text: str) -> 'FeatureConfig':
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError('error in feature configuration: document should be a JSON object but was %s' % data.__class__)
        return cls(data)

    @property
    def groups(self) -> List[FeatureGroup]:
        return self._groups

    @property
    def feature_ids(self) -> List[str]:
        return list(self._index.keys())

    @property
    def features(self) -> List[Feature]:
        return list(feature for feature, _ in self._index.values())

    def lookup(self, feature_id: str) -> Optional[Tuple[Feature, str]]:
        """Returns the feature and the id of the group that owns it, or None if there is no such feature."""
        return self._index.get(feature_id)

    def require(self, feature_id: str) -> Tuple[Feature, str]:
        entry = self._index.get(feature_id)
        if entry is None:
            raise FeatureNotFound(feature_id)
        return entry

    def __len__(self) -> int:
        return len(self._index)


__all__ = ['NEGATION_PREFIX', 'Rollout', 'Segment', 'Feature', 'FeatureGroup', 'FeatureConfig']
