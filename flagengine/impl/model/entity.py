import json
from typing import Any, List, Optional, Union

from flagengine.impl.util import is_number

# This file provides support for our data model classes.
#
# Top-level data model classes (FeatureConfig, Feature) should subclass ModelEntity. This
# provides a standard behavior where we decode the entity from a dict that corresponds to
# the JSON representation, and the constructor for each class does any necessary capturing
# and validation of individual properties, while the ModelEntity constructor also stores
# the original data as a dict so we can easily re-serialize it or inspect it as a dict.
#
# Lower-level classes such as Segment and Rollout are not derived from ModelEntity because
# we don't need to serialize them outside of the enclosing Feature.
#
# All data model classes should use the opt_ and req_ functions so that any JSON values
# of invalid types will cause immediate rejection of the document, rather than allowing
# invalid types to get into the evaluation logic where they would cause errors that are
# harder to diagnose. The one deliberate exception is segment match data, see Segment.


def opt_type(data: dict, name: str, desired_type) -> Any:
    value = data.get(name)
    if value is not None and not isinstance(value, desired_type):
        raise ValueError('error in feature configuration: property "%s" should be type %s but was %s"' % (name, desired_type, value.__class__))
    return value


def opt_dict(data: dict, name: str) -> Optional[dict]:
    return opt_type(data, name, dict)


def opt_dict_list(data: dict, name: str) -> list:
    return validate_list_type(opt_list(data, name), name, dict)


def opt_list(data: dict, name: str) -> list:
    return opt_type(data, name, list) or []


def opt_number(data: dict, name: str) -> Optional[Union[int, float]]:
    value = data.get(name)
    if value is not None and not is_number(value):
        raise ValueError('error in feature configuration: property "%s" should be a number but was %s"' % (name, value.__class__))
    return value


def opt_str(data: dict, name: str) -> Optional[str]:
    return opt_type(data, name, str)


def req_type(data: dict, name: str, desired_type) -> Any:
    value = opt_type(data, name, desired_type)
    if value is None:
        raise ValueError('error in feature configuration: required property "%s" is missing' % name)
    return value


def req_number(data: dict, name: str) -> Union[int, float]:
    value = opt_number(data, name)
    if value is None:
        raise ValueError('error in feature configuration: required property "%s" is missing' % name)
    return value


def req_str(data: dict, name: str) -> str:
    return req_type(data, name, str)


def validate_list_type(items: list, name: str, desired_type) -> list:
    for item in items:
        if not isinstance(item, desired_type):
            raise ValueError('error in feature configuration: property %s should be an array of %s but an item was %s' % (name, desired_type, item.__class__))
    return items


class ModelEntity:
    def __init__(self, data: dict):
        self._data = data

    def to_json_dict(self):
        return self._data

    def __eq__(self, other) -> bool:
        return self.__class__ == other.__class__ and self._data == other._data

    def __repr__(self) -> str:
        return json.dumps(self._data, separators=(',', ':'))
