"""
This submodule implements the :class:`UserContext` that features are evaluated for, and the
parser that turns free-form ``key=value`` text into user attributes.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional


def parse_attributes(text: Optional[str]) -> Dict[str, str]:
    """Parses user attributes from text with one ``key=value`` pair per line.

    Keys and values are trimmed of surrounding whitespace. Lines that do not produce both a
    non-empty key and a non-empty value are ignored, and anything after a second ``=`` on the
    same line is discarded. If a key appears more than once, the last line wins.

    :param text: the raw attribute text, or None
    :return: a new dict of attributes
    """
    attributes: Dict[str, str] = {}
    if not text:
        return attributes
    for line in text.splitlines():
        parts = [part.strip() for part in line.split('=')]
        key = parts[0]
        value = parts[1] if len(parts) > 1 else ''
        if key and value:
            attributes[key] = value
    return attributes


class UserContext:
    """
    The identity and attributes of the user a feature is being evaluated for.

    The user id drives rollout bucketing; the attributes are matched against segment
    constraints. Instances are immutable. To evaluate the same attributes for another
    identity, use :func:`with_user_id()`.

    A context whose user id or attribute values are not strings is still constructed, but
    :func:`valid` is False and :func:`error` explains why, in the same way the client reports
    other invalid input without raising.
    """

    __slots__ = ['__user_id', '__attributes', '__error']

    def __init__(self, user_id: str, attributes: Optional[Mapping[str, str]] = None):
        self.__user_id = user_id
        self.__attributes = dict(attributes) if attributes else {}
        self.__error = self.__validate()

    @classmethod
    def create(cls, user_id: str, attributes: Optional[Mapping[str, str]] = None) -> UserContext:
        """Creates a context from a user id and an optional mapping of attributes.

        :param user_id: the user id; used as-is, including an empty string
        :param attributes: attribute names and values, all strings
        """
        return UserContext(user_id, attributes)

    @classmethod
    def from_text(cls, user_id: str, attribute_text: Optional[str]) -> UserContext:
        """Creates a context whose attributes are parsed with :func:`parse_attributes()`."""
        return UserContext(user_id, parse_attributes(attribute_text))

    def __validate(self) -> Optional[str]:
        if not isinstance(self.__user_id, str):
            return 'user id must be a string'
        for key, value in self.__attributes.items():
            if not isinstance(key, str):
                return 'attribute names must be strings'
            if not isinstance(value, str):
                return 'value of attribute "%s" must be a string' % key
        return None

    @property
    def user_id(self) -> str:
        return self.__user_id

    @property
    def attributes(self) -> Dict[str, str]:
        """A copy of the user's attributes."""
        return dict(self.__attributes)

    @property
    def valid(self) -> bool:
        return self.__error is None

    @property
    def error(self) -> Optional[str]:
        return self.__error

    def with_user_id(self, user_id: str) -> UserContext:
        return UserContext(user_id, self.__attributes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, UserContext):
            return False
        return self.__user_id == other.__user_id and self.__attributes == other.__attributes

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __repr__(self) -> str:
        return 'UserContext(user_id=%r, attributes=%r)' % (self.__user_id, self.__attributes)


__all__ = ['UserContext', 'parse_attributes']
