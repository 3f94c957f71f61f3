from dataclasses import dataclass, field
from typing import List, Mapping

from flagengine.impl.model.feature_config import NEGATION_PREFIX, Segment


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    reasoning: List[str] = field(default_factory=list)


def match_segment(segment: Segment, attributes: Mapping[str, str]) -> MatchResult:
    """
    Decides whether a user's attributes satisfy every constraint in a segment's combo.

    The combo is a conjunction across attribute keys. For each key, a token starting with ``!``
    is a negation and disqualifies the segment outright if the user's value equals the rest of
    the token; any other token is a positive match on exact equality. A key is satisfied by a
    positive hit or by at least one negation that was not violated.

    Entries explaining a failure are returned in the result rather than written to a shared
    trace; a successful match adds nothing, the caller records that.
    """
    if not segment.usable:
        return MatchResult(False, ['Segment %s is malformed. Segment does not match.' % segment.describe()])

    for attribute_key, tokens in segment.combo.items():
        user_value = attributes.get(attribute_key)

        if not user_value:
            return MatchResult(False, ['User attribute "%s" not present. Segment does not match.' % attribute_key])

        if not tokens:
            return MatchResult(False, ['No match values configured for attribute "%s". Segment does not match.' % attribute_key])

        match_found = False
        for token in tokens:
            if token.startswith(NEGATION_PREFIX):
                negated_value = token[len(NEGATION_PREFIX):]
                if user_value == negated_value:
                    return MatchResult(False, [
                        'User attribute "%s" value "%s" matches negated value "%s". Segment does not match.' % (attribute_key, user_value, negated_value)
                    ])
                match_found = True
            elif user_value == token:
                match_found = True

        if not match_found:
            return MatchResult(False, ['No matching value for attribute "%s". Segment does not match.' % attribute_key])

    return MatchResult(True)
