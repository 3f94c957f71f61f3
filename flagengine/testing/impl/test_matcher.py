import pytest

from flagengine.impl.matcher import match_segment
from flagengine.impl.model import Segment
from flagengine.testing.builders import *


def assert_segment_match(segment: Segment, attributes: dict, should_match: bool):
    assert match_segment(segment, attributes).matched is should_match


class TestSegmentMatcher:
    def test_positive_token_matches_equal_value(self):
        assert_segment_match(make_segment('plan', 'pro'), {'plan': 'pro'}, True)

    def test_positive_token_does_not_match_other_value(self):
        segment = make_segment('plan', 'pro')
        result = match_segment(segment, {'plan': 'free'})
        assert result.matched is False
        assert result.reasoning == ['No matching value for attribute "plan". Segment does not match.']

    def test_match_any_of_multiple_positive_tokens(self):
        assert_segment_match(make_segment('plan', 'pro', 'enterprise'), {'plan': 'enterprise'}, True)

    def test_comparison_is_case_sensitive(self):
        assert_segment_match(make_segment('region', 'US'), {'region': 'us'}, False)

    def test_comparison_does_not_trim_or_coerce(self):
        assert_segment_match(make_segment('age', '30'), {'age': ' 30'}, False)

    def test_negation_violated_does_not_match(self):
        result = match_segment(make_segment('region', '!EU'), {'region': 'EU'})
        assert result.matched is False
        assert result.reasoning == ['User attribute "region" value "EU" matches negated value "EU". Segment does not match.']

    def test_negation_satisfied_matches(self):
        assert_segment_match(make_segment('region', '!EU'), {'region': 'US'}, True)

    def test_only_satisfied_negations_match(self):
        assert_segment_match(make_segment('region', '!EU', '!APAC'), {'region': 'US'}, True)

    def test_any_violated_negation_disqualifies(self):
        assert_segment_match(make_segment('region', '!EU', '!APAC'), {'region': 'APAC'}, False)

    def test_violated_negation_wins_over_earlier_positive_hit(self):
        assert_segment_match(make_segment('region', 'EU', '!EU'), {'region': 'EU'}, False)

    @pytest.mark.parametrize('region,should_match', [
        ('US', True),
        ('EU', False),
        # no positive hit, but "!EU" is a negation that was not violated, which satisfies the key
        ('CA', True),
    ])
    def test_mixed_positive_and_negated_tokens(self, region, should_match):
        assert_segment_match(make_segment('region', 'US', '!EU'), {'region': region}, should_match)

    def test_mixed_tokens_with_value_matching_neither_is_satisfied_by_the_negation(self):
        result = match_segment(make_segment('region', 'US', '!EU'), {'region': 'CA'})
        assert result.matched is True
        assert result.reasoning == []

    def test_missing_attribute_does_not_match(self):
        result = match_segment(make_segment('plan', 'pro'), {'region': 'US'})
        assert result.matched is False
        assert result.reasoning == ['User attribute "plan" not present. Segment does not match.']

    def test_missing_attribute_fails_even_for_negation(self):
        assert_segment_match(make_segment('region', '!EU'), {}, False)

    def test_empty_attribute_value_counts_as_absent(self):
        result = match_segment(make_segment('plan', '!pro'), {'plan': ''})
        assert result.matched is False
        assert result.reasoning == ['User attribute "plan" not present. Segment does not match.']

    def test_empty_token_list_never_matches(self):
        result = match_segment(make_segment('plan'), {'plan': 'pro'})
        assert result.matched is False
        assert result.reasoning == ['No match values configured for attribute "plan". Segment does not match.']

    def test_all_attributes_must_match(self):
        segment = Segment(SegmentBuilder().combo('plan', 'pro').combo('region', 'US').build())
        assert_segment_match(segment, {'plan': 'pro', 'region': 'US'}, True)
        assert_segment_match(segment, {'plan': 'pro', 'region': 'EU'}, False)
        assert_segment_match(segment, {'plan': 'free', 'region': 'US'}, False)

    def test_violated_negation_short_circuits_remaining_attributes(self):
        segment = Segment(SegmentBuilder().combo('region', '!EU').combo('plan', 'pro').build())
        result = match_segment(segment, {'region': 'EU'})
        assert result.matched is False
        assert result.reasoning == ['User attribute "region" value "EU" matches negated value "EU". Segment does not match.']

    def test_segment_without_constraints_matches_everyone(self):
        assert_segment_match(Segment(SegmentBuilder().build()), {}, True)

    @pytest.mark.parametrize('raw_combo', [
        None,
        'plan=pro',
        ['plan', 'pro'],
        {'plan': 'pro'},
        {'plan': ['pro', 3]},
    ])
    def test_malformed_match_data_fails_closed(self, raw_combo):
        segment = Segment(SegmentBuilder().raw_combo(raw_combo).build())
        result = match_segment(segment, {'plan': 'pro'})
        assert result.matched is False
        assert len(result.reasoning) == 1
        assert result.reasoning[0].endswith('is malformed. Segment does not match.')

    @pytest.mark.parametrize('data', [
        None,
        'plan=pro',
        {'combo': {'plan': ['pro']}, 'rollout': 'half'},
        {'combo': {'plan': ['pro']}, 'rollout': {'percentage': '50', 'secondaryValue': False}},
        {'combo': {'plan': ['pro']}, 'rollout': {'percentage': 150, 'secondaryValue': False}},
        {'combo': {'plan': ['pro']}, 'rollout': {'secondaryValue': False}},
    ])
    def test_malformed_segment_entry_fails_closed(self, data):
        segment = Segment(data)
        assert segment.usable is False
        assert segment.rollout is None
        result = match_segment(segment, {'plan': 'pro'})
        assert result.matched is False
        assert result.reasoning == ['Segment %s is malformed. Segment does not match.' % segment.describe()]

    def test_malformed_entry_is_described_by_its_raw_data(self):
        assert Segment('plan=pro').describe() == '"plan=pro"'
        assert Segment(None).describe() == 'null'
        assert Segment({'combo': {'plan': ['pro']}, 'rollout': 'half'}).describe() == '{"plan":["pro"]}'

    def test_absent_combo_fails_closed(self):
        segment = Segment({'value': True})
        assert segment.usable is False
        assert_segment_match(segment, {'plan': 'pro'}, False)
