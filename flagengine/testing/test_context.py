import pytest

from flagengine.context import UserContext, parse_attributes


class TestParseAttributes:
    def test_parses_one_pair_per_line(self):
        assert parse_attributes("plan=pro\nregion=US") == {'plan': 'pro', 'region': 'US'}

    def test_trims_whitespace(self):
        assert parse_attributes("  plan =  pro  \n\tregion\t=\tUS\t") == {'plan': 'pro', 'region': 'US'}

    def test_handles_windows_line_endings(self):
        assert parse_attributes("plan=pro\r\nregion=US\r\n") == {'plan': 'pro', 'region': 'US'}

    @pytest.mark.parametrize('text', ['', '\n\n', 'plan', 'plan=', '=pro', ' = ', '   '])
    def test_drops_malformed_and_empty_lines(self, text):
        assert parse_attributes(text) == {}

    def test_none_is_empty(self):
        assert parse_attributes(None) == {}

    def test_only_first_two_fields_are_used(self):
        assert parse_attributes("query=a=b") == {'query': 'a'}

    def test_later_duplicates_overwrite_earlier(self):
        assert parse_attributes("plan=free\nplan=pro") == {'plan': 'pro'}

    def test_keeps_valid_lines_around_invalid_ones(self):
        assert parse_attributes("plan=pro\nnonsense\nregion=\ncountry=CA") == {'plan': 'pro', 'country': 'CA'}


class TestUserContext:
    def test_create(self):
        context = UserContext.create('alice', {'plan': 'pro'})
        assert context.user_id == 'alice'
        assert context.attributes == {'plan': 'pro'}
        assert context.valid is True
        assert context.error is None

    def test_create_without_attributes(self):
        context = UserContext.create('alice')
        assert context.attributes == {}
        assert context.valid is True

    def test_from_text(self):
        assert UserContext.from_text('alice', 'plan = pro') == UserContext.create('alice', {'plan': 'pro'})

    def test_attributes_are_copied_on_the_way_in_and_out(self):
        attributes = {'plan': 'pro'}
        context = UserContext.create('alice', attributes)
        attributes['plan'] = 'free'
        context.attributes['plan'] = 'free'
        assert context.attributes == {'plan': 'pro'}

    def test_with_user_id_keeps_attributes(self):
        context = UserContext.create('alice', {'plan': 'pro'})
        other = context.with_user_id('bob')
        assert other.user_id == 'bob'
        assert other.attributes == {'plan': 'pro'}
        assert context.user_id == 'alice'

    def test_non_string_user_id_is_invalid(self):
        context = UserContext.create(42)
        assert context.valid is False
        assert context.error == 'user id must be a string'

    def test_non_string_attribute_value_is_invalid(self):
        context = UserContext.create('alice', {'age': 30})
        assert context.valid is False
        assert context.error == 'value of attribute "age" must be a string'

    def test_equality(self):
        assert UserContext.create('a', {'x': 'y'}) == UserContext.create('a', {'x': 'y'})
        assert UserContext.create('a', {'x': 'y'}) != UserContext.create('b', {'x': 'y'})
        assert UserContext.create('a') != 'a'

    def test_repr(self):
        assert repr(UserContext.create('a', {'x': 'y'})) == "UserContext(user_id='a', attributes={'x': 'y'})"
