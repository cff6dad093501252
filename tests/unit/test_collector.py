"""Tests for directive collection."""

import pytest

from partialgen.core.collector import collect_directives
from partialgen.core.errors import DirectiveSyntaxError


class TestCollectDirectives:
    def test_no_directives_yields_one_default(self):
        directives = collect_directives([], "User")
        assert len(directives) == 1
        assert directives[0].is_default

    def test_source_order_preserved(self):
        directives = collect_directives(['"A"', '"B"', '"C"'], "User")
        assert [d.target_name for d in directives] == ["A", "B", "C"]

    def test_first_error_wins(self):
        """Parsing stops at the first malformed directive."""
        with pytest.raises(DirectiveSyntaxError, match="Unknown directive keyword 'bad'") as exc_info:
            collect_directives(['"A"', "bad(x)", "worse("], "User")
        context = exc_info.value.context
        assert context is not None
        assert context.record == "User"
        assert context.directive_index == 1

    def test_error_message_names_record_and_directive(self):
        with pytest.raises(DirectiveSyntaxError) as exc_info:
            collect_directives(["omit(a), omit(b)"], "User")
        assert "in record User (directive #1)" in str(exc_info.value)
