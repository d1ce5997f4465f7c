"""Test {{# ... #}} comments, including unterminated ones."""

import pytest

from ventolex.errors import UnterminatedCommentError
from ventolex.tokens import TokenType


class TestComments:
    def test_comment(self, lex):
        assert lex("{{# note #}}") == [(TokenType.COMMENT, " note ")]

    def test_comment_verbatim(self, lex):
        assert lex("{{#\n  multi\n  line\n#}}") == [(TokenType.COMMENT, "\n  multi\n  line\n")]

    def test_text_around_comment(self, lex):
        assert lex("a{{# c #}}b") == [
            (TokenType.TEXT, "a"),
            (TokenType.COMMENT, " c "),
            (TokenType.TEXT, "b"),
        ]

    def test_tag_syntax_inside_comment(self, lex):
        assert lex("{{# {{ a }} }} #}}") == [(TokenType.COMMENT, " {{ a }} }} ")]

    def test_empty_comment(self, lex):
        assert lex("{{##}}") == [(TokenType.COMMENT, "")]

    def test_comment_then_tag(self, lex):
        assert lex("{{# c #}}{{ a }}") == [(TokenType.COMMENT, " c "), (TokenType.TAG, "a")]


class TestUnterminatedComment:
    """Unterminated comments are lenient by default, fatal in strict mode."""

    def test_lenient_takes_rest_of_source(self, lex):
        assert lex("a {{# open {{ b }}") == [
            (TokenType.TEXT, "a "),
            (TokenType.COMMENT, " open {{ b }}"),
        ]

    def test_lenient_empty_rest(self, lex):
        assert lex("{{#") == [(TokenType.COMMENT, "")]

    def test_strict_raises(self, lex):
        with pytest.raises(UnterminatedCommentError) as exc_info:
            lex("a\n{{# open", strict_comments=True)
        assert exc_info.value.position.line == 2
        assert exc_info.value.message == "unterminated comment"

    def test_strict_accepts_closed(self, lex):
        assert lex("{{# ok #}}", strict_comments=True) == [(TokenType.COMMENT, " ok ")]
