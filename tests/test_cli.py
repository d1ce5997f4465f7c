"""Tests for the CLI module: arg parsing, exit codes, output formats."""

from __future__ import annotations

import json
from pathlib import Path

from ventolex.cli import CliOptions, build_parser, main, tokenize_file

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        p = build_parser()
        ns = p.parse_args(["page.vto"])
        assert ns.input == "page.vto"
        assert ns.output is None
        assert ns.format is None
        assert ns.strict_comments is None

    def test_output_flag(self) -> None:
        p = build_parser()
        ns = p.parse_args(["page.vto", "-o", "tokens.txt"])
        assert ns.output == "tokens.txt"

    def test_format_flag(self) -> None:
        p = build_parser()
        ns = p.parse_args(["page.vto", "--format", "json"])
        assert ns.format == "json"

    def test_strict_comments_flags(self) -> None:
        p = build_parser()
        assert p.parse_args(["page.vto", "--strict-comments"]).strict_comments is True
        assert p.parse_args(["page.vto", "--no-strict-comments"]).strict_comments is False

    def test_watch_and_verbose(self) -> None:
        p = build_parser()
        ns = p.parse_args(["page.vto", "--watch", "-v"])
        assert ns.watch is True
        assert ns.verbose is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        doc = tmp_path / "ok.vto"
        doc.write_text("Hello {{ name }}\n")
        assert main([str(doc)]) == 0

    def test_unclosed_tag_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "bad.vto"
        doc.write_text("Hello {{ name\n")
        assert main([str(doc)]) == 1
        err = capsys.readouterr().err
        assert "unclosed tag" in err
        assert "bad.vto:1:7" in err

    def test_unterminated_comment_lenient_by_default(self, tmp_path: Path) -> None:
        doc = tmp_path / "comment.vto"
        doc.write_text("{{# open\n")
        assert main([str(doc)]) == 0

    def test_unterminated_comment_strict_returns_1(self, tmp_path: Path) -> None:
        doc = tmp_path / "comment.vto"
        doc.write_text("{{# open\n")
        assert main([str(doc), "--strict-comments"]) == 1

    def test_missing_file_returns_2(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.vto")]) == 2

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "ventolex.toml").write_text('[output]\nformat = "yaml"\n')
        doc = tmp_path / "page.vto"
        doc.write_text("x")
        assert main([str(doc)]) == 2


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_text_to_stdout(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "page.vto"
        doc.write_text("{{ a |> b }}")
        assert main([str(doc)]) == 0
        out = capsys.readouterr().out
        assert "TAG" in out
        assert "FILTER" in out

    def test_json_to_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "page.vto"
        doc.write_text("x {{- a -}} y")
        out = tmp_path / "tokens.json"
        assert main([str(doc), "-f", "json", "-o", str(out)]) == 0
        assert json.loads(out.read_text()) == [["text", "x"], ["tag", "a"], ["text", "y"]]


# ---------------------------------------------------------------------------
# tokenize_file smoke test
# ---------------------------------------------------------------------------


class TestTokenizeFile:
    def test_basic(self, tmp_path: Path) -> None:
        doc = tmp_path / "simple.vto"
        doc.write_text("{{raw}}{{ x }}{{/raw}}")
        opts = CliOptions(
            input_file=doc,
            output_file=None,
            output_format="json",
            strict_comments=False,
            watch=False,
            verbose=False,
        )
        assert json.loads(tokenize_file(opts)) == [["raw", "{{ x }}"]]
