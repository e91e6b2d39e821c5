"""CLI tests for vibeguard -- check and fix commands via Click's CliRunner.

Each test writes its component files inside runner.isolated_filesystem().
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from vibeguard._version import __version__
from vibeguard.cli import cli

UNFIXED = "export const A = ({ xs }) => <ul>{xs.map(x => <li>{x}</li>)}</ul>;\n"
LODASH = "import React from 'react';\nimport _ from 'lodash';\nexport const A = () => <p/>;\n"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


def _write(name: str, text: str) -> str:
    Path(name).write_text(text, encoding="utf-8")
    return name


class TestCheck:
    def test_valid_file(self, runner, clean_source):
        with runner.isolated_filesystem():
            path = _write("card.mdx", clean_source)
            result = runner.invoke(cli, ["check", path])
            assert result.exit_code == 0
            assert "card.mdx: valid" in result.output

    def test_shows_preamble_title(self, runner, clean_source):
        with runner.isolated_filesystem():
            path = _write("card.mdx", clean_source)
            result = runner.invoke(cli, ["check", path])
            assert result.output.splitlines()[0] == "Greeting"

    def test_invalid_file(self, runner, eval_source):
        with runner.isolated_filesystem():
            path = _write("bad.mdx", eval_source)
            result = runner.invoke(cli, ["check", path])
            assert result.exit_code == 1
            assert "invalid" in result.output

    def test_json_output(self, runner, eval_source):
        with runner.isolated_filesystem():
            path = _write("bad.mdx", eval_source)
            result = runner.invoke(cli, ["check", "--json", path])
            assert result.exit_code == 1
            data = json.loads(result.output)
            assert data["is_valid"] is False
            assert len(data["errors"]) == 1
            assert "eval" in data["errors"][0]

    def test_allow_option(self, runner):
        with runner.isolated_filesystem():
            path = _write("a.mdx", LODASH)
            assert runner.invoke(cli, ["check", path]).exit_code == 1
            result = runner.invoke(cli, ["check", "--allow", "lodash", "--json", path])
            assert result.exit_code == 0
            assert json.loads(result.output)["errors"] == []

    def test_policy_file(self, runner):
        with runner.isolated_filesystem():
            path = _write("a.mdx", LODASH)
            policy = _write("policy.json", json.dumps({"allowed_imports": ["react", "lodash"]}))
            result = runner.invoke(cli, ["check", "--policy", policy, path])
            assert result.exit_code == 0

    def test_malformed_policy(self, runner, clean_source):
        with runner.isolated_filesystem():
            path = _write("a.mdx", clean_source)
            policy = _write("policy.json", '{"allowed_imports": "react", "bogus": 1}')
            result = runner.invoke(cli, ["check", "--policy", policy, path])
            assert result.exit_code == 1
            assert "Error:" in result.output

    def test_missing_file(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["check", "nope.mdx"])
            assert result.exit_code == 2


class TestFix:
    def test_prints_fixed_code(self, runner):
        with runner.isolated_filesystem():
            path = _write("a.mdx", UNFIXED)
            result = runner.invoke(cli, ["fix", path])
            assert result.exit_code == 0
            assert "fixed Added key to <li> rendered by map()" in result.output
            assert "fixed Added missing React import" in result.output
            assert "import React from 'react';" in result.output
            assert "<li key={`item-${index}`}>" in result.output
            assert Path(path).read_text(encoding="utf-8") == UNFIXED

    def test_write(self, runner):
        with runner.isolated_filesystem():
            path = _write("a.mdx", UNFIXED)
            result = runner.invoke(cli, ["fix", "--write", path])
            assert result.exit_code == 0
            assert "Wrote a.mdx" in result.output
            written = Path(path).read_text(encoding="utf-8")
            assert written.startswith("import React from 'react';\n")
            assert runner.invoke(cli, ["fix", "--check", path]).exit_code == 0

    def test_check_reports_pending_fixes(self, runner):
        with runner.isolated_filesystem():
            path = _write("a.mdx", UNFIXED)
            result = runner.invoke(cli, ["fix", "--check", path])
            assert result.exit_code == 1
            assert Path(path).read_text(encoding="utf-8") == UNFIXED

    def test_nothing_to_fix(self, runner, clean_source):
        with runner.isolated_filesystem():
            path = _write("a.mdx", clean_source)
            result = runner.invoke(cli, ["fix", "--write", path])
            assert result.exit_code == 0
            assert "No fixes needed." in result.output
            assert "Wrote" not in result.output

    def test_strip_types(self, runner):
        typed = "import React from 'react';\nexport const A = ({ n }: { n: number }) => <p>{n}</p>;\n"
        with runner.isolated_filesystem():
            path = _write("a.mdx", typed)
            assert runner.invoke(cli, ["fix", "--check", path]).exit_code == 0
            result = runner.invoke(cli, ["fix", "--strip-types", path])
            assert result.exit_code == 0
            assert "fixed Erased TypeScript syntax" in result.output
            assert "export const A = ({ n }) => <p>{n}</p>;" in result.output


class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output
        assert "fix" in result.output
