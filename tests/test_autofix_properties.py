"""Property-based tests for the auto-fixer and validator.

Artifacts are built from valid fragments (see tests/strategies.py), plus
arbitrary text for the never-raises guarantees.
"""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from tests.strategies import artifacts
from vibeguard.autofix import autofix
from vibeguard.engine.preamble import split_preamble
from vibeguard.engine.tree import SourceTree
from vibeguard.validation import validate

_settings = settings(max_examples=75, deadline=None, suppress_health_check=[HealthCheck.too_slow])


class TestAutofixProperties:
    @_settings
    @given(artifacts)
    def test_idempotent(self, source):
        once = autofix(source)
        twice = autofix(once.code)
        assert twice.fixes == ()
        assert twice.code == once.code

    @_settings
    @given(artifacts)
    def test_preamble_preserved(self, source):
        preamble, _ = split_preamble(source)
        fixed = autofix(source).code
        assert split_preamble(fixed)[0] == preamble

    @_settings
    @given(artifacts)
    def test_output_parses(self, source):
        _, body = split_preamble(autofix(source).code)
        assert not SourceTree(body).has_errors

    @_settings
    @given(artifacts)
    def test_no_fixes_means_identical(self, source):
        result = autofix(source)
        if not result.fixes:
            assert result.code == source

    @_settings
    @given(st.text())
    def test_never_raises_on_arbitrary_text(self, text):
        result = autofix(text)
        assert isinstance(result.code, str)


class TestValidatorProperties:
    @_settings
    @given(st.text())
    def test_never_raises(self, text):
        report = validate(text)
        assert report.is_valid == (report.errors == [])

    @_settings
    @given(artifacts)
    def test_deterministic(self, source):
        assert validate(source) == validate(source)

    @_settings
    @given(artifacts)
    def test_fragments_are_safe(self, source):
        assert validate(autofix(source).code).is_valid
