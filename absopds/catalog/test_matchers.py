from __future__ import annotations

import re

from absopds.catalog import matchers
from absopds.catalog.types import CatalogQuery


def test_compile_literal_escapes_metacharacters() -> None:
    matcher = matchers.compile_literal("a.b")

    assert matcher.matches("xa.by")
    assert not matcher.matches("axb")


def test_matcher_ignores_none_values() -> None:
    matcher = matchers.compile_literal("x")

    assert not matcher.matches(None)
    assert matcher.matches_any([None, "XYZ"])


def test_compile_failure_yields_never_matcher(monkeypatch) -> None:
    def _boom(*_args, **_kwargs):
        raise re.error("broken")

    monkeypatch.setattr(matchers.logger, "debug", lambda _msg: None)
    monkeypatch.setattr(matchers.re, "compile", _boom)
    matcher = matchers.compile_literal("anything")

    assert not matcher.matches("anything")
    assert "never" in repr(matcher)


def test_query_matchers_skip_empty_axes() -> None:
    built = matchers.QueryMatchers.from_query(CatalogQuery(q="", author="Le Guin"))

    assert built.free_text is None
    assert built.facet_name is None
    assert built.title is None
    assert built.author is not None
    assert built.author.matches("ursula k. le guin")
