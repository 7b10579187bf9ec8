from __future__ import annotations

import logging

import pytest

from locally.errors import RegionNotFound
from locally.models import END_MARKER
from locally.mutation import (
    MatchMode,
    annotation_for,
    delete_lines_matching,
    insert_record_lines,
    line_contains,
    line_equals,
    mentions_hostname,
    record_lines_for,
)
from locally.region import parse_region

from conftest import BASE_HOSTS, hosts_text


def test_insert_before_end_marker():
    text = hosts_text("::1 a.local")
    updated = insert_record_lines(text, ["x", "y"])

    region = parse_region(updated)
    assert region.lines == ["::1 a.local", "x", "y"]
    assert updated.startswith(BASE_HOSTS)
    assert updated.endswith(f"y\n{END_MARKER}\n")


def test_insert_without_region():
    with pytest.raises(RegionNotFound):
        insert_record_lines(BASE_HOSTS, ["::1 a.local"])


def test_delete_preserves_other_lines():
    text = hosts_text("keep", "drop", "keep too")
    updated = delete_lines_matching(text, line_equals("drop"))
    assert updated == hosts_text("keep", "keep too")


def test_delete_absent_is_noop():
    text = hosts_text("keep")
    assert delete_lines_matching(text, line_equals("missing")) == text


def test_delete_scans_whole_file(caplog):
    text = hosts_text("::1 app.local", after="::1 app.local\n")
    logger = logging.getLogger("locally.tests.mutation")

    with caplog.at_level(logging.WARNING, logger="locally.tests.mutation"):
        updated = delete_lines_matching(text, line_equals("::1 app.local"), logger)

    assert "::1 app.local" not in updated
    assert any("配置区域外" in message for message in caplog.messages)


def test_line_predicates():
    assert line_equals("::1 a.local")("::1 a.local")
    assert not line_equals("::1 a.local")("::1 a.local ")
    assert line_contains("a.local")("::1 data.local")
    assert annotation_for("a.local")("#--- a.local: certdir(/c) ---#")
    assert not annotation_for("a.local")("#--- b.a.local: certdir(/c) ---#")


def test_exact_mode_does_not_match_prefixes():
    exact = mentions_hostname("app.local", MatchMode.EXACT)
    assert exact("::1 app.local")
    assert exact("#--- app.local: certdir(/c) ---#")
    assert not exact("::1 myapp.local")
    assert not exact("#--- myapp.local: certdir(/c) ---#")

    substring = mentions_hostname("app.local", MatchMode.SUBSTRING)
    assert substring("::1 myapp.local")


def test_record_lines_exact_mode():
    predicate = record_lines_for("app.local", MatchMode.EXACT)
    assert predicate("#--- app.local: certdir(/c) ---#")
    assert predicate("::1 app.local")
    assert predicate("127.0.0.1 app.local")
    assert not predicate("127.0.0.1 app.local.example")
    assert not predicate("::1 myapp.local")
    assert predicate("::1\tapp.local")
    assert predicate("127.0.0.1   app.local  ")
    assert not predicate("127.0.0.1 app.local www.app.local")


def test_record_lines_substring_mode():
    predicate = record_lines_for("app.local", MatchMode.SUBSTRING)
    assert predicate("#--- app.local: certdir(/c) ---#")
    assert predicate("#--- app.local: certdir(/c) ---# edited")
    assert predicate("127.0.0.1 app.local")
    assert not predicate("127.0.0.1 app.localhost")
    assert not predicate("127.0.0.1 app.local.example")
    assert not predicate("::1 other.local")
