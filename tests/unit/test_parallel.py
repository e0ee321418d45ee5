"""
Unit tests for concurrent parsing.
"""

import pytest

from tsqlparser import parse, parse_many, parse_many_async, structurally_equal
from tsqlparser.models.statements import Unrecognized

SCRIPTS = [
    "SELECT 1\nGO\nSELECT 2",
    "CREATE TABLE #t (id int)\nINSERT INTO #t VALUES (1)",
    "DECLARE @x int = 5\nWHILE @x > 0 SET @x -= 1",
    "SELECT 1;\nFROBNICATE",
    "",
]


def test_parse_many_keeps_order():
    """Test results match sequential parsing, in input order."""
    results = parse_many(SCRIPTS, max_workers=2)

    assert len(results) == len(SCRIPTS)
    for source, script in zip(SCRIPTS, results):
        assert structurally_equal(script, parse(source))


def test_parse_many_labels_scripts():
    """Test each script gets its own id in metrics."""
    results = parse_many(SCRIPTS[:2])

    assert [r.metrics["script_id"] for r in results] == ["script-0", "script-1"]


def test_parse_many_isolates_failures():
    """Test a broken script does not affect the others."""
    results = parse_many(["SELECT FROM", "SELECT 1"])

    assert results[0].has_errors
    assert not results[1].has_errors


def test_parse_many_quoted_identifier():
    results = parse_many(['PRINT "x"'], quoted_identifier=False)

    assert results[0].statements[0].value.value == "x"


@pytest.mark.asyncio
async def test_parse_many_async():
    """Test the async variant returns the same trees."""
    results = await parse_many_async(SCRIPTS, max_workers=3)

    assert len(results) == len(SCRIPTS)
    assert isinstance(results[3].statements[1], Unrecognized)
    for source, script in zip(SCRIPTS, results):
        assert structurally_equal(script, parse(source))


@pytest.mark.asyncio
async def test_parse_many_async_empty():
    assert await parse_many_async([]) == []
