"""
Conformance suite over the SQL scripts in tests/fixtures.

Each script must parse without error diagnostics and without Unrecognized
statements; manifest.yaml lists the statement kinds expected per batch.
"""

from pathlib import Path

import pytest
import yaml

from tsqlparser import expand_dynamic_sql, parse, structurally_equal, to_sql
from tsqlparser.models.statements import Unrecognized

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

with open(FIXTURES_DIR / "manifest.yaml", "r", encoding="utf-8") as f:
    MANIFEST = yaml.safe_load(f)["fixtures"]


@pytest.fixture(params=MANIFEST, ids=lambda entry: entry["file"])
def fixture(request):
    entry = request.param
    source = (FIXTURES_DIR / entry["file"]).read_text(encoding="utf-8")
    return entry, parse(source, script_id=entry["file"])


def test_parses_cleanly(fixture):
    """Test the script has no errors and no unrecognized statements."""
    entry, script = fixture

    assert not script.has_errors, [str(d) for d in script.errors]
    assert not any(isinstance(s, Unrecognized) for s in script.statements)


def test_statement_kinds(fixture):
    """Test every batch holds the expected statement kinds."""
    entry, script = fixture

    actual = [[s.node_type for s in batch.statements] for batch in script.batches]
    expected = [batch["statements"] for batch in entry["batches"]]
    assert actual == expected


def test_unresolved_variables(fixture):
    """Test batch scope matches where the manifest says so."""
    entry, script = fixture

    for batch, expected in zip(script.batches, entry["batches"]):
        if "unresolved" in expected:
            assert list(batch.scope.unresolved_variables) == expected["unresolved"]


def test_round_trip(fixture):
    """Test printing and re-parsing each fixture keeps its structure."""
    entry, script = fixture

    assert structurally_equal(script, parse(to_sql(script)))


def test_dynamic_sql_count(fixture):
    """Test the number of dynamic SQL strings found and re-parsed."""
    entry, script = fixture

    assert len(expand_dynamic_sql(script)) == entry["dynamic_sql"]


def test_metrics_attached(fixture):
    entry, script = fixture

    assert script.metrics["script_id"] == entry["file"]
    assert script.metrics["batch_count"] == len(entry["batches"])
