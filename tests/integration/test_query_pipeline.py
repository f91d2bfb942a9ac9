"""Integration tests for the load, index, adapt, and query workflow."""

from __future__ import annotations

from dataclasses import replace

from core.config import DocQueryConfig
from tests.document_builder import write_document
from tests.fixture_paths import fixture_path
from versioned.client import DocQueryClient

_ITEMS_QUERY = """
{
  Crate {
    item {
      name @output
      kind @output
      visibility_limit @filter(op: "=", value: ["$visibility"])
      span @optional {
        filename @output
      }
    }
  }
}
"""


def test_two_same_revision_documents_query_identically(tmp_path) -> None:
    """Equal documents loaded as a current/baseline pair should yield equal results."""
    config = replace(DocQueryConfig.from_env(), project_root=tmp_path)
    client = DocQueryClient(config)
    current = write_document(tmp_path, 36, name="current.json")
    baseline = write_document(tmp_path, 36, name="baseline.json")
    adapter = client.adapter(current, baseline)
    variables = {"visibility": "public"}

    first_rows = list(adapter.run_query(_ITEMS_QUERY, variables))
    second_rows = list(adapter.run_query(_ITEMS_QUERY, variables))
    baseline_rows = list(client.query(baseline, _ITEMS_QUERY, variables))

    assert first_rows and first_rows == second_rows == baseline_rows
    assert {row["name"] for row in first_rows} == {"demo", "parse", "Config"}


def test_package_aware_pipeline_from_fixture_files(tmp_path) -> None:
    """A fixture document and metadata should flow through to query results."""
    config = replace(DocQueryConfig.from_env(), project_root=tmp_path)
    client = DocQueryClient(config)
    query = """
    {
      Crate {
        package_name @output
        crate_version @output
        root_module {
          root_name: name @output
        }
      }
    }
    """

    rows = list(
        client.query(
            fixture_path("documents/v36_demo.json"),
            query,
            metadata_path=fixture_path("metadata/path_dependency.json"),
        )
    )

    assert rows == [{"package_name": "demo", "crate_version": "1.0.0", "root_name": "demo"}]
