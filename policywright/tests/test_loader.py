"""
Tests for file loading and the command-line interface
"""

import json
import os
import tempfile

import pytest

from policywright.cli.policywright import main
from policywright.config import reset_config
from policywright.core import AttributeCategory, PolicyEffect
from policywright.policy import (
    PolicyLoadError,
    load_catalog,
    load_document,
    load_references,
    load_selection,
)

CATALOG_YAML = """
attributes:
  - id: attr-dept
    name: department
    displayName: Department
    dataType: string
    categories: [subject]
  - id: attr-class
    name: classification
    displayName: Classification
    dataType: string
    category: resource
  - id: attr-retention
    name: retention
    displayName: Retention
    dataType: number
    categories: [additional-resource]
    constraints:
      minValue: 0
      maxValue: 3650
  - name: orphan
    dataType: string

subjects:
  - id: finance-team
    name: finance
    displayName: Finance Team
actions:
  - id: read
    displayName: Read
  - id: export
    displayName: Export
resources:
  - id: invoices
    displayName: Invoices
additionalResources:
  - id: archive
    displayName: Archive
"""

SELECTION_YAML = """
name: Finance invoices
effect: Allow
status: Draft
subject: finance-team
actions: [read, export]
resources: [invoices]
subjectAttributes:
  attr-dept: Finance
additionalResources: [archive]
additionalResourceAttributes:
  attr-retention: 30
additionalResourceOperators:
  attr-retention: greater_than
"""


@pytest.fixture
def workspace():
    """Temporary directory holding a catalog and a selection file"""
    with tempfile.TemporaryDirectory() as tmp:
        catalog_path = os.path.join(tmp, "catalog.yaml")
        selection_path = os.path.join(tmp, "selection.yaml")
        with open(catalog_path, "w") as f:
            f.write(CATALOG_YAML)
        with open(selection_path, "w") as f:
            f.write(SELECTION_YAML)
        yield tmp, catalog_path, selection_path


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    monkeypatch.delenv("POLICYWRIGHT_RULE_IDS", raising=False)
    reset_config()
    yield
    reset_config()


class TestLoader:
    """Tests for catalog, selection and document loading"""

    def test_load_catalog(self, workspace):
        """Catalog entries load, entries without ids are skipped"""
        _, catalog_path, _ = workspace

        catalog = load_catalog(catalog_path)

        assert [a.id for a in catalog] == ["attr-dept", "attr-class", "attr-retention"]
        assert catalog.get("attr-retention").constraints.max_value == 3650

    def test_legacy_category_field(self, workspace):
        """The singular legacy category becomes a categories set"""
        _, catalog_path, _ = workspace

        attribute = load_catalog(catalog_path).get("attr-class")

        assert attribute.categories == frozenset({"resource"})
        assert attribute.has_category(AttributeCategory.RESOURCE)

    def test_load_references(self, workspace):
        _, catalog_path, _ = workspace

        references = load_references(catalog_path)

        assert references.display_name("subjects", "finance-team") == "Finance Team"
        assert references.display_name("additional_resources", "archive") == "Archive"

    def test_load_selection(self, workspace):
        _, _, selection_path = workspace

        selection = load_selection(selection_path)

        assert selection.effect == PolicyEffect.ALLOW
        assert selection.action_ids == ["read", "export"]
        assert selection.additional_operators == {"attr-retention": "greater_than"}

    def test_load_json_document(self, workspace):
        """JSON documents load through the same reader"""
        tmp, _, _ = workspace
        path = os.path.join(tmp, "policy.json")
        with open(path, "w") as f:
            json.dump({"name": "p", "effect": "Deny", "subjects": ["s"]}, f)

        document = load_document(path)

        assert document.effect == PolicyEffect.DENY
        assert document.subjects == ["s"]

    def test_missing_file(self):
        with pytest.raises(PolicyLoadError, match="Failed to load"):
            load_catalog("/nonexistent/catalog.yaml")

    def test_malformed_yaml(self, workspace):
        tmp, _, _ = workspace
        path = os.path.join(tmp, "bad.yaml")
        with open(path, "w") as f:
            f.write("attributes: [unclosed\n")

        with pytest.raises(PolicyLoadError):
            load_catalog(path)

    def test_non_mapping(self, workspace):
        tmp, _, _ = workspace
        path = os.path.join(tmp, "list.yaml")
        with open(path, "w") as f:
            f.write("- a\n- b\n")

        with pytest.raises(PolicyLoadError, match="expected a mapping"):
            load_selection(path)

    def test_invalid_effect(self, workspace):
        tmp, _, _ = workspace
        path = os.path.join(tmp, "doc.yaml")
        with open(path, "w") as f:
            f.write("name: p\neffect: Maybe\n")

        with pytest.raises(PolicyLoadError, match="Invalid policy document"):
            load_document(path)

    def test_wrongly_typed_selection(self, workspace):
        """A scalar where a list belongs is a load error"""
        tmp, _, _ = workspace
        path = os.path.join(tmp, "bad-selection.yaml")
        with open(path, "w") as f:
            f.write("subject: s\nactions: 5\n")

        with pytest.raises(PolicyLoadError, match="Invalid selection"):
            load_selection(path)

    def test_wrongly_typed_document(self, workspace):
        tmp, _, _ = workspace
        path = os.path.join(tmp, "bad-policy.json")
        with open(path, "w") as f:
            json.dump({"name": "p", "actions": 5}, f)

        with pytest.raises(PolicyLoadError, match="Invalid policy document"):
            load_document(path)

    def test_string_flags(self, workspace):
        """Quoted booleans in a catalog are parsed, not truth-tested"""
        tmp, _, _ = workspace
        path = os.path.join(tmp, "flags.yaml")
        with open(path, "w") as f:
            f.write(
                "attributes:\n"
                "  - id: a\n    name: a\n    isMultiValue: \"false\"\n    isRequired: \"true\"\n"
                "  - id: b\n    name: b\n    isMultiValue: true\n"
            )

        catalog = load_catalog(path)

        assert catalog.get("a").is_multi_value is False
        assert catalog.get("a").is_required is True
        assert catalog.get("b").is_multi_value is True
        assert catalog.get("b").is_required is False


class TestCLI:
    """Tests for the policywright command line"""

    def test_compile_then_summary(self, workspace, capsys):
        """compile writes a document that summary and hydrate can read"""
        tmp, catalog_path, selection_path = workspace
        output = os.path.join(tmp, "policy.json")

        assert main(["--catalog", catalog_path, "compile", selection_path, "-o", output]) == 0
        assert "Wrote 2 rules" in capsys.readouterr().out

        with open(output) as f:
            payload = json.load(f)
        assert len(payload["rules"]) == 2
        assert payload["additionalResources"][0]["attributes"] == [
            {"name": "retention", "operator": "greater_than", "value": 30}
        ]

        assert main(["--catalog", catalog_path, "summary", output]) == 0
        summary = capsys.readouterr().out
        assert summary.startswith("This policy ALLOWS Finance Team (when department is Finance)")

        assert main(["--catalog", catalog_path, "hydrate", output, "--json"]) == 0
        hydrated = json.loads(capsys.readouterr().out)
        assert hydrated["subject"] == "finance-team"
        assert hydrated["additionalResourceAttributes"] == {"attr-retention": 30}

    def test_render(self, workspace, capsys):
        _, catalog_path, selection_path = workspace

        assert main(["--catalog", catalog_path, "render", selection_path]) == 0

        assert capsys.readouterr().out.strip() == (
            "This policy ALLOWS Finance Team (when department is Finance) to perform "
            "read and export actions on Invoices if Archive (when retention is greater than 30)."
        )

    def test_compile_incomplete_selection(self, workspace, capsys):
        """Incomplete selections exit non-zero with the missing parts"""
        tmp, catalog_path, _ = workspace
        path = os.path.join(tmp, "partial.yaml")
        with open(path, "w") as f:
            f.write("name: p\nsubject: finance-team\nactions: [read]\n")

        assert main(["--catalog", catalog_path, "compile", path]) == 1
        assert "missing resources" in capsys.readouterr().out

    def test_compile_wrongly_typed_selection(self, workspace, capsys):
        """Malformed files exit non-zero instead of raising"""
        tmp, catalog_path, _ = workspace
        path = os.path.join(tmp, "bad.yaml")
        with open(path, "w") as f:
            f.write("subject: s\nactions: 5\nresources: [r]\n")

        assert main(["--catalog", catalog_path, "compile", path]) == 1
        assert "✗ Invalid selection" in capsys.readouterr().out

    def test_explain_unknown_rule(self, workspace, capsys):
        tmp, catalog_path, selection_path = workspace
        output = os.path.join(tmp, "policy.json")
        main(["--catalog", catalog_path, "compile", selection_path, "-o", output])
        capsys.readouterr()

        assert main(["explain", output, "rule-missing"]) == 1
        assert "Rule not found" in capsys.readouterr().out

    def test_missing_catalog_file(self, capsys):
        assert main(["--catalog", "/nonexistent.yaml", "config"]) == 1
        assert "Failed to load" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 1
