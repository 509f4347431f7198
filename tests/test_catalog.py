"""Unit tests for the operation catalog and usage tracking."""

import pytest
from pydantic import ValidationError

from plugin_gateway.catalog import (
    Catalog,
    DuplicateOperationError,
    OperationDescriptor,
    OperationNotFoundError,
    UsageTracker,
)
from plugin_gateway.catalog.categorize import (
    extract_categories,
    infer_category,
)

from conftest import make_descriptor


class TestOperationDescriptor:
    """Tests for descriptor validation."""

    def test_defaults(self):
        """Test description and schema defaults."""
        descriptor = OperationDescriptor(name="read_file", backend_id="fs", description=None)

        assert descriptor.description == ""
        assert descriptor.input_schema["type"] == "object"
        assert descriptor.category is None
        assert descriptor.keywords == ()

    def test_keywords_are_stripped_and_deduplicated(self):
        descriptor = make_descriptor("grep_code", keywords=[" grep ", "search", "grep", ""])

        assert descriptor.keywords == ("grep", "search")

    def test_single_keyword_string(self):
        descriptor = make_descriptor("grep_code", keywords="grep")

        assert descriptor.keywords == ("grep",)

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            OperationDescriptor(name="   ", backend_id="fs")

    def test_blank_backend_rejected(self):
        with pytest.raises(ValidationError):
            OperationDescriptor(name="read_file", backend_id="")

    def test_tool_definition(self):
        """Test rendering as an MCP tool definition hides the backend."""
        definition = make_descriptor("read_file", description="Read").to_tool_definition()

        assert set(definition) == {"name", "description", "inputSchema"}
        assert definition["description"] == "Read"


class TestCatalogRegistration:
    """Tests for register and register_batch."""

    def test_register_and_resolve(self):
        catalog = Catalog()
        catalog.register(make_descriptor("read_file"))

        assert catalog.resolve("read_file").backend_id == "fs"
        assert "read_file" in catalog
        assert len(catalog) == 1

    def test_register_same_backend_replaces(self):
        catalog = Catalog()
        catalog.register(make_descriptor("read_file", description="old"))
        catalog.register(make_descriptor("write_file"))
        catalog.register(make_descriptor("read_file", description="new"))

        assert catalog.resolve("read_file").description == "new"
        assert [d.name for d in catalog.list_operations()] == ["read_file", "write_file"]

    def test_register_other_backend_rejected(self):
        catalog = Catalog()
        catalog.register(make_descriptor("read_file", backend_id="fs"))

        with pytest.raises(DuplicateOperationError) as exc_info:
            catalog.register(make_descriptor("read_file", backend_id="other"))

        assert exc_info.value.code == "DUPLICATE_OPERATION"
        assert catalog.resolve("read_file").backend_id == "fs"

    def test_batch_is_all_or_nothing(self):
        """Test a collision anywhere in the batch registers nothing."""
        catalog = Catalog()
        catalog.register(make_descriptor("grep_code", backend_id="code"))

        batch = [make_descriptor("read_file"), make_descriptor("grep_code")]
        with pytest.raises(DuplicateOperationError):
            catalog.register_batch("fs", batch)

        assert "read_file" not in catalog
        assert len(catalog) == 1

    def test_batch_duplicate_name_rejected(self):
        catalog = Catalog()

        with pytest.raises(DuplicateOperationError):
            catalog.register_batch("fs", [make_descriptor("read_file"), make_descriptor("read_file")])

        assert len(catalog) == 0

    def test_batch_wrong_owner_rejected(self):
        catalog = Catalog()

        with pytest.raises(ValueError):
            catalog.register_batch("fs", [make_descriptor("grep_code", backend_id="code")])

    def test_batch_returns_names(self):
        catalog = Catalog()
        names = catalog.register_batch("fs", [make_descriptor("a"), make_descriptor("b")])

        assert names == ["a", "b"]

    def test_unregister_all(self):
        catalog = Catalog()
        catalog.register_batch("fs", [make_descriptor("a"), make_descriptor("b")])
        catalog.register(make_descriptor("c", backend_id="code"))

        removed = catalog.unregister_all("fs")

        assert removed == ["a", "b"]
        assert [d.name for d in catalog.list_operations()] == ["c"]
        assert catalog.unregister_all("fs") == []

    def test_operations_for(self):
        catalog = Catalog()
        catalog.register(make_descriptor("a"))
        catalog.register(make_descriptor("c", backend_id="code"))

        assert [d.name for d in catalog.operations_for("code")] == ["c"]

    def test_resolve_unknown(self):
        with pytest.raises(OperationNotFoundError) as exc_info:
            Catalog().resolve("nope")

        assert exc_info.value.code == "OPERATION_NOT_FOUND"
        assert Catalog().get("nope") is None


class TestUsage:
    """Tests for usage counting."""

    def test_tracker_counts(self):
        tracker = UsageTracker()
        tracker.increment("a")
        assert tracker.increment("a") == 2
        assert tracker.count("b") == 0

        tracker.clear("a")
        assert tracker.count("a") == 0

    def test_record_invocation_ignores_unknown(self):
        catalog = Catalog()
        catalog.record_invocation("ghost")

        assert catalog.usage_count("ghost") == 0

    def test_most_used(self):
        catalog = Catalog()
        catalog.register_batch("fs", [make_descriptor("a"), make_descriptor("b"), make_descriptor("c")])
        for _ in range(3):
            catalog.record_invocation("b")
        catalog.record_invocation("a")

        top = catalog.most_used(limit=5)

        assert [(e.name, e.usage_count) for e in top] == [("b", 3), ("a", 1)]
        assert catalog.most_used(limit=1)[0].name == "b"

    def test_statistics(self):
        catalog = Catalog()
        catalog.register_batch("fs", [make_descriptor("a"), make_descriptor("b"), make_descriptor("c")])
        catalog.record_invocation("a")
        catalog.record_invocation("a")
        catalog.record_invocation("b")

        stats = catalog.statistics()

        assert stats.total_operations == 3
        assert stats.operations_with_usage == 2
        assert stats.total_invocations == 3
        assert stats.average_usage_count == 1.5

    def test_clear_usage_all(self):
        catalog = Catalog()
        catalog.register(make_descriptor("a"))
        catalog.record_invocation("a")

        catalog.clear_usage()

        assert catalog.usage_count("a") == 0


class TestCategorize:
    """Tests for keyword-based categorization."""

    def test_extract_categories_splits_identifiers(self):
        assert extract_categories("read_file") == ["filesystem"]

    def test_extract_categories_empty(self):
        assert extract_categories(None) == []
        assert extract_categories("zzz") == []

    def test_infer_prefers_name(self):
        """Test the name decides before the description is consulted."""
        assert infer_category("git_commit", "Write a commit") == "vcs"

    def test_infer_falls_back_to_description(self):
        assert infer_category("xyz", "Execute a shell command") == "shell"

    def test_infer_none(self):
        assert infer_category("xyz", "nothing relevant") is None
