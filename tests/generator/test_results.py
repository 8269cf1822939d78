"""Tests for generation result aggregation."""

from collections import Counter

from sweap.generator import GenerationResult, ProcessedBatch


def make_batch(worker: int, names: list[tuple[str, str]], errors: dict[str, int] | None = None):
    processed = ProcessedBatch(worker=worker, batches=1)
    for first, last in names:
        processed.record_row(first, last)
    processed.errors.update(errors or {})
    return processed


class TestProcessedBatch:
    def test_record_error_counts_messages(self):
        processed = ProcessedBatch(worker=0)

        processed.record_error(ValueError("bad row"))
        processed.record_error("bad row")
        processed.record_error("other")

        assert processed.errors == Counter({"bad row": 2, "other": 1})
        assert processed.num_errors == 3


class TestGenerationResult:
    """Tests for folding worker reports."""

    def test_add_merges_workers(self):
        result = GenerationResult(workers=2)

        result.add(make_batch(0, [("Ada", "Lovelace"), ("Grace", "Hopper")], {"boom": 1}))
        result.add(make_batch(1, [("Ada", "Lovelace"), ("Ada", "Byron")], {"boom": 2, "x": 1}))

        assert result.num_rows == 4
        assert result.people_count == 3
        assert result.common_name == "Ada"
        assert result.common_name_count == 3
        assert result.errors == Counter({"boom": 3, "x": 1})
        assert result.num_errors == 4

    def test_avg_per_second(self):
        result = GenerationResult(num_rows=50, execution_seconds=2.0)

        assert result.avg_per_second == 25.0

    def test_avg_without_elapsed_time(self):
        assert GenerationResult(num_rows=10).avg_per_second == 0.0

    def test_to_dict(self):
        result = GenerationResult(workers=4, batch_size=50, mode="bulk-import", event_name="Gala")
        result.add(make_batch(0, [("Ada", "Lovelace")], {"boom": 1}))
        result.execution_seconds = 1.23456

        data = result.to_dict()

        assert data["workers"] == 4
        assert data["mode"] == "bulk-import"
        assert data["num_rows"] == 1
        assert data["execution_seconds"] == 1.23
        assert data["errors"] == {"boom": 1}
        assert "_people" not in data

    def test_render(self):
        result = GenerationResult(workers=2, event_name="Gala")
        result.add(make_batch(0, [("Ada", "Lovelace")], {"timeout": 2}))

        text = str(result)

        assert text.startswith("Result:")
        assert "  Event Name: Gala" in text
        assert "  Num Rows: 1" in text
        assert "  Common Name: Ada" in text
        assert "    2: timeout" in text
