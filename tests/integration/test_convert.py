"""
End-to-end tests for the conversion pipeline.

Spell checking is either disabled or served by a deterministic oracle
so these tests do not depend on dictionary contents.
"""

import threading

import pytest

import docmend
from docmend import ConversionResult, ProcessingCancelled, ProcessingConfig
from docmend.convert import PipelineOrchestrator, convert, convert_batch, convert_to_markdown
from docmend.normalizers.structure import StructureReconstructor
from docmend.renderers.markdown import NO_CONTENT_PLACEHOLDER


def page(text, number=1, confidence=95.0):
    return {"pageNumber": number, "text": text, "confidence": confidence}


class TestEndToEnd:
    """Full pipeline scenarios."""

    def test_hello_world_with_toc(self, permissive_oracle):
        """All-caps heading, table of contents and a paragraph."""
        config = ProcessingConfig(include_metadata=False, include_table_of_contents=True)
        result = convert([page("HELLO WORLD\n\nThis is a test.")], config, oracle=permissive_oracle)
        assert result.markdown == (
            "## Table of Contents\n"
            "\n"
            "  - [Hello World](#hello-world)\n"
            "\n"
            "## Hello World\n"
            "\n"
            "This is a test.\n"
        )
        assert [h.text for h in result.headings] == ["Hello World"]

    def test_hello_world_with_metadata(self, permissive_oracle, fixed_time):
        """Front matter comes first when metadata is enabled."""
        result = convert(
            [page("HELLO WORLD\n\nThis is a test.")],
            oracle=permissive_oracle,
            source="https://example.com/paper.pdf",
            processed_at=fixed_time,
        )
        assert result.markdown == (
            "---\n"
            'title: "Processed Document"\n'
            'source: "https://example.com/paper.pdf"\n'
            'processed_date: "2024-05-01T12:00:00+00:00"\n'
            'generator: "docmend v0.1.0"\n'
            "---\n"
            "\n"
            "## Hello World\n"
            "\n"
            "This is a test.\n"
        )

    def test_word_artifacts_repaired(self, sample_config):
        """Known recognition artifacts are fixed before rendering."""
        markdown = convert_to_markdown([page("Tlie cat sat witli tlie dog.")], sample_config)
        assert markdown == "The cat sat with the dog.\n"

    def test_wrapped_paragraph_and_flow(self, sample_config):
        """Wrapped lines are joined and sentence spacing repaired."""
        text = "the results were\nplain .they held\nacross every trial."
        markdown = convert_to_markdown([page(text)], sample_config)
        assert markdown == "the results were plain. They held across every trial.\n"

    def test_pages_separated(self, sample_config):
        """Each page starts a new block."""
        records = [page("First page text.", 1), page("Second page text.", 2)]
        markdown = convert_to_markdown(records, sample_config)
        assert markdown == "First page text.\n\nSecond page text.\n"

    def test_list_items_normalised(self, sample_config):
        """List item text goes through punctuation and flow cleanup."""
        text = "Shopping list\n• buy milk .then bread\n  - eggs"
        markdown = convert_to_markdown([page(text)], sample_config)
        assert markdown == "Shopping list\n- buy milk. Then bread\n  - eggs\n"

    def test_table_with_layout(self, sample_config):
        """Layout-preserving reconstruction keeps table rows for the renderer."""
        text = "Name  City\nAlice  Paris\nBob  Rome"
        markdown = convert_to_markdown([page(text)], sample_config)
        assert markdown == (
            "| Name | City |\n"
            "| --- | --- |\n"
            "| Alice | Paris |\n"
            "| Bob | Rome |\n"
        )

    def test_table_without_layout(self):
        """Without preserve_layout the rows merge into prose."""
        config = ProcessingConfig(
            include_metadata=False, enable_spell_check=False, preserve_layout=False
        )
        markdown = convert_to_markdown([page("Name  City\nAlice  Paris\nBob  Rome")], config)
        assert "|" not in markdown
        assert markdown == "Name City Alice Paris Bob Rome\n"

    def test_code_block(self, sample_config):
        """Indented code is fenced."""
        text = "Example\n    value = compute(x)\n    print(value)"
        markdown = convert_to_markdown([page(text)], sample_config)
        assert markdown == "Example\n```\nvalue = compute(x)\nprint(value)\n```\n"

    def test_inline_formatting(self, sample_config):
        """All-caps words and URLs get inline formatting."""
        text = "Data from NASA is at https://example.org today"
        markdown = convert_to_markdown([page(text)], sample_config)
        assert markdown == (
            "Data from **NASA** is at [https://example.org](https://example.org) today\n"
        )

    def test_empty_document_placeholder(self, sample_config):
        """A document without text renders the placeholder."""
        result = convert([page("", confidence=0.0)], sample_config)
        assert result.markdown == NO_CONTENT_PLACEHOLDER + "\n"
        assert result.warnings

    def test_deterministic(self, permissive_oracle, fixed_time):
        """The same input always yields the same output."""
        records = [page("HELLO WORLD\nsome wrapped\ntext here.\n- item")]
        first = convert(records, oracle=permissive_oracle, processed_at=fixed_time)
        second = convert(records, oracle=permissive_oracle, processed_at=fixed_time)
        assert first.markdown == second.markdown


class TestSpellCorrection:
    """Spell correction inside the pipeline."""

    def test_correction_applied(self, fake_oracle):
        """Close misspellings are corrected."""
        config = ProcessingConfig(include_metadata=False)
        result = convert([page("Hello wrold.")], config, oracle=fake_oracle)
        assert result.markdown == "Hello world.\n"
        assert result.spell_stats.corrected == 1

    def test_aggressive_mode(self, fake_oracle):
        """Aggressive mode accepts distant suggestions."""
        normal = ProcessingConfig(include_metadata=False)
        aggressive = ProcessingConfig(include_metadata=False, aggressive_correction=True)
        assert convert_to_markdown([page("xqzt")], normal, oracle=fake_oracle) == "xqzt\n"
        assert convert_to_markdown([page("xqzt")], aggressive, oracle=fake_oracle) == "quiet\n"

    def test_custom_dictionary(self, fake_oracle):
        """Custom terms are never corrected."""
        config = ProcessingConfig(include_metadata=False, custom_dictionary="wrold")
        assert convert_to_markdown([page("Hello wrold.")], config, oracle=fake_oracle) == (
            "Hello wrold.\n"
        )

    def test_headings_not_spell_checked(self, fake_oracle):
        """Heading text is left as classified."""
        config = ProcessingConfig(include_metadata=False, aggressive_correction=True)
        result = convert([page("WROLD")], config, oracle=fake_oracle)
        assert result.markdown == "## Wrold\n"

    def test_disabled(self, sample_config):
        """Disabled spell checking reports no statistics."""
        result = convert([page("Hello wrold.")], sample_config)
        assert result.markdown == "Hello wrold.\n"
        assert result.spell_stats is None


class TestResultStatistics:
    """Confidence statistics and diagnostics on the result."""

    def test_engine_records(self, sample_records, sample_config):
        """Records in the recognition engine's format convert end to end."""
        result = convert(sample_records, sample_config)
        assert result.markdown == (
            "## Hello World\n"
            "\n"
            "This is a test of the reconstruction pipeline.\n"
            "\n"
            "Second page text.\n"
        )
        assert result.page_count == 2
        assert result.flagged_pages == [2]

    def test_confidence_statistics(self, sample_config):
        """Averages, low-confidence and flagged pages are reported."""
        records = [page("a", 1, 95.0), page("b", 2, 50.0), page("c", 3, 65.0)]
        result = convert(records, sample_config)
        assert result.page_count == 3
        assert result.average_confidence == pytest.approx(70.0)
        assert result.low_confidence_pages == [2, 3]
        assert result.flagged_pages == [2]
        assert any("confidence threshold" in w for w in result.warnings)

    def test_processing_log(self, sample_config):
        """Every stage leaves a line in the processing log."""
        result = convert([page("Some text.")], sample_config)
        log = "\n".join(result.processing_log)
        assert "Starting conversion" in log
        assert "Character rules" in log
        assert "Spell check: disabled" in log
        assert "Rendered" in log

    def test_passthrough_settings(self):
        """Language and output format are reported back."""
        config = ProcessingConfig(
            ocr_language="eng", output_format="html", enable_spell_check=False
        )
        result = convert([page("Text.")], config)
        assert result.ocr_language == "eng"
        assert result.output_format == "html"

    def test_save(self, sample_config, tmp_path):
        """The result can be written to disk."""
        result = convert([page("Saved text.")], sample_config)
        path = tmp_path / "out.md"
        result.save(path)
        assert path.read_text(encoding="utf-8") == "Saved text.\n"


class TestErrors:
    """Contract violations and cancellation."""

    def test_none_input(self):
        """None is rejected."""
        with pytest.raises(ValueError, match="cannot be None"):
            convert(None)

    def test_cancel_before_start(self, sample_config):
        """A pre-set event cancels before any stage runs."""
        event = threading.Event()
        event.set()
        with pytest.raises(ProcessingCancelled) as exc_info:
            convert([page("Text.")], sample_config, cancel_event=event)
        assert exc_info.value.completed_stage is None

    def test_cancel_between_stages(self, sample_config):
        """Cancellation is noticed at the next stage boundary."""
        event = threading.Event()

        class CancellingReconstructor(StructureReconstructor):
            def rebuild(self, text, preserve_layout=False):
                event.set()
                return super().rebuild(text, preserve_layout)

        orchestrator = PipelineOrchestrator(sample_config, reconstructor=CancellingReconstructor())
        with pytest.raises(ProcessingCancelled) as exc_info:
            orchestrator.process([page("Text.")], cancel_event=event)
        assert exc_info.value.completed_stage == "structure"


class TestBatch:
    """Tests for batch conversion."""

    def test_parallel_batch(self, sample_config):
        """All sources are converted."""
        sources = {"a": [page("Alpha text.")], "b": [page("Beta text.")]}
        results = dict(convert_batch(sources, sample_config, max_workers=2))
        assert set(results) == {"a", "b"}
        assert results["a"].markdown == "Alpha text.\n"
        assert results["b"].markdown == "Beta text.\n"

    def test_sequential_batch(self, sample_config):
        """parallel=False converts in order."""
        sources = {"a": [page("Alpha text.")], "b": [page("Beta text.")]}
        names = [name for name, _ in convert_batch(sources, sample_config, parallel=False)]
        assert names == ["a", "b"]

    def test_failures_yielded(self, sample_config):
        """A failing source yields its exception instead of aborting the batch."""
        sources = {"good": [page("Fine text.")], "bad": None}
        results = dict(convert_batch(sources, sample_config))
        assert isinstance(results["good"], ConversionResult)
        assert isinstance(results["bad"], ValueError)

    def test_shared_oracle(self, fake_oracle):
        """One oracle serves every document in the batch."""
        config = ProcessingConfig(include_metadata=False)
        sources = {n: [page("Hello wrold.")] for n in ("a", "b", "c")}
        results = dict(convert_batch(sources, config, oracle=fake_oracle))
        assert {r.markdown for r in results.values()} == {"Hello world.\n"}


def test_package_level_convert(sample_config):
    """docmend.convert is the orchestrator entry point."""
    assert docmend.convert([page("Top level.")], sample_config).markdown == "Top level.\n"
