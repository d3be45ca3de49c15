"""
Document conversion orchestrator.

This module provides the main `convert()` function that turns pages of
recognised text into Markdown by wiring together:
- PageReader (page records -> Document)
- CorrectionRuleEngine (character, word and punctuation tables)
- StructureReconstructor (paragraphs, headings, list items)
- SpellCorrector (dictionary oracle)
- FlowNormalizer (spacing and capitalisation)
- DocumentRenderer (Markdown)

Stages always run in PIPELINE_STAGES order. Each stage consumes the
whole output of the previous one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import partial
from typing import Any

from docmend.config import ProcessingConfig
from docmend.exceptions import ProcessingCancelled
from docmend.extractors.layout import is_layout_line
from docmend.models import ConversionResult, Document, LineKind, LogicalLine, Page
from docmend.normalizers.flow import FlowNormalizer
from docmend.normalizers.structure import StructureReconstructor
from docmend.ocr.dictionary import DictionaryOracle, create_oracle
from docmend.ocr.rules import CorrectionRuleEngine, RuleScope
from docmend.ocr.spelling import SpellCorrector, SpellStats
from docmend.readers.pages import read_pages
from docmend.renderers.markdown import DocumentRenderer, RenderOptions

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

GENERATOR = f"docmend v{__version__}"

PIPELINE_STAGES = (
    "character",
    "word",
    "punctuation",
    "structure",
    "spellcheck",
    "flow",
    "render",
)

PageInput = Document | Iterable[Mapping[str, Any] | Page]


# ═══════════════════════════════════════════════════════════════════════════════
# Pipeline
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class PipelineContext:
    """State accumulated while one document moves through the stages."""

    document: Document
    config: ProcessingConfig
    source: str = ""
    processed_at: datetime | None = None
    processing_log: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    # Stage outputs
    text: str = ""
    lines: list[LogicalLine] = field(default_factory=list)
    spell_stats: SpellStats | None = None
    markdown: str = ""

    completed_stage: str | None = None


class PipelineOrchestrator:
    """
    Runs the reconstruction pipeline over one document at a time.

    The orchestrator holds no per-document state, so one instance can
    process several documents concurrently.

    Example:
        >>> orchestrator = PipelineOrchestrator(ProcessingConfig(include_metadata=False))
        >>> orchestrator.run([{"pageNumber": 1, "text": "HELLO WORLD", "confidence": 92}])
        '## Hello World\\n'
    """

    def __init__(
        self,
        config: ProcessingConfig | None = None,
        oracle: DictionaryOracle | None = None,
        rule_engine: CorrectionRuleEngine | None = None,
        reconstructor: StructureReconstructor | None = None,
        renderer: DocumentRenderer | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Processing configuration (defaults if None).
            oracle: Dictionary oracle for spell correction. Built from
                config.ocr_language when spell checking is enabled and
                none is given.
            rule_engine: Correction rule engine (built-in tables if None).
            reconstructor: Paragraph reconstructor.
            renderer: Markdown renderer.
        """
        self.config = config or ProcessingConfig()
        self.rule_engine = rule_engine or CorrectionRuleEngine()
        self.reconstructor = reconstructor or StructureReconstructor()
        self.flow_normalizer = FlowNormalizer()
        self.renderer = renderer or DocumentRenderer()

        self.spell_corrector: SpellCorrector | None = None
        if self.config.enable_spell_check:
            self.spell_corrector = SpellCorrector(
                oracle if oracle is not None else create_oracle(self.config.ocr_language)
            )

        self._stages: dict[str, Callable[[PipelineContext], None]] = {
            "character": partial(self._apply_rules, scope=RuleScope.CHARACTER),
            "word": partial(self._apply_rules, scope=RuleScope.WORD),
            "punctuation": partial(self._apply_rules, scope=RuleScope.PUNCTUATION),
            "structure": self._rebuild_structure,
            "spellcheck": self._check_spelling,
            "flow": self._normalize_flow,
            "render": self._render,
        }

    def process(
        self,
        pages: PageInput,
        source: str = "",
        processed_at: datetime | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ConversionResult:
        """
        Convert one document.

        Args:
            pages: A Document, or page records in reading order.
            source: Source identifier for the front matter.
            processed_at: Timestamp for the front matter (now if None).
            cancel_event: Checked between stages; when set, the
                conversion stops and partial output is discarded.

        Returns:
            ConversionResult with the Markdown and diagnostics.

        Raises:
            ValueError: If pages is None.
            ProcessingCancelled: If cancel_event was set.
        """
        if pages is None:
            raise ValueError("Input document cannot be None")

        document = pages if isinstance(pages, Document) else read_pages(pages)
        ctx = PipelineContext(
            document=document,
            config=self.config,
            source=source,
            processed_at=processed_at,
        )
        ctx.processing_log.append(
            f"Starting conversion: {document.page_count} pages, "
            f"{document.word_count} words, "
            f"average confidence {document.average_confidence:.1f}"
        )

        if document.is_empty:
            logger.warning("Document contains no text")
            ctx.warnings.append("No text could be extracted from the document")
        ctx.text = document.text

        for stage in PIPELINE_STAGES:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Conversion cancelled after stage %s", ctx.completed_stage)
                raise ProcessingCancelled(ctx.completed_stage)
            logger.debug("Running stage: %s", stage)
            self._stages[stage](ctx)
            ctx.completed_stage = stage

        return self._build_result(ctx)

    def run(self, pages: PageInput, **kwargs: Any) -> str:
        """Convert one document and return only the Markdown."""
        return self.process(pages, **kwargs).markdown

    # ───────────────────────────────────────────────────────────────────────
    # Stages
    # ───────────────────────────────────────────────────────────────────────

    def _apply_rules(self, ctx: PipelineContext, scope: RuleScope) -> None:
        result = self.rule_engine.correct(ctx.text, scope=scope)
        ctx.text = result.corrected_text
        ctx.processing_log.append(
            f"{scope.value.capitalize()} rules: {result.change_count} substitutions"
        )

    def _rebuild_structure(self, ctx: PipelineContext) -> None:
        ctx.lines = self.reconstructor.rebuild(ctx.text, preserve_layout=self.config.preserve_layout)
        counts = {kind: 0 for kind in LineKind}
        for line in ctx.lines:
            counts[line.kind] += 1
        ctx.processing_log.append(
            f"Structure: {counts[LineKind.PARAGRAPH]} paragraphs, "
            f"{counts[LineKind.HEADING]} headings, "
            f"{counts[LineKind.LIST_ITEM]} list items"
        )

    def _check_spelling(self, ctx: PipelineContext) -> None:
        if self.spell_corrector is None:
            ctx.processing_log.append("Spell check: disabled")
            return

        stats = SpellStats()

        def correct(text: str) -> str:
            corrected, line_stats = self.spell_corrector.correct_with_stats(
                text,
                custom_dictionary=self.config.custom_dictionary,
                aggressive=self.config.aggressive_correction,
            )
            stats.merge(line_stats)
            return corrected

        ctx.lines = [_map_text(line, correct) for line in ctx.lines]
        ctx.spell_stats = stats
        ctx.processing_log.append(
            f"Spell check: {stats.words_checked} words checked, "
            f"{stats.corrected} corrected, {stats.rejected} rejected"
        )

    def _normalize_flow(self, ctx: PipelineContext) -> None:
        normalize = self.flow_normalizer.normalize
        preserve_layout = self.config.preserve_layout

        lines = []
        for line in ctx.lines:
            if preserve_layout and line.kind is LineKind.PARAGRAPH and is_layout_line(line.text):
                lines.append(line)
            else:
                lines.append(_map_text(line, normalize))
        ctx.lines = lines

    def _render(self, ctx: PipelineContext) -> None:
        options = RenderOptions(
            include_metadata=self.config.include_metadata,
            include_toc=self.config.include_table_of_contents,
            preserve_formatting=self.config.preserve_formatting,
            source=ctx.source,
            generator=GENERATOR,
            processed_at=ctx.processed_at,
        )
        ctx.markdown = self.renderer.render(ctx.lines, options)
        ctx.processing_log.append(f"Rendered {len(ctx.markdown)} chars of markdown")

    # ───────────────────────────────────────────────────────────────────────
    # Result
    # ───────────────────────────────────────────────────────────────────────

    def _build_result(self, ctx: PipelineContext) -> ConversionResult:
        document = ctx.document
        flagged = document.pages_below(self.config.confidence_threshold)
        if flagged:
            logger.warning(
                "%d pages below confidence threshold %.0f: %s",
                len(flagged),
                self.config.confidence_threshold,
                flagged,
            )
            ctx.warnings.append(
                f"Pages below confidence threshold {self.config.confidence_threshold:g}: "
                + ", ".join(str(n) for n in flagged)
            )

        if self.config.output_format != "markdown":
            logger.info(
                "Output format %r requested; returning markdown for the caller to convert",
                self.config.output_format,
            )

        logger.info(
            "Converted %d pages (%d chars of markdown)",
            document.page_count,
            len(ctx.markdown),
        )

        return ConversionResult(
            markdown=ctx.markdown,
            headings=[line.heading for line in ctx.lines if line.heading is not None],
            page_count=document.page_count,
            average_confidence=document.average_confidence,
            low_confidence_pages=document.low_confidence_pages,
            flagged_pages=flagged,
            spell_stats=ctx.spell_stats,
            ocr_language=self.config.ocr_language,
            output_format=self.config.output_format,
            warnings=ctx.warnings,
            processing_log=ctx.processing_log,
        )


def _map_text(line: LogicalLine, fn: Callable[[str], str]) -> LogicalLine:
    """Apply fn to the text of a paragraph or list item; headings and blanks pass through."""
    if line.kind is LineKind.PARAGRAPH:
        return LogicalLine.paragraph(fn(line.text))
    if line.kind is LineKind.LIST_ITEM and line.list_item is not None:
        return LogicalLine.from_list_item(replace(line.list_item, text=fn(line.list_item.text)))
    return line


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


def convert(
    pages: PageInput,
    config: ProcessingConfig | None = None,
    source: str = "",
    processed_at: datetime | None = None,
    cancel_event: threading.Event | None = None,
    oracle: DictionaryOracle | None = None,
) -> ConversionResult:
    """
    Convert pages of recognised text to Markdown.

    This is the main entry point for docmend. It handles:
    - Reading page records
    - Rule-based correction (character, word, punctuation)
    - Paragraph, heading and list reconstruction
    - Spell correction and flow cleanup
    - Markdown rendering

    Args:
        pages: A Document, or page records in reading order.
        config: Processing configuration (uses defaults if None).
        source: Source identifier written to the front matter.
        processed_at: Timestamp written to the front matter (now if None).
        cancel_event: Set it from another thread to cancel.
        oracle: Dictionary oracle (built from config.ocr_language if None).

    Returns:
        ConversionResult with the Markdown, headings and statistics

    Raises:
        ValueError: If pages is None
        ProcessingCancelled: If cancel_event was set during conversion

    Example:
        >>> result = convert([{"pageNumber": 1, "text": "HELLO WORLD", "confidence": 92}])
        >>> print(result.markdown)
        >>> result.flagged_pages
        []
    """
    if pages is None:
        raise ValueError("Input document cannot be None")

    orchestrator = PipelineOrchestrator(config, oracle=oracle)
    return orchestrator.process(
        pages,
        source=source,
        processed_at=processed_at,
        cancel_event=cancel_event,
    )


def convert_to_markdown(
    pages: PageInput,
    config: ProcessingConfig | None = None,
    **kwargs: Any,
) -> str:
    """Convert pages and return only the Markdown string."""
    return convert(pages, config, **kwargs).markdown


def convert_batch(
    sources: Mapping[str, PageInput],
    config: ProcessingConfig | None = None,
    parallel: bool = True,
    max_workers: int = 4,
    oracle: DictionaryOracle | None = None,
) -> Iterator[tuple[str, ConversionResult | Exception]]:
    """
    Convert multiple documents, yielding results as completed.

    All documents share one orchestrator and one dictionary oracle.

    Args:
        sources: Mapping of source identifier to pages.
        config: Processing configuration
        parallel: Whether to process in parallel
        max_workers: Max parallel workers (if parallel=True)
        oracle: Shared dictionary oracle (built once if None)

    Yields:
        (source, result) tuples where result is ConversionResult or Exception
    """
    orchestrator = PipelineOrchestrator(config, oracle=oracle)

    if not parallel or max_workers <= 1 or len(sources) <= 1:
        for source, pages in sources.items():
            try:
                yield (source, orchestrator.process(pages, source=source))
            except Exception as e:
                logger.warning("Conversion failed for %s: %s", source, e)
                yield (source, e)
        return

    with ThreadPoolExecutor(max_workers=min(max_workers, len(sources))) as executor:
        future_to_source = {
            executor.submit(orchestrator.process, pages, source=source): source
            for source, pages in sources.items()
        }
        for future in as_completed(future_to_source):
            source = future_to_source[future]
            try:
                yield (source, future.result())
            except Exception as e:
                logger.warning("Conversion failed for %s: %s", source, e)
                yield (source, e)
