"""Default tool catalogue — the six evidence tools offered to every agent."""

from collections.abc import Iterable

from verifaible_bench.tools.domain import names
from verifaible_bench.tools.domain.registry import ToolRegistry
from verifaible_bench.tools.domain.schema import ToolSchema
from verifaible_bench.tools.infrastructure.evidence_client import EvidenceServiceClient
from verifaible_bench.tools.infrastructure.handlers import (
    AnalyzePageHandler,
    CiteHandler,
    TestActionStepsHandler,
    VideoTranscriptHandler,
    WebFetchHandler,
    WebSearchHandler,
)
from verifaible_bench.tools.infrastructure.transcript_client import TranscriptClient

WEB_SEARCH_SCHEMA = ToolSchema(
    name=names.WEB_SEARCH,
    description=(
        "Search the web for up-to-date information: news, data, events, facts, or "
        "source websites. Cite what you find with verifaible_cite. For dynamic pages "
        "use analyze_page."
    ),
    parameters={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "max_results": {
                "type": "number",
                "description": "Number of results (default 5, max 10)",
            },
            "search_depth": {
                "type": "string",
                "enum": ["basic", "advanced"],
                "description": "basic (fast) or advanced (more thorough)",
            },
            "include_answer": {
                "type": "boolean",
                "description": "Include an AI-generated answer summary",
            },
        },
        "required": ["query"],
    },
)

WEB_FETCH_SCHEMA = ToolSchema(
    name=names.WEB_FETCH,
    description=(
        "Fetch the static text content of a URL as Markdown. Use for articles, blogs "
        "and documents. Content rendered by JavaScript needs analyze_page."
    ),
    parameters={
        "type": "object",
        "properties": {"url": {"type": "string", "description": "Page URL"}},
        "required": ["url"],
    },
)

ANALYZE_PAGE_SCHEMA = ToolSchema(
    name=names.ANALYZE_PAGE,
    description=(
        "Deep-analyze a web page: network requests, global JS objects (with method "
        "source), interactive elements, tables and an accessibility tree; PDFs are "
        "returned as paginated text. Use once per URL on dynamic pages, then build "
        "action_steps and verify them with test_action_steps."
    ),
    parameters={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "Page URL"},
            "action_steps": {
                "type": "string",
                "description": "Optional action_steps JSON string replayed before analysis",
            },
        },
        "required": ["url"],
    },
)

TEST_ACTION_STEPS_SCHEMA = ToolSchema(
    name=names.TEST_ACTION_STEPS,
    description=(
        "Replay action_steps in a fresh browser session and report the outcome as "
        "text (no screenshot). Every call is stateless: always send the full action "
        "sequence. Step types: exec_js, click, type, scroll, select, wait; each takes "
        "a wait delay. Returns page_title, step_errors, exec_js return values and the "
        'verification payload. verify_type "text" searches the page for anchor, '
        '"table" extracts tables (row_anchor picks a row), "image" finds an element.'
    ),
    parameters={
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "Target page URL"},
            "action_steps": {
                "type": "string",
                "description": "action_steps JSON string to test",
            },
            "verify_type": {
                "type": "string",
                "enum": ["text", "table", "image"],
                "description": "Verification mode",
            },
            "anchor": {"type": "string", "description": "Text to search for (text mode)"},
            "row_anchor": {"type": "string", "description": "Row locator text (table mode)"},
            "element_selector": {
                "type": "string",
                "description": "CSS selector (image mode)",
            },
            "element_alt": {
                "type": "string",
                "description": "Image alt / video title to match (image mode)",
            },
        },
        "required": ["url", "action_steps"],
    },
)

VIDEO_TRANSCRIPT_SCHEMA = ToolSchema(
    name=names.VIDEO_TRANSCRIPT,
    description=(
        "Fetch the timestamped transcript of a YouTube video as '[m:ss] text' lines. "
        "Find the video with verifaible_web_search first, then cite with "
        'evidence_type="video" and a timestamp.'
    ),
    parameters={
        "type": "object",
        "properties": {"url": {"type": "string", "description": "YouTube video URL"}},
        "required": ["url"],
    },
)

CITE_SCHEMA = ToolSchema(
    name=names.CITE,
    description=(
        "Create a verifiable citation for a claim. Returns user_seq; mark the claim "
        "with [@v:user_seq] in the answer. Static pages: source_url + quoted_text + "
        "anchor. Dynamic pages: add the verified action_steps. Tables: "
        'evidence_type="table" with row_anchor / col_anchor. Images and videos: '
        'evidence_type="image"/"video" with element_selector or timestamp. PDFs: '
        'evidence_type="pdf" with page_number.'
    ),
    parameters={
        "type": "object",
        "properties": {
            "claim": {"type": "string", "description": "The concrete claim being cited"},
            "source_url": {"type": "string", "description": "Source page URL"},
            "quoted_text": {
                "type": "string",
                "description": "Verbatim quote from the source",
            },
            "anchor": {"type": "string", "description": "Locator text (3-20 chars)"},
            "source_title": {"type": "string", "description": "Source page title"},
            "action_steps": {
                "type": "string",
                "description": "action_steps JSON string for dynamic pages",
            },
            "evidence_type": {
                "type": "string",
                "enum": ["text", "table", "image", "video", "pdf"],
                "description": "Evidence type (default text)",
            },
            "table_selector": {"type": "string", "description": "Table CSS selector"},
            "row_anchor": {
                "type": "string",
                "description": "Row locator text (or JSON array string for several rows)",
            },
            "col_anchor": {
                "type": "string",
                "description": "Column locator text (or JSON array string for several columns)",
            },
            "element_selector": {
                "type": "string",
                "description": "Target element CSS selector",
            },
            "element_alt": {"type": "string", "description": "Image alt or video title"},
            "page_number": {"type": "number", "description": "PDF page (1-indexed)"},
            "timestamp": {"type": "number", "description": "Video timestamp in seconds"},
            "video_id": {"type": "string", "description": "Video id (e.g. YouTube id)"},
        },
        "required": ["claim", "source_url", "quoted_text", "anchor"],
    },
)


def build_default_registry(
    evidence_client: EvidenceServiceClient,
    transcript_client: TranscriptClient,
    enabled: Iterable[str] | None = None,
) -> ToolRegistry:
    """Build the standard registry, optionally restricted to the enabled tool names.

    Raises:
        KeyError: if enabled names a tool that does not exist.
    """
    registry = ToolRegistry()
    registry.register(WEB_SEARCH_SCHEMA, WebSearchHandler(evidence_client))
    registry.register(WEB_FETCH_SCHEMA, WebFetchHandler(evidence_client))
    registry.register(ANALYZE_PAGE_SCHEMA, AnalyzePageHandler(evidence_client))
    registry.register(TEST_ACTION_STEPS_SCHEMA, TestActionStepsHandler(evidence_client))
    registry.register(VIDEO_TRANSCRIPT_SCHEMA, VideoTranscriptHandler(transcript_client))
    registry.register(CITE_SCHEMA, CiteHandler(evidence_client))
    if enabled is None:
        return registry
    return registry.subset(enabled)
