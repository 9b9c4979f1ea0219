"""Tool handlers — call the remote service and render its payload as text for the model."""

import json
from typing import Any

from verifaible_bench.core.text import truncate
from verifaible_bench.tools.infrastructure.errors import ToolServiceError
from verifaible_bench.tools.infrastructure.evidence_client import EvidenceServiceClient
from verifaible_bench.tools.infrastructure.transcript_client import TranscriptClient

# Per-section limits keep one tool result from flooding the context window.
_SEARCH_SNIPPET_CHARS = 500
_FETCH_CONTENT_CHARS = 8000
_ANALYSIS_TOTAL_CHARS = 12000
_PDF_PAGE_CHARS = 3000
_MAX_NETWORK_REQUESTS = 20
_MAX_GLOBAL_OBJECTS = 15
_MAX_INTERACTIVE_ELEMENTS = 30
_MAX_TABLES = 5
_MAX_TABLE_ROWS = 10
_MAX_VERIFY_TABLE_ROWS = 15
_ACCESSIBILITY_CHARS = 2000

_CITE_SERVICE = "/agent/evidence/create-from-web"
_CITE_FIELDS = (
    "claim",
    "source_url",
    "quoted_text",
    "anchor",
    "source_title",
    "action_steps",
    "evidence_type",
    "table_selector",
    "row_anchor",
    "col_anchor",
    "element_selector",
    "element_alt",
    "page_number",
    "timestamp",
    "video_id",
)


def _opt_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    return None if value is None else str(value)


class WebSearchHandler:
    def __init__(self, client: EvidenceServiceClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        max_results = arguments.get("max_results")
        data = await self._client.web_search(
            query=str(arguments["query"]),
            max_results=int(max_results) if max_results is not None else None,
            search_depth=_opt_str(arguments, "search_depth"),
            include_answer=arguments.get("include_answer"),
        )
        return format_search(data)


def format_search(data: dict[str, Any]) -> str:
    if not data.get("success", False):
        return str(data.get("message") or "Search failed")

    lines: list[str] = []
    if data.get("answer"):
        lines += ["## Answer summary", str(data["answer"]), ""]

    results = data.get("results") or []
    if not results:
        lines.append("No results found")
        return "\n".join(lines)

    lines += ["## Search results", ""]
    for position, result in enumerate(results, start=1):
        lines += [f"### {position}. {result.get('title', '')}", f"URL: {result.get('url', '')}"]
        if result.get("published_date"):
            lines.append(f"Published: {result['published_date']}")
        lines += ["", truncate(str(result.get("content", "")), _SEARCH_SNIPPET_CHARS), ""]
    return "\n".join(lines)


class WebFetchHandler:
    def __init__(self, client: EvidenceServiceClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        url = str(arguments["url"])
        data = await self._client.web_fetch(url=url)
        if not data.get("success", False):
            return str(data.get("message") or "Fetch failed")
        content = truncate(
            str(data.get("content") or ""), _FETCH_CONTENT_CHARS, "\n\n... [content truncated]"
        )
        return f"## {url}\n\n{content}"


class AnalyzePageHandler:
    def __init__(self, client: EvidenceServiceClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        url = str(arguments["url"])
        data = await self._client.analyze_page(
            url=url, action_steps=_opt_str(arguments, "action_steps")
        )
        if data.get("content_type") == "pdf":
            return format_pdf_analysis(url=url, data=data)
        return format_page_analysis(url=url, data=data)


def format_pdf_analysis(url: str, data: dict[str, Any]) -> str:
    lines = [f"## PDF document: {data.get('title') or url}", f"Total pages: {data.get('total_pages')}", ""]
    for page in data.get("pages") or []:
        lines.append(f"### Page {page.get('page_number')}")
        lines += [
            truncate(str(page.get("text", "")), _PDF_PAGE_CHARS, "\n... [page text truncated]"),
            "",
        ]
    return truncate("\n".join(lines), _ANALYSIS_TOTAL_CHARS, "\n\n... [PDF content truncated]")


def format_page_analysis(url: str, data: dict[str, Any]) -> str:
    header = f"## Page analysis: {url}"
    lines = [header, ""]

    requests = data.get("network_requests") or []
    if requests:
        lines.append(f"### Network requests ({len(requests)})")
        for req in requests[:_MAX_NETWORK_REQUESTS]:
            lines.append(
                f"- [{req.get('method') or 'GET'}] {truncate(str(req.get('url')), 120)}"
                f" ({req.get('type')}, {req.get('status')})"
            )
        if len(requests) > _MAX_NETWORK_REQUESTS:
            lines.append(f"  ... {len(requests) - _MAX_NETWORK_REQUESTS} more requests")
        lines.append("")

    global_objects = data.get("global_objects") or {}
    if global_objects:
        lines.append(f"### Global objects ({len(global_objects)})")
        for name, obj in list(global_objects.items())[:_MAX_GLOBAL_OBJECTS]:
            lines.append(f"**{name}**: {truncate(json.dumps(obj, ensure_ascii=False), 300)}")
        lines.append("")

    elements = data.get("interactive_elements") or []
    if elements:
        lines.append(f"### Interactive elements ({len(elements)})")
        for el in elements[:_MAX_INTERACTIVE_ELEMENTS]:
            desc = f"- <{el.get('tag')}"
            if el.get("role"):
                desc += f' role="{el["role"]}"'
            desc += ">"
            if el.get("text"):
                desc += f' "{truncate(str(el["text"]), 50)}"'
            if el.get("selector"):
                desc += f" -> {el['selector']}"
            lines.append(desc)
        lines.append("")

    tables = data.get("tables") or []
    if tables:
        lines.append(f"### Tables ({len(tables)})")
        for table in tables[:_MAX_TABLES]:
            lines += _format_table(table=table, max_rows=_MAX_TABLE_ROWS)
            lines.append("")

    tree = data.get("accessibility_tree")
    if tree:
        lines += ["### Accessibility tree (summary)", truncate(str(tree), _ACCESSIBILITY_CHARS), ""]

    if len(lines) <= 2:
        return f"Page analysis returned no usable content. URL: {url}"
    return truncate("\n".join(lines), _ANALYSIS_TOTAL_CHARS, "\n\n... [analysis truncated]")


def _format_table(table: dict[str, Any], max_rows: int) -> list[str]:
    lines: list[str] = []
    if table.get("title"):
        lines.append(f"**{table['title']}**")
    headers = table.get("headers") or []
    if headers:
        lines.append(f"Columns: {' | '.join(str(h) for h in headers)}")
    rows = table.get("rows") or []
    for row in rows[:max_rows]:
        lines.append(f"  {' | '.join(str(cell) for cell in row)}")
    if len(rows) > max_rows:
        lines.append(f"  ... {len(rows) - max_rows} more rows")
    return lines


class TestActionStepsHandler:
    __test__ = False

    def __init__(self, client: EvidenceServiceClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        verify_type = _opt_str(arguments, "verify_type") or "text"
        data = await self._client.test_action_steps(
            url=str(arguments["url"]),
            action_steps=str(arguments["action_steps"]),
            verify_type=verify_type,
            anchor=_opt_str(arguments, "anchor"),
            row_anchor=_opt_str(arguments, "row_anchor"),
            element_selector=_opt_str(arguments, "element_selector"),
            element_alt=_opt_str(arguments, "element_alt"),
        )
        return format_step_test(
            data=data, verify_type=verify_type, row_anchor=_opt_str(arguments, "row_anchor")
        )


def format_step_test(
    data: dict[str, Any], verify_type: str, row_anchor: str | None = None
) -> str:
    lines = ["## Action steps test result", "", f"**Page title**: {data.get('page_title') or '(none)'}"]

    step_errors = data.get("step_errors") or []
    if step_errors:
        lines.append(f"\n**Step errors** ({len(step_errors)}):")
        lines += [f"  - {err}" for err in step_errors]
    else:
        lines.append("\nAll steps executed successfully")

    exec_results = data.get("exec_results") or []
    if exec_results:
        lines.append("\n### exec_js return values")
        for item in exec_results:
            lines.append(f"**Step {item.get('step')}**:\n```\n{item.get('result')}\n```")

    if verify_type == "text":
        found = bool(data.get("anchor_found"))
        lines.append(f"\n**Anchor search**: {'found' if found else 'not found'}")
        if found and data.get("anchor_context"):
            lines.append(f"**Context**: {data['anchor_context']}")
    elif verify_type == "table":
        tables = data.get("tables") or []
        if tables:
            lines.append(f"\n### Table data ({len(tables)})")
            for table in tables:
                lines += _format_table(table=table, max_rows=_MAX_VERIFY_TABLE_ROWS)
                lines.append("")
        else:
            lines.append("\nNo table data found")
        matched_row = data.get("matched_row")
        if matched_row:
            lines.append(f"**Matched row**: {' | '.join(str(c) for c in matched_row)}")
        elif row_anchor:
            lines.append(f'**Matched row**: no row contains "{row_anchor}"')
    elif verify_type == "image":
        found = bool(data.get("element_found"))
        lines.append(f"\n**Element search**: {'found' if found else 'not found'}")
        info = data.get("element_info")
        if found and info:
            lines.append(f"  tag: {info.get('tag')}, alt: {info.get('alt') or '(none)'}")
            lines.append(
                f"  size: {info.get('width')}x{info.get('height')},"
                f" visible: {'yes' if info.get('visible') else 'no'}"
            )

    return "\n".join(lines)


class VideoTranscriptHandler:
    def __init__(self, client: TranscriptClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        url = arguments.get("url")
        if not url:
            return "Error: url is required"
        if not self._client.configured:
            return "Error: transcript API key is not configured"

        transcript = await self._client.fetch(url=str(url))
        if transcript is None:
            return "No transcript available for this video. The video may not have subtitles."

        lines = [f"Language: {transcript.lang}", f"Segments: {len(transcript.segments)}", ""]
        lines += [f"[{format_timestamp(seg.offset)}] {seg.text}" for seg in transcript.segments]
        return "\n".join(lines)


def format_timestamp(offset_ms: int) -> str:
    minutes, seconds = divmod(offset_ms // 1000, 60)
    return f"{minutes}:{seconds:02d}"


class CiteHandler:
    def __init__(self, client: EvidenceServiceClient) -> None:
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> str:
        fields = {key: arguments.get(key) for key in _CITE_FIELDS}
        data = await self._client.create_evidence(fields=fields)
        user_seq = data.get("user_seq")
        evidence_id = data.get("evidence_id")
        if data.get("success") is False or (user_seq is None and evidence_id is None):
            raise ToolServiceError(
                service=_CITE_SERVICE,
                reason=str(data.get("message") or "no evidence record was created"),
            )

        if user_seq is None:
            result = f"Citation created (evidence_id={evidence_id})."
        else:
            result = (
                f"Citation created (user_seq={user_seq}, evidence_id={evidence_id})."
                f" Mark it in the answer with [@v:{user_seq}]."
            )
        if data.get("screenshot_url"):
            result += f"\nScreenshot preview: {data['screenshot_url']}"
        return result
