"""Virtual files inside one snippet source, and ``@import`` expansion.

A snippet can carry extra named files between marker comments::

    // @snippet-file card
    export const Card = () => <div />
    // @snippet-file-end

Any ``// @import card`` line in the main source (or in another file) is replaced
by the file's lines when the source is expanded. The expansion keeps a
run-length encoded map from expanded lines back to their origin.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from snippet_engine.core.cache import SingleSlotMemo
from snippet_engine.models import FileScanResult, LineMapSegment, ParsedFiles

FILE_START = re.compile(r"^\s*//\s*@snippet-file\s+(.+?)\s*$")
FILE_END = re.compile(r"^\s*//\s*@snippet-file-end\s*$")
IMPORT_LINE = re.compile(r"^\s*//\s*@import\s+(.+?)\s*$")
_FILE_DIRECTIVE = re.compile(r"^\s*//\s*@snippet-file(\s|$)")
_AUTO_IMPORT_HEADER = re.compile(r"^\s*//\s*Auto-managed imports", re.IGNORECASE)
_IMPORT_PREFIX = re.compile(r"^\s*//\s*@import\s+")
_LINE_BREAK = re.compile(r"\r?\n")

MAX_IMPORT_DEPTH = 20


def split_lines(value: str) -> list[str]:
    return _LINE_BREAK.split(value) if value else []


def _count_lines(value: str) -> int:
    return len(value.split("\n")) if value else 0


def _import_name(line: str) -> str | None:
    match = IMPORT_LINE.match(line)
    if match is None:
        return None
    return match.group(1).strip() or None


class _FileSplit:
    def __init__(self) -> None:
        self.main_lines: list[str] = []
        self.files: dict[str, str] = {}
        self.file_order: list[str] = []
        self.has_file_blocks = False

    def close_block(self, name: str, lines: list[str]) -> None:
        block = "\n".join(lines).rstrip()
        existing = self.files.get(name)
        if existing and block:
            self.files[name] = f"{existing}\n{block}"
        elif existing is None or block:
            self.files[name] = block


def _split_files(source: str) -> _FileSplit:
    result = _FileSplit()
    current: str | None = None
    current_lines: list[str] = []

    for line in split_lines(source):
        if current is None:
            start = FILE_START.match(line)
            if start is None:
                result.main_lines.append(line)
                continue
            name = start.group(1).strip()
            if not name:
                continue
            current = name
            current_lines = []
            result.has_file_blocks = True
            if name not in result.file_order:
                result.file_order.append(name)
            continue

        if FILE_END.match(line):
            result.close_block(current, current_lines)
            current = None
            current_lines = []
            continue

        current_lines.append(line)

    # unterminated block runs to the end of the source
    if current is not None:
        result.close_block(current, current_lines)

    return result


def parse_files(source: str) -> ParsedFiles:
    """Split a source into its main block and named virtual files."""
    split = _split_files(source)
    return ParsedFiles(
        main_source="\n".join(split.main_lines).rstrip(),
        files=split.files,
        has_file_blocks=split.has_file_blocks,
    )


def _append_segment_line(
    segments: list[LineMapSegment],
    file_name: str | None,
    expanded_line: int,
    original_line: int,
) -> None:
    last = segments[-1] if segments else None
    if (
        last is not None
        and last.file_name == file_name
        and last.expanded_start_line + last.line_count == expanded_line
        and last.original_start_line + last.line_count == original_line
    ):
        last.line_count += 1
        return
    segments.append(
        LineMapSegment(
            file_name=file_name,
            expanded_start_line=expanded_line,
            original_start_line=original_line,
            line_count=1,
        )
    )


def _trim_segments(segments: list[LineMapSegment], line_count: int) -> list[LineMapSegment]:
    trimmed: list[LineMapSegment] = []
    for segment in segments:
        if segment.expanded_start_line > line_count:
            break
        end = segment.expanded_start_line + segment.line_count - 1
        if end > line_count:
            segment.line_count = line_count - segment.expanded_start_line + 1
            trimmed.append(segment)
            break
        trimmed.append(segment)
    return trimmed


def _expand(main_source: str, files: dict[str, str]) -> tuple[str, list[LineMapSegment]]:
    expanded_lines: list[str] = []
    segments: list[LineMapSegment] = []
    # (file name, remaining lines, next original line number, depth)
    stack: list[tuple[str | None, list[str], int, int]] = [(None, split_lines(main_source), 0, 0)]
    active: list[str] = []

    while stack:
        file_name, lines, index, depth = stack.pop()
        if index >= len(lines):
            if active and file_name is not None and active[-1] == file_name:
                active.pop()
            continue
        line = lines[index]
        stack.append((file_name, lines, index + 1, depth))

        name = _import_name(line)
        if name is not None and name in files and depth < MAX_IMPORT_DEPTH and name not in active:
            active.append(name)
            stack.append((name, split_lines(files[name]), 0, depth + 1))
            continue

        expanded_lines.append(line)
        _append_segment_line(segments, file_name, len(expanded_lines), index + 1)

    expanded_source = "\n".join(expanded_lines).rstrip()
    return expanded_source, _trim_segments(segments, _count_lines(expanded_source))


def build_line_map_segments(main_source: str, files: dict[str, str]) -> list[LineMapSegment]:
    return _expand(main_source, files)[1]


def _scan(source: str) -> FileScanResult:
    if not source:
        return FileScanResult(main_source="")
    split = _split_files(source)
    main_source = "\n".join(split.main_lines).rstrip()
    expanded_source, segments = _expand(main_source, split.files)
    return FileScanResult(
        main_source=main_source,
        files=split.files,
        has_file_blocks=split.has_file_blocks,
        expanded_source=expanded_source,
        line_map_segments=segments,
        file_order=split.file_order,
    )


_scan_memo: SingleSlotMemo[str, FileScanResult] = SingleSlotMemo()


def scan(source: str) -> FileScanResult:
    """Split ``source`` into virtual files and expand its ``@import`` lines.

    The result for the most recent source string is memoized; callers must treat
    it as read-only.
    """
    return _scan_memo.get_or_compute(source, _scan)


def expand_source(source: str) -> str:
    return scan(source).expanded_source


def serialize_files(main_source: str, files: dict[str, str]) -> str:
    """Inverse of :func:`parse_files`: emit the main source followed by sorted file blocks."""
    output = main_source.rstrip()
    entries = sorted((name, content) for name, content in files.items() if name.strip())
    if entries:
        if output.strip():
            output += "\n\n"
        for name, content in entries:
            output += f"// @snippet-file {name}\n"
            output += f"{(content or '').rstrip()}\n"
            output += "// @snippet-file-end\n\n"
    return output.rstrip()


def _collect_imports(sources: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in sources:
        for line in split_lines(value):
            name = _import_name(line)
            if name is not None and name not in seen:
                seen.append(name)
    return seen


def extract_imports(source: str) -> list[str]:
    """Return the names referenced by ``@import`` lines, in first-seen order."""
    parsed = parse_files(source)
    return _collect_imports([parsed.main_source, *parsed.files.values()])


def strip_auto_import_block(source: str) -> str:
    """Drop file markers and the leading auto-managed ``@import`` header."""
    lines = [
        line
        for line in split_lines(source)
        if not _FILE_DIRECTIVE.match(line) and not FILE_END.match(line)
    ]
    index = 0
    saw_import = False
    while index < len(lines):
        line = lines[index]
        if _AUTO_IMPORT_HEADER.match(line) or _IMPORT_PREFIX.match(line):
            saw_import = True
            index += 1
            continue
        if saw_import and not line.strip():
            index += 1
            continue
        break
    return "\n".join(lines[index:])


def reset_scan_cache() -> None:
    _scan_memo.reset()
