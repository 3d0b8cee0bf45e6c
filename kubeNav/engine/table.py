# kubeNav/engine/table.py
"""
Generic listing pipeline shared by every resource-listing command:
fetch result -> handles -> filter -> extract -> sort -> render -> row cache.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Pattern, Sequence, Tuple

from tabulate import tabulate

from kubeNav.constants import HEADER_AGE, HEADER_NAME, HEADER_NAMESPACE, ROW_NUMBER_HEADER
from kubeNav.core.errors import InvalidFilterError
from kubeNav.core.kobj import ObjectHandle
from kubeNav.core.output import OutputWriter
from kubeNav.engine.cell import EMPTY_CELL, Cell, ExtractorMap

logger = logging.getLogger(__name__)

Row = Tuple[ObjectHandle, List[Cell]]


def compile_filter(expression: Optional[str]) -> Optional[Pattern]:
    """
    Compiles a name filter. Called before any request is issued.

    The filter is case-sensitive and matches anywhere in the name (``re.search``);
    anchor it with ``^``/``$`` for whole-name matches. An absent or empty expression
    means "no filter".

    Raises:
        InvalidFilterError: if the expression is not a valid regular expression.
    """
    if not expression:
        return None
    try:
        return re.compile(expression)
    except re.error as e:
        raise InvalidFilterError(expression, str(e))


def default_cell(header: str, handle: ObjectHandle, item: Any, now: datetime) -> Cell:
    """Columns every kind can fill from its handle or metadata."""
    if header == HEADER_NAME:
        return Cell.of(handle.name)
    if header == HEADER_NAMESPACE:
        return Cell.of(handle.namespace)
    if header == HEADER_AGE:
        meta = getattr(item, "metadata", None)
        return Cell.age(getattr(meta, "creation_timestamp", None), now)
    return EMPTY_CELL


def build_rows(items: Iterable[Any], headers: Sequence[str], extractors: Optional[ExtractorMap],
               regex: Optional[Pattern], to_handle: Callable[[Any], ObjectHandle],
               now: Optional[datetime] = None) -> List[Row]:
    now = now or datetime.now(timezone.utc)
    extractors = extractors or {}
    rows: List[Row] = []
    for item in items:
        handle = to_handle(item)
        if regex is not None and not regex.search(handle.name):
            continue
        cells = []
        for header in headers:
            extractor = extractors.get(header)
            cell = extractor(item) if extractor is not None else None
            if cell is None:
                cell = default_cell(header, handle, item, now) if extractor is None else EMPTY_CELL
            cells.append(cell)
        rows.append((handle, cells))
    return rows


def _sort_key(cell: Cell):
    # Typed keys sort before (and never against) text-only cells.
    if cell.sort_key is not None:
        return (0, cell.sort_key)
    return (1, cell.text)


def sort_rows(rows: List[Row], headers: Sequence[str], sort: Optional[str], reverse: bool) -> List[Row]:
    """
    Stable sort on column ``sort`` (case-insensitive header match). ``reverse`` flips
    the final order.
    """
    ordered = list(rows)
    if sort:
        lowered = [h.lower() for h in headers]
        if sort.lower() in lowered:
            idx = lowered.index(sort.lower())
            ordered = sorted(ordered, key=lambda row: _sort_key(row[1][idx]))
        else:
            logger.debug(f"Sort column '{sort}' not in {list(headers)}, keeping API order")
    if reverse:
        ordered.reverse()
    return ordered


def format_table(headers: Sequence[str], rows: List[Row], table_format: str = "simple") -> str:
    table_data = [[str(i)] + [c.text for c in cells] for i, (_, cells) in enumerate(rows, start=1)]
    return tabulate(table_data, headers=[ROW_NUMBER_HEADER] + list(headers), tablefmt=table_format,
                    disable_numparse=True)


def list_items(list_outcome: Any) -> List[Any]:
    """Items of a list response (``V1PodList`` and friends) or of a plain sequence."""
    items = getattr(list_outcome, "items", list_outcome)
    return list(items or [])


def render_list(env, writer: OutputWriter, headers: Sequence[str], list_outcome: Any,
                extractors: Optional[ExtractorMap], regex: Optional[Pattern], sort: Optional[str],
                reverse: bool, to_handle: Callable[[Any], ObjectHandle]) -> bool:
    """
    Renders a listing and makes its rows addressable by index.

    Args:
        env: Environment whose row cache is replaced
        writer: Output sink of the current command
        headers: Column order of the table
        list_outcome: List response, or None if the request failed (already reported)
        extractors: Column label -> extractor for this kind
        regex: Compiled name filter, or None
        sort: Column to sort on, or None for API order
        reverse: Flip the final order
        to_handle: Maps an item to its ObjectHandle

    Returns:
        True if a table was rendered and the row cache replaced, False on a failed outcome.
    """
    if list_outcome is None:
        return False

    rows = build_rows(list_items(list_outcome), headers, extractors, regex, to_handle)
    rows = sort_rows(rows, headers, sort, reverse)
    writer.write(format_table(headers, rows, env.settings.table_format))
    env.set_row_cache([handle for handle, _ in rows])
    return True
