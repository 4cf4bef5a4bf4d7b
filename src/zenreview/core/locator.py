"""Issue locator - place each flagged snippet at an exact range of the original text"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from zenreview.core.char_diff import DiffKind, DiffOp, left_text, right_text
from zenreview.models.issue import Issue, IssueLocation

logger = logging.getLogger(__name__)


@dataclass
class ChangeBlock:
    """A maximal run of delete/insert ops bounded by unchanged text"""
    orig_start: int
    orig_end: int
    corr_start: int
    corr_end: int
    deleted: str = ""
    inserted: str = ""


def change_blocks(ops: Sequence[DiffOp]) -> List[ChangeBlock]:
    """Reduce a diff to its change blocks, in document order"""
    blocks: List[ChangeBlock] = []
    block: Optional[ChangeBlock] = None
    o_idx = 0
    c_idx = 0

    for op in ops:
        if op.kind == DiffKind.EQUAL:
            if block is not None:
                blocks.append(block)
                block = None
            o_idx += len(op.text)
            c_idx += len(op.text)
            continue

        if block is None:
            block = ChangeBlock(o_idx, o_idx, c_idx, c_idx)
        if op.kind == DiffKind.DELETE:
            block.deleted += op.text
            o_idx += len(op.text)
            block.orig_end = o_idx
        else:
            block.inserted += op.text
            c_idx += len(op.text)
            block.corr_end = c_idx

    if block is not None:
        blocks.append(block)
    return blocks


def find_overlapping(text: str, snippet: str, span_start: int, span_end: int, floor: int = 0) -> int:
    """Find an occurrence of ``snippet`` in ``text`` that overlaps a span.

    For an empty span (a pure insertion point) the occurrence must contain
    the point, touching either end counts. Occurrences starting before
    ``floor`` are skipped.

    Returns:
        Start offset of the first such occurrence, or -1
    """
    if not snippet:
        return -1

    size = len(snippet)
    pos = text.find(snippet, max(floor, span_start - size, 0))
    while pos != -1 and pos <= span_end:
        if span_start == span_end:
            if pos <= span_start <= pos + size:
                return pos
        elif pos < span_end and pos + size > span_start:
            return pos
        pos = text.find(snippet, pos + 1)
    return -1


def _match_block(
    block: ChangeBlock,
    issue: Issue,
    original: str,
    corrected: str,
    floor: int,
    corr_floor: int,
) -> Optional[Tuple[int, int]]:
    """Try to place an issue inside one block.

    Returns:
        (start, end) in original coordinates, or None if the block does not match
    """
    snippet = issue.original

    if snippet:
        offset = block.deleted.find(snippet, max(floor - block.orig_start, 0))
        if offset != -1:
            start = block.orig_start + offset
            return start, start + len(snippet)

        pos = find_overlapping(original, snippet, block.orig_start, block.orig_end, floor)
        if pos != -1:
            return pos, pos + len(snippet)

    suggestion = issue.suggestion
    if suggestion:
        in_block = block.inserted.find(suggestion, max(corr_floor - block.corr_start, 0)) != -1
        if in_block or find_overlapping(corrected, suggestion, block.corr_start, block.corr_end, corr_floor) != -1:
            anchor = max(block.orig_start, floor)
            return anchor, anchor

    return None


def _place_suggestion(block: ChangeBlock, issue: Issue, corrected: str, corr_floor: int) -> Tuple[int, int]:
    """Range of the suggestion in corrected coordinates, (-1, -1) if not found"""
    suggestion = issue.suggestion
    if not suggestion:
        # Pure deletion: the suggestion is an empty range at the block
        anchor = max(block.corr_start, corr_floor)
        return anchor, anchor

    offset = block.inserted.find(suggestion, max(corr_floor - block.corr_start, 0))
    if offset != -1:
        start = block.corr_start + offset
        return start, start + len(suggestion)

    pos = find_overlapping(corrected, suggestion, block.corr_start, block.corr_end, corr_floor)
    if pos != -1:
        return pos, pos + len(suggestion)
    return -1, -1


def locate_issues(ops: Sequence[DiffOp], issues: Sequence[Issue]) -> List[IssueLocation]:
    """Map every issue to a character range of the original text.

    ``ops`` is the diff from original to corrected text. Blocks are scanned
    from a cursor that only moves forward, so repeated snippets are
    assigned in document order. Issues reported out of order may be
    placed at a later occurrence or left unlocated.

    Returns:
        One IssueLocation per issue, in issue order
    """
    original = left_text(ops)
    corrected = right_text(ops)
    blocks = change_blocks(ops)

    locations = []
    cursor = 0
    floor = 0
    corr_floor = 0

    for idx, issue in enumerate(issues):
        location = IssueLocation(issue_index=idx)

        for i in range(cursor, len(blocks)):
            block = blocks[i]
            match = _match_block(block, issue, original, corrected, floor, corr_floor)
            if match is None:
                continue

            corr_start, corr_end = _place_suggestion(block, issue, corrected, corr_floor)
            location = IssueLocation(
                issue_index=idx,
                start=match[0],
                end=match[1],
                corrected_start=corr_start,
                corrected_end=corr_end,
            )
            cursor = i
            floor = match[1]
            if corr_end != -1:
                corr_floor = corr_end
            break

        if not location.located:
            logger.debug("Could not locate issue %d: %s", idx, issue.display_name)
        locations.append(location)

    return locations
