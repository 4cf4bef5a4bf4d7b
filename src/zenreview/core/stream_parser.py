"""Streaming result parser - recover a proofreading result from partial model output"""

import json
import logging
import re
from typing import List, Optional, Tuple

from pydantic import ValidationError

from zenreview.models.issue import Issue, IssueCategory, PartialResult, ProofreadResult

logger = logging.getLogger(__name__)

RECOVERED_SUMMARY = "partial result recovered"
RECOVERED_SCORE = 80

_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```\s*$")

# A JSON string body: plain characters or escape pairs, stopping at the
# closing quote, a dangling backslash, or the end of input.
_STRING_BODY = r'"((?:[^"\\]|\\.)*)'

_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|u[0-9a-fA-F]{0,3}\Z|.)", re.DOTALL)
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
}

_ISSUES_START = re.compile(r'"issues"\s*:\s*\[')
_SCORE = re.compile(r'"score"\s*:\s*(-?\d+(?:\.\d+)?)')

_CATEGORIES = {c.value for c in IssueCategory}


class MalformedResultError(Exception):
    """Raised when no corrected text can be recovered from model output"""

    pass


def strip_code_fence(raw: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any"""
    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", raw, count=1), count=1)


def decode_json_string(body: str) -> str:
    """Decode the escapes of a (possibly truncated) JSON string body.

    A truncated ``\\uXX`` escape at the very end is dropped.
    """

    def replace(match: re.Match) -> str:
        token = match.group(1)
        if token[0] == "u" and len(token) == 5:
            return chr(int(token[1:], 16))
        if token[0] == "u" and match.end() == len(match.string):
            return ""
        return _SIMPLE_ESCAPES.get(token, token)

    decoded = _ESCAPE.sub(replace, body)
    # Recombine surrogate pairs produced by \ud83d\ude00 style escapes
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def extract_string_field(content: str, key: str) -> Optional[str]:
    """Extract a string field, tolerating a missing closing quote.

    Looks for: "<key>": "...  (up to the next unescaped quote or end of input)

    Returns:
        The decoded value, or None if the key has not appeared yet
    """
    match = re.search(rf'"{re.escape(key)}"\s*:\s*' + _STRING_BODY, content, re.DOTALL)
    if match is None:
        return None
    return decode_json_string(match.group(1))


def extract_score(content: str) -> Optional[float]:
    """Extract the numeric score, taking whatever digits have arrived"""
    match = _SCORE.search(content)
    if match is None:
        return None
    return float(match.group(1))


def scan_flat_objects(content: str) -> Tuple[List[str], bool]:
    """Collect complete, one-level ``{...}`` objects from an array body.

    Braces inside strings are ignored. Objects containing nested objects or
    arrays are skipped. Scanning stops at the array's closing bracket.

    Returns:
        Tuple of (object_strings, array_closed)
    """
    objects = []
    depth = 0
    start = -1
    nested = False
    in_string = False
    escaped = False

    for i, ch in enumerate(content):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in "{[" and depth > 0:
            depth += 1
            nested = True
        elif ch == "{":
            depth = 1
            start = i
            nested = False
        elif ch in "}]" and depth > 1:
            depth -= 1
        elif ch == "}" and depth == 1:
            depth = 0
            if nested:
                logger.debug("Skipping nested object at offset %d", start)
            else:
                objects.append(content[start:i + 1])
        elif ch == "]" and depth == 0:
            return objects, True

    return objects, False


def _issue_from_object(text: str) -> Optional[Issue]:
    """Build an issue from one object string, or None if unusable"""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Discarding unparseable issue object: %r", text[:80])
        return None

    if not isinstance(data, dict):
        return None
    category = data.get("category", data.get("type"))
    if not data.get("original") or not data.get("suggestion") or category not in _CATEGORIES:
        logger.debug("Discarding incomplete issue object: %r", text[:80])
        return None

    try:
        return Issue.model_validate(data)
    except ValidationError:
        return None


def extract_issues(content: str) -> List[Issue]:
    """Extract every complete issue object from the issues array.

    Works while the array is still open; a trailing incomplete object is
    left for a later call.

    Returns:
        The issues found so far (empty until the first one completes)
    """
    match = _ISSUES_START.search(content)
    if match is None:
        return []

    objects, _ = scan_flat_objects(content[match.end():])
    issues = []
    for obj in objects:
        issue = _issue_from_object(obj)
        if issue is not None:
            issue.index = len(issues)
            issues.append(issue)
    return issues


def parse_partial(raw: str) -> PartialResult:
    """Recover a best-effort result from accumulated stream output.

    Safe to call on every chunk with ever-growing input; never raises.
    Each field stays None until it can be recovered.
    """
    content = strip_code_fence(raw)
    return PartialResult(
        corrected_text=extract_string_field(content, "correctedText"),
        issues=extract_issues(content),
        summary=extract_string_field(content, "summary"),
        score=extract_score(content),
    )


def _strict_parse(content: str) -> ProofreadResult:
    """Parse a complete JSON record, cutting any text around the outer braces"""
    first = content.find("{")
    last = content.rfind("}")
    if first != -1 and last > first:
        content = content[first:last + 1]
    return ProofreadResult.model_validate(json.loads(content))


def parse_final(raw: str) -> ProofreadResult:
    """Parse the completed stream output.

    Tries a strict parse first and falls back to tolerant extraction.

    Raises:
        MalformedResultError: If no corrected text can be recovered
    """
    content = strip_code_fence(raw)

    try:
        return _strict_parse(content)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Final result is not valid JSON, recovering: %s", e)

    partial = parse_partial(raw)
    if not partial.corrected_text:
        raise MalformedResultError(
            "Model output did not contain a usable correctedText field"
        )

    return ProofreadResult(
        corrected_text=partial.corrected_text,
        issues=partial.issues or [],
        summary=partial.summary or RECOVERED_SUMMARY,
        score=partial.score if partial.score is not None else RECOVERED_SCORE,
    )


def enforce_whitelist(result: ProofreadResult, whitelist: List[str]) -> ProofreadResult:
    """Drop issues on whitelisted words and revert their corrections.

    The first occurrence of each dropped suggestion in the corrected text
    is put back to the original wording.
    """
    if not whitelist:
        return result

    words = {w.strip().lower() for w in whitelist if w.strip()}
    corrected = result.corrected_text
    kept = []

    for issue in result.issues:
        if issue.original.strip().lower() in words:
            if issue.suggestion and issue.suggestion in corrected:
                corrected = corrected.replace(issue.suggestion, issue.original, 1)
            logger.info("Dropped whitelisted issue: %s", issue.display_name)
            continue
        kept.append(issue.model_copy())

    return ProofreadResult(
        corrected_text=corrected,
        issues=kept,
        summary=result.summary,
        score=result.score,
    )
