"""
Job Extractor - PDF Job Description Autofill

Suggests job fields from an uploaded job description PDF. The heuristics are
a table of header patterns per field, applied over the document's trimmed,
non-blank lines:

1. Inline values: ``Job Title: Backend Engineer`` or ``Salary - 90,000``
2. Header-only line followed by the value on the next line
3. Whole-document scans for fields that rarely have a header (job type,
   remote, international eligibility, a currency-formatted salary, and a
   fallback title guess)

Sections (description, responsibilities, skills, ...) start at a header
line and run until the next line that looks like a header. Only fields
that were actually found are returned; the result is a suggestion for the
recruiter to review, never a complete job.
"""

import io
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

import pdfplumber

from app.core.exceptions import ExtractionError
from app.models.enums import JobType

logger = logging.getLogger(__name__)

DEFAULT_SKILL_WEIGHT = 50
INTRO_MAX_CHARS = 300
RAW_PREVIEW_MAX_CHARS = 2000


# ============== Value parsers ==============


def parse_date_iso(value: Optional[str]) -> Optional[str]:
    """Find a YYYY-MM-DD or YYYY/MM/DD date and return it as ISO text."""
    if not value:
        return None
    match = re.search(r"(\d{4})[/-](\d{2})[/-](\d{2})", value)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
    except ValueError:
        return None


def parse_integer(value: Optional[str]) -> Optional[int]:
    """First whole number in the text, ignoring thousands separators; ``80k`` is 80000."""
    if not value:
        return None
    compact = re.sub(r"[,\s]", "", value)
    match = re.search(r"(\d+)(?:\.\d+)?([kK])?", compact)
    if not match:
        return None
    number = int(match.group(1))
    if match.group(2):
        number *= 1000
    return number


def parse_duration_minutes(value: Optional[str]) -> Optional[int]:
    """``1 hour`` -> 60, ``45 minutes`` -> 45, ``1.5 hrs`` -> 90, ``1 hour 30 mins`` -> 90."""
    if not value:
        return None
    hours = re.search(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?)\b", value, re.IGNORECASE)
    minutes = re.search(r"(\d+(?:\.\d+)?)\s*(?:minutes?|mins?)\b", value, re.IGNORECASE)
    if not hours and not minutes:
        return None
    total = 0.0
    if hours:
        total += float(hours.group(1)) * 60
    if minutes:
        total += float(minutes.group(1))
    return round(total)


def detect_job_type(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    upper = text.upper()
    if re.search(r"FULL[\s-]?TIME", upper):
        return JobType.FULL_TIME.value
    if re.search(r"PART[\s-]?TIME", upper):
        return JobType.PART_TIME.value
    if re.search(r"INTERNSHIP|\bINTERN\b", upper):
        return JobType.INTERNSHIP.value
    if re.search(r"\bCONTRACT(?:OR)?\b", upper):
        return JobType.CONTRACT.value
    if re.search(r"\bTEMPORARY\b|\bTEMP\b", upper):
        return JobType.TEMPORARY.value
    if re.search(r"FREELANCE", upper):
        return JobType.FREELANCE.value
    return None


def detect_remote(text: str) -> Optional[bool]:
    lower = text.lower()
    if re.search(r"onsite\s*only|on-site\s*only", lower):
        return False
    if re.search(r"remote|hybrid|work\s*from\s*home", lower):
        return True
    return None


def detect_international(text: str) -> Optional[bool]:
    lower = text.lower()
    if re.search(r"international\s+applicants\s+(?:are\s+)?not\s+(?:eligible|accepted)", lower):
        return False
    if re.search(r"no\s+visa\s*sponsorship", lower):
        return False
    if re.search(r"international\s+applicants|visa\s*sponsorship", lower):
        return True
    return None


CURRENCY_PATTERN = re.compile(r"(?:[$£€]|USD|EUR|GBP|AUD)\s?\d[\d,]*(?:\.\d+)?\s*[kK]?\b")


def detect_salary(text: str) -> Optional[int]:
    """A currency-formatted amount anywhere in the document."""
    match = CURRENCY_PATTERN.search(text)
    if not match:
        return None
    return parse_integer(re.sub(r"^(?:[$£€]|USD|EUR|GBP|AUD)", "", match.group(0)))


# ============== Rule table ==============


@dataclass(frozen=True)
class FieldRule:
    """A scalar field found by header: inline value first, then the next line."""

    field: str
    headers: tuple[str, ...]
    parse: Optional[Callable[[str], Any]] = None
    next_line: bool = True


@dataclass(frozen=True)
class SectionRule:
    """A multi-line section: ``text`` keeps lines, ``list`` strips bullets, ``skills`` weights items."""

    field: str
    headers: tuple[str, ...]
    kind: str = "list"


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("title", (r"job\s*title", r"position\s*title", r"role\s*title")),
    FieldRule("company_name", (r"company(?:\s*name)?", r"employer")),
    FieldRule("location", (r"location", r"work\s*location")),
    FieldRule("job_type", (r"job\s*type", r"employment\s*type"), detect_job_type),
    FieldRule("salary", (r"salary", r"compensation", r"pay\b"), parse_integer),
    FieldRule("commencement_date", (r"start\s*date", r"commencement(?:\s*date)?"), parse_date_iso),
    FieldRule("interview_duration", (r"interview\s*duration",), parse_duration_minutes),
    FieldRule("hiring_start_date", (r"hiring\s*start(?:\s*date)?",), parse_date_iso, next_line=False),
    FieldRule("hiring_end_date", (r"hiring\s*end(?:\s*date)?",), parse_date_iso, next_line=False),
    FieldRule("application_start_date", (r"application\s*start(?:\s*date)?",), parse_date_iso, next_line=False),
    FieldRule("application_end_date", (r"application\s*end(?:\s*date)?",), parse_date_iso, next_line=False),
    FieldRule(
        "position_close_date",
        (r"closing\s*date", r"application\s*deadline", r"close\s*date"),
        parse_date_iso,
        next_line=False,
    ),
)

SECTION_RULES: tuple[SectionRule, ...] = (
    SectionRule("description", (r"description", r"job\s*description", r"overview", r"about\s+the\s+role"), "text"),
    SectionRule("responsibilities", (r"responsibilities", r"duties", r"what\s+you\s+will\s+do")),
    SectionRule("requirements", (r"requirements", r"what\s+you\s+bring")),
    SectionRule("qualifications", (r"qualifications",)),
    SectionRule("skills_soft", (r"soft\s*skills",), "skills"),
    SectionRule("skills_technical", (r"technical\s*skills", r"tech\s*skills"), "skills"),
    SectionRule("skills_cognitive", (r"cognitive\s*skills", r"analytical\s*skills"), "skills"),
)

# Section headers that end the previous section without being extracted themselves
OTHER_SECTION_HEADERS = (
    r"about\s+(?:us|the\s+company|the\s+team)",
    r"company\s+overview",
    r"benefits",
    r"perks",
    r"what\s+we\s+offer",
    r"why\s+join\s+us",
    r"how\s+to\s+apply",
    r"equal\s+opportunity.*",
    r"nice\s+to\s+have",
    r"skills",
)

# Multi-word all-caps line, e.g. "ABOUT US" or "WHAT WE OFFER"
UPPERCASE_HEADER = re.compile(r"^[A-Z][A-Z0-9&/]*(?: [A-Z0-9&/]+){1,5}:?$")
BULLET_PREFIX = re.compile(r"^(?:[-–•*▪●◦·]+|\(?\d{1,2}[.)]|\(?[a-z][.)])\s*")

# Lines that open with one of these are never a title guess
TITLE_BLACKLIST = re.compile(
    r"^(?:job\s*title|company|company\s*name|employer|location|job\s*type|employment\s*type|salary|"
    r"compensation|description|overview|responsibilities|requirements|qualifications)\b",
    re.IGNORECASE,
)


def _compile(headers: tuple[str, ...]) -> tuple[re.Pattern, re.Pattern]:
    alternatives = "|".join(headers)
    # A dash only separates when spaced, so "Company-sponsored" is not a header
    inline = re.compile(rf"^(?:{alternatives})(?:\s*:\s*|\s+[-–]\s+)(.+)$", re.IGNORECASE)
    header_only = re.compile(rf"^(?:{alternatives})(?:\s*:|\s+[-–])?\s*$", re.IGNORECASE)
    return inline, header_only


_FIELD_PATTERNS = {rule.field: _compile(rule.headers) for rule in FIELD_RULES}
_SECTION_PATTERNS = {rule.field: _compile(rule.headers) for rule in SECTION_RULES}
_BOUNDARY_PATTERNS = (
    list(_FIELD_PATTERNS.values()) + list(_SECTION_PATTERNS.values()) + [_compile(OTHER_SECTION_HEADERS)]
)


# ============== Line helpers ==============


def normalize_lines(text: str) -> list[str]:
    """Split into trimmed, non-blank lines (CR and NBSP normalised)."""
    lines = []
    for raw in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        line = raw.replace("\u00a0", " ").strip()
        if line:
            lines.append(line)
    return lines


def _inline_value(lines: list[str], pattern: re.Pattern) -> Optional[str]:
    for line in lines:
        match = pattern.match(line)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return None


def _next_line_value(lines: list[str], pattern: re.Pattern) -> Optional[str]:
    for index, line in enumerate(lines[:-1]):
        if pattern.match(line):
            return lines[index + 1]
    return None


def _is_known_header(line: str) -> bool:
    for inline, header_only in _BOUNDARY_PATTERNS:
        if inline.match(line) or header_only.match(line):
            return True
    return False


def _looks_like_header(line: str) -> bool:
    if line.endswith(":"):
        return True
    if UPPERCASE_HEADER.match(line):
        return True
    return _is_known_header(line)


def _section_lines(lines: list[str], patterns: tuple[re.Pattern, re.Pattern]) -> Optional[list[str]]:
    inline, header_only = patterns
    for index, line in enumerate(lines):
        inline_match = inline.match(line)
        if not inline_match and not header_only.match(line):
            continue
        body = []
        if inline_match and inline_match.group(1).strip():
            body.append(inline_match.group(1).strip())
        for following in lines[index + 1:]:
            if _looks_like_header(following):
                break
            body.append(following)
        return body or None
    return None


def parse_bullet_list(section: Optional[list[str]]) -> Optional[list[str]]:
    if not section:
        return None
    items = []
    for line in section:
        item = BULLET_PREFIX.sub("", line).strip()
        if item:
            items.append(item)
    return items or None


def parse_skills(section: Optional[list[str]]) -> Optional[list[dict]]:
    items = parse_bullet_list(section)
    if not items:
        return None
    names: list[str] = []
    for item in items:
        for name in re.split(r"\s*[,;]\s*", item):
            if name and name not in names:
                names.append(name)
    return [{"name": name, "weight": DEFAULT_SKILL_WEIGHT} for name in names] or None


def guess_title(lines: list[str]) -> Optional[str]:
    """First line of two or more words that is not a known header."""
    for line in lines:
        if TITLE_BLACKLIST.match(line) or len(line.split()) < 2:
            continue
        # "Backend Engineer | Acme" -> "Backend Engineer"
        return re.sub(r"\s+\|\s+.*$", "", line)
    return None


# ============== Extraction ==============


def _scalar_field(lines: list[str], rule: FieldRule) -> Any:
    inline, header_only = _FIELD_PATTERNS[rule.field]
    raw = _inline_value(lines, inline)
    if raw is None and rule.next_line:
        raw = _next_line_value(lines, header_only)
    if raw is None:
        return None
    return rule.parse(raw) if rule.parse else raw


def extract_job_fields_from_text(text: str) -> dict[str, Any]:
    """
    Suggest job fields from plain text.

    Args:
        text: Text of a job description

    Returns:
        Dictionary with only the fields that were found
    """
    lines = normalize_lines(text)
    full_text = "\n".join(lines)
    suggested: dict[str, Any] = {}

    for rule in FIELD_RULES:
        value = _scalar_field(lines, rule)
        if value is not None:
            suggested[rule.field] = value

    # Whole-document fallbacks
    if "title" not in suggested:
        title = guess_title(lines)
        if title:
            suggested["title"] = title
    if "job_type" not in suggested:
        job_type = detect_job_type(full_text)
        if job_type:
            suggested["job_type"] = job_type
    if "salary" not in suggested:
        salary = detect_salary(full_text)
        if salary is not None:
            suggested["salary"] = salary

    remote = detect_remote(full_text)
    if remote is not None:
        suggested["remote_flexible"] = remote
    international = detect_international(full_text)
    if international is not None:
        suggested["allow_international"] = international

    for rule in SECTION_RULES:
        section = _section_lines(lines, _SECTION_PATTERNS[rule.field])
        if rule.kind == "text":
            value = "\n".join(section) if section else None
        elif rule.kind == "skills":
            value = parse_skills(section)
        else:
            value = parse_bullet_list(section)
        if value:
            suggested[rule.field] = value

    description = suggested.get("description")
    if description:
        suggested["intro"] = description[:INTRO_MAX_CHARS].rstrip()

    if full_text:
        suggested["other_details"] = {"raw_text_preview": full_text[:RAW_PREVIEW_MAX_CHARS]}

    return suggested


def extract_text_from_pdf(document: bytes) -> str:
    """
    Extract all text from a PDF document.

    Raises:
        ExtractionError: the bytes are not a readable PDF
    """
    try:
        with pdfplumber.open(io.BytesIO(document)) as pdf:
            text_parts = []
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
    except Exception as exc:
        logger.warning("PDF text extraction failed: %s", exc)
        raise ExtractionError("Could not read the PDF document") from exc
    return "\n".join(text_parts)


def extract_job_fields(document: bytes) -> dict[str, Any]:
    """
    Suggest job fields from a PDF job description.

    Either the whole document is read or ExtractionError is raised; there
    are no partial results.
    """
    text = extract_text_from_pdf(document)
    if not text.strip():
        raise ExtractionError("The PDF document contains no extractable text")
    suggested = extract_job_fields_from_text(text)
    logger.info("Extracted %d job fields from PDF", len(suggested))
    return suggested
