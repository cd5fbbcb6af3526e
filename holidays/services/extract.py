"""holidays/services/extract.py

A small rule engine that pulls dated academic events out of calendar text.

Each `ExtractionRule` is a regex with a named `date` group. For every match
the date is parsed (numeric formats first, then Turkish/English month names),
sanity-checked against the sync year, and the text around the match decides
what kind of event it is.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime

from ..enums import HolidaySource, HolidayType, StaffScope

logger = logging.getLogger(__name__)

MONTHS = {
    "ocak": 1, "şubat": 2, "mart": 3, "nisan": 4, "mayıs": 5, "haziran": 6,
    "temmuz": 7, "ağustos": 8, "eylül": 9, "ekim": 10, "kasım": 11, "aralık": 12,
    # ASCII spellings: "KASIM".lower() is "kasim"
    "subat": 2, "mayis": 5, "agustos": 8, "eylul": 9, "kasim": 11, "aralik": 12,
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
}
MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))

NUMERIC_FORMATS = ("%d.%m.%Y", "%d/%m/%Y", "%d-%m-%Y", "%Y-%m-%d")

CONTEXT_RADIUS = 100


@dataclass(frozen=True)
class ExtractionRule:
    name: str
    pattern: str  # may use {year}, {next_year}, {months}; must define (?P<date>...)

    def compile(self, year: int) -> re.Pattern:
        src = (
            self.pattern
            .replace("{year}", str(year))
            .replace("{next_year}", str(year + 1))
            .replace("{months}", MONTH_ALTERNATION)
        )
        return re.compile(src, re.IGNORECASE)


DEFAULT_RULES = (
    # "29 Ekim 2024", "1 September 2025"
    ExtractionRule(
        "day_month_name",
        r"(?P<date>\d{1,2}[\s./\-]+(?:{months})[\s./\-]+(?:{year}|{next_year}))",
    ),
    # "Güz Tatili ... 20.01.2025"
    ExtractionRule(
        "semester_break",
        r"(?:Güz|Fall|Bahar|Spring)\s+(?:Tatili|Break|Semester|Dönem)[^\n]*?"
        r"(?P<date>\d{1,2}[\s./\-]+\w+[\s./\-]+\d{4})",
    ),
    # "Final Sınav Dönemi ... 6 Ocak 2025"
    ExtractionRule(
        "exam_period",
        r"(?:Sınav|Exam|Final|Midterm)\s+(?:Dönemi|Period)[^\n]*?"
        r"(?P<date>\d{1,2}[\s./\-]+\w+[\s./\-]+\d{4})",
    ),
)


def _fold(text: str) -> str:
    # "İ".lower() is "i" plus a combining dot
    return (text or "").replace("İ", "i").lower()


def parse_date(text: str, year: int) -> date | None:
    """
    Parse a date fragment. Numeric formats must land in `year` or `year + 1`;
    month-name dates use the year in the fragment (which must be one of those
    two) or `year` when there is none.
    """
    text = (text or "").strip()
    candidate = re.sub(r"\s+", "", text)
    for fmt in NUMERIC_FORMATS:
        try:
            parsed = datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
        if year <= parsed.year <= year + 1:
            return parsed

    lowered = _fold(text)
    for month_name, month in sorted(MONTHS.items(), key=lambda kv: len(kv[0]), reverse=True):
        if month_name not in lowered:
            continue
        day_match = re.search(r"\d{1,2}", lowered)
        if not day_match:
            return None
        year_match = re.search(r"\d{4}", lowered)
        y = year
        if year_match:
            y = int(year_match.group())
            if y not in (year, year + 1):
                return None
        try:
            return date(y, month, int(day_match.group()))
        except ValueError:
            return None
    return None


def context_around(text: str, start: int, radius: int = CONTEXT_RADIUS) -> str:
    lo = max(0, start - radius)
    return text[lo:start + radius]


# (keywords, type, label, description, staff scope, blocks appointments)
CLASSIFICATION = (
    (("tatil", "break"), HolidayType.SEMESTER_BREAK, "Academic Break", "Academic break period", StaffScope.ACADEMIC, True),
    (("sınav", "sinav", "exam"), HolidayType.EXAM_PERIOD, "Examination Period", "Academic examination period", StaffScope.ACADEMIC, False),
    (("kayıt", "kayit", "registration"), HolidayType.REGISTRATION_PERIOD, "Registration Period", "Student registration period", StaffScope.ACADEMIC, False),
)
DEFAULT_CLASS = (HolidayType.UNIVERSITY_CLOSURE, "Academic Event", "Academic calendar event", StaffScope.ALL, True)


def classify(context: str) -> dict:
    lowered = _fold(context)
    for keywords, kind, label, description, scope, blocks in CLASSIFICATION:
        if any(k in lowered for k in keywords):
            break
    else:
        kind, label, description, scope, blocks = DEFAULT_CLASS
    return {
        "type": kind,
        "label": label,
        "description": description,
        "affects_staff_type": scope,
        "blocks_appointments": blocks,
    }


def extract_holidays(text: str, year: int, rules=DEFAULT_RULES) -> list[dict]:
    """Run every rule over `text`; returns holiday dicts ready for upsert."""
    found: dict[tuple[str, date], dict] = {}
    if not text:
        return []

    for rule in rules:
        for m in rule.compile(year).finditer(text):
            day = parse_date(m.group("date"), year)
            if day is None:
                logger.debug("Rule %s: could not parse %r", rule.name, m.group("date"))
                continue
            info = classify(context_around(text, m.start()))
            # one record per event and day; the date keeps same-kind events apart
            name = f"{info['label']} {day.isoformat()}"
            if (name, day) in found:
                continue
            found[(name, day)] = {
                "name": name,
                "description": info["description"],
                "start_date": day,
                "end_date": day,
                "type": info["type"],
                "affects_staff_type": info["affects_staff_type"],
                "blocks_appointments": info["blocks_appointments"],
                "academic_year": year,
                "source": HolidaySource.PDF_SYNC,
            }
    return list(found.values())
