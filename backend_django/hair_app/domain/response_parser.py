"""Turn the vision model's markdown answer into an :class:`Analysis`.

The model is asked to follow a fixed template of bold section headers
(``**AI Description**``, ``**Hair Care Routine**`` ...). The text is split at
every known header, and each section body is handed to its own rule. Rules
are independent of each other and of header order; a section that is
missing simply leaves its fields at their defaults.

``parse_analysis`` never raises. If anything unexpected happens the caller
gets a minimal analysis holding the raw text and neutral metrics.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .analysis import Analysis, HaircareRoutine, Metrics, RoutineSchedule, UserAnswers
from .scoring import score_metrics

logger = logging.getLogger(__name__)

FALLBACK_METRIC = 50

DESCRIPTION = 'ai description'
ROUTINE = 'hair care routine'
SCHEDULE = 'daily/weekly hair care schedule'
PRODUCTS = 'product suggestions'
TIPS = 'ai bonus tips'

_HEADER_RE = re.compile(
    r'(?:^[ \t]*#{1,6}[ \t]*)?\*\*\s*(AI Description|Hair Care Routine|Daily/Weekly Hair Care Schedule|'
    r'Product Suggestions|AI Bonus Tips)\s*:?\s*\*\*',
    re.IGNORECASE | re.MULTILINE,
)

# "- item", "* item", "• item", "3. item"
_LIST_MARKER_RE = re.compile(r'^\s*(?:[-*•]\s+|\d+\.\s+)')

_ROUTINE_LABELS = ('cleansing', 'conditioning', 'treatments', 'styling')
# The match takes in a leading ordinal and bold markers so they do not
# trail the previous subsection
_ROUTINE_LABEL_RE = re.compile(
    r'(?:\*\*[ \t]*)?(?:\b[1-4]\.[ \t]*)?(?:\*\*[ \t]*)?'
    r'\b(?P<label>Cleansing|Conditioning|Treatments|Styling)[ \t]*:[ \t]*(?:\*\*)?',
)
_ROUTINE_ORDINAL_RE = re.compile(
    r'^[ \t]*(?:\*\*)?[ \t]*(?P<num>[1-4])\.[ \t]*(?:\*\*)?',
    re.MULTILINE,
)

_DAILY_RE = re.compile(r'(?:\*\*)?\s*DAILY ROUTINE\s*:?\s*(?:\*\*)?', re.IGNORECASE)
_WEEKLY_RE = re.compile(r'(?:\*\*)?\s*WEEKLY ROUTINE\s*:?\s*(?:\*\*)?', re.IGNORECASE)
_MORNING_RE = re.compile(r'^\s*Morning\s*:', re.IGNORECASE | re.MULTILINE)
_EVENING_RE = re.compile(r'^\s*Evening\s*:', re.IGNORECASE | re.MULTILINE)
_WASH_DAYS_RE = re.compile(r'^\s*Wash Days\s*(?:\((?P<freq>[^)]*)\))?[^:\n]*:', re.IGNORECASE | re.MULTILINE)
_WEEKLY_TREATMENTS_RE = re.compile(r'^\s*Weekly Treatments\s*:', re.IGNORECASE | re.MULTILINE)
_TREATMENT_ITEM_RE = re.compile(
    r'^\s*(?:[-*•]\s*)?(?P<label>Deep Conditioning|Scalp Care|Special Treatments)\s*:\s*(?P<text>.*)$',
    re.IGNORECASE | re.MULTILINE,
)

_EMPHASIS_RE = re.compile(r'\*{1,2}|__')
_HEADING_RE = re.compile(r'^\s{0,3}#{1,6}\s*', re.MULTILINE)


def split_sections(text: str) -> Dict[str, str]:
    """Map each known header (lower-cased) to the text up to the next known header.

    When a header is repeated, the first occurrence wins.
    """
    matches = list(_HEADER_RE.finditer(text))
    sections: Dict[str, str] = {}
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        key = m.group(1).lower()
        if key not in sections:
            sections[key] = text[m.end():end]
    return sections


def extract_list(section: str) -> List[str]:
    """Bullet or numbered lines with the marker removed.

    Without any marked line the whole trimmed section becomes one item.
    """
    items = []
    for line in section.splitlines():
        if _LIST_MARKER_RE.match(line):
            item = _LIST_MARKER_RE.sub('', line, count=1).strip()
            if item:
                items.append(item)
    if items:
        return items
    whole = section.strip()
    return [whole] if whole else []


def _bullets(block: str) -> List[str]:
    return [
        _LIST_MARKER_RE.sub('', line, count=1).strip()
        for line in block.splitlines()
        if _LIST_MARKER_RE.match(line) and _LIST_MARKER_RE.sub('', line, count=1).strip()
    ]


def _between(text: str, start: re.Pattern, stops: List[re.Pattern]) -> Optional[str]:
    m = start.search(text)
    if not m:
        return None
    end = len(text)
    for stop in stops:
        s = stop.search(text, m.end())
        if s and s.start() < end:
            end = s.start()
    return text[m.end():end]


def parse_routine(section: str) -> HaircareRoutine:
    """Split the routine section into its four labelled subsections.

    A subsection starts at a label (``1. **Cleansing:**``, ``**1. Cleansing:**``,
    ``Cleansing:``) anywhere in the text, or at a bare ``1.`` opening a line.
    Bare ordinals only count when no label exists, so numbered sub-steps
    inside a labelled subsection are left alone.
    """
    marks = [(m, m.group('label').lower()) for m in _ROUTINE_LABEL_RE.finditer(section)]
    if not marks:
        marks = [
            (m, _ROUTINE_LABELS[int(m.group('num')) - 1])
            for m in _ROUTINE_ORDINAL_RE.finditer(section)
        ]

    found: Dict[str, str] = {}
    for i, (m, label) in enumerate(marks):
        end = marks[i + 1][0].start() if i + 1 < len(marks) else len(section)
        if label not in found:
            found[label] = section[m.end():end].strip()
    return HaircareRoutine(**{k: found.get(k, '') for k in _ROUTINE_LABELS})


def parse_schedule(section: str) -> RoutineSchedule:
    schedule = RoutineSchedule()
    daily = _between(section, _DAILY_RE, [_WEEKLY_RE])
    if daily is not None:
        morning = _between(daily, _MORNING_RE, [_EVENING_RE])
        evening = _between(daily, _EVENING_RE, [_MORNING_RE])
        schedule.morning = _bullets(morning or '')
        schedule.evening = _bullets(evening or '')

    weekly = _between(section, _WEEKLY_RE, [_DAILY_RE])
    if weekly is not None:
        wash = _WASH_DAYS_RE.search(weekly)
        if wash:
            schedule.wash_frequency = (wash.group('freq') or '').strip().strip('"')
            stop = _WEEKLY_TREATMENTS_RE.search(weekly, wash.end())
            schedule.wash_steps = _bullets(weekly[wash.end():stop.start() if stop else len(weekly)])
        treatments = _between(weekly, _WEEKLY_TREATMENTS_RE, [_WASH_DAYS_RE])
        for m in _TREATMENT_ITEM_RE.finditer(treatments or ''):
            attr = m.group('label').lower().replace(' ', '_')
            setattr(schedule, attr, m.group('text').strip())
    return schedule


def _set_description(analysis: Analysis, body: str) -> None:
    analysis.detailed_analysis = body.strip()


def _set_routine(analysis: Analysis, body: str) -> None:
    analysis.haircare_routine = parse_routine(body)


def _set_schedule(analysis: Analysis, body: str) -> None:
    analysis.routine_schedule = parse_schedule(body)


def _set_products(analysis: Analysis, body: str) -> None:
    analysis.product_suggestions = extract_list(body)


def _set_tips(analysis: Analysis, body: str) -> None:
    analysis.ai_bonus_tips = extract_list(body)


@dataclass(frozen=True)
class SectionRule:
    header: str
    apply: Callable[[Analysis, str], None]


RULES = (
    SectionRule(DESCRIPTION, _set_description),
    SectionRule(ROUTINE, _set_routine),
    SectionRule(SCHEDULE, _set_schedule),
    SectionRule(PRODUCTS, _set_products),
    SectionRule(TIPS, _set_tips),
)


def parse_analysis(text: Optional[str], answers: Optional[UserAnswers] = None) -> Analysis:
    text = text or ''
    answers = answers or UserAnswers()
    try:
        analysis = Analysis(raw_analysis=text)
        sections = split_sections(text)
        for rule in RULES:
            body = sections.get(rule.header)
            if body is not None:
                rule.apply(analysis, body)
        analysis.metrics = score_metrics(analysis.detailed_analysis, answers)
        return analysis
    except Exception:
        logger.exception("Failed to parse analysis text, using fallback")
        return fallback_analysis(text)


def fallback_analysis(text: str) -> Analysis:
    return Analysis(
        raw_analysis=text,
        detailed_analysis=text,
        metrics=Metrics(
            moisture=FALLBACK_METRIC,
            strength=FALLBACK_METRIC,
            elasticity=FALLBACK_METRIC,
            scalp_health=FALLBACK_METRIC,
        ),
    )


def strip_emphasis(text: str) -> str:
    """Remove markdown emphasis and heading markers. Display only."""
    if not text:
        return ''
    return _EMPHASIS_RE.sub('', _HEADING_RE.sub('', text)).strip()
