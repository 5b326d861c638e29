from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class UserAnswers:
    """Questionnaire answers submitted alongside the photos."""
    hair_problem: str = ''
    allergies: str = ''
    medication: str = ''
    dyed: str = ''
    wash_frequency: str = ''
    additional_concerns: str = ''
    product_names: List[str] = field(default_factory=list)

    @property
    def is_dyed(self) -> bool:
        return self.dyed.strip().lower() == 'yes'


@dataclass
class Metrics:
    moisture: int = 0
    strength: int = 0
    elasticity: int = 0
    scalp_health: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'moisture': self.moisture,
            'strength': self.strength,
            'elasticity': self.elasticity,
            'scalpHealth': self.scalp_health,
        }


@dataclass
class HaircareRoutine:
    cleansing: str = ''
    conditioning: str = ''
    treatments: str = ''
    styling: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {
            'cleansing': self.cleansing,
            'conditioning': self.conditioning,
            'treatments': self.treatments,
            'styling': self.styling,
        }


@dataclass
class RoutineSchedule:
    """Daily and weekly schedule extracted from the schedule section."""
    morning: List[str] = field(default_factory=list)
    evening: List[str] = field(default_factory=list)
    wash_frequency: str = ''
    wash_steps: List[str] = field(default_factory=list)
    deep_conditioning: str = ''
    scalp_care: str = ''
    special_treatments: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dailyRoutine': {
                'morning': list(self.morning),
                'evening': list(self.evening),
            },
            'weeklyRoutine': {
                'washDays': {
                    'frequency': self.wash_frequency,
                    'steps': list(self.wash_steps),
                },
                'treatments': {
                    'deepConditioning': self.deep_conditioning,
                    'scalpCare': self.scalp_care,
                    'specialTreatments': self.special_treatments,
                },
            },
        }


@dataclass
class Analysis:
    """Structured result of one hair analysis.

    Every field carries a safe default so consumers never have to check
    for missing keys. ``to_dict`` produces the camelCase JSON shape stored on
    submissions and returned to the frontend.
    """
    raw_analysis: str = ''
    detailed_analysis: str = ''
    metrics: Metrics = field(default_factory=Metrics)
    haircare_routine: HaircareRoutine = field(default_factory=HaircareRoutine)
    routine_schedule: RoutineSchedule = field(default_factory=RoutineSchedule)
    product_suggestions: List[str] = field(default_factory=list)
    ai_bonus_tips: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rawAnalysis': self.raw_analysis,
            'detailedAnalysis': self.detailed_analysis,
            'metrics': self.metrics.to_dict(),
            'haircareRoutine': self.haircare_routine.to_dict(),
            'routineSchedule': self.routine_schedule.to_dict(),
            'productSuggestions': list(self.product_suggestions),
            'aiBonusTips': list(self.ai_bonus_tips),
        }
