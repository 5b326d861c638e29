"""Keyword-based hair metric scoring.

Each metric starts from a baseline and is nudged by keywords found in the
AI description and in the user's questionnaire answers. Within one family
of keywords only the first matching tier applies. Results are clamped to
[METRIC_MIN, METRIC_MAX].
This module must not depend on frameworks or adapters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .analysis import Metrics, UserAnswers

METRIC_MIN = 10
METRIC_MAX = 100

Tier = Tuple[Tuple[str, ...], int]


@dataclass(frozen=True)
class MetricRule:
	baseline: int
	description: Sequence[Tier] = ()
	concern: Sequence[Tier] = ()
	wash: Sequence[Tier] = ()
	dyed: int = 0


MOISTURE = MetricRule(
	baseline=50,
	description=(
		(('very dry', 'extremely dry'), -30),
		(('dry',), -15),
		(('well moisturized', 'well-moisturized'), 30),
		(('moisturized', 'hydrated'), 20),
	),
	concern=(
		(('dry',), -15),
		(('oily',), 10),
	),
	wash=(
		(('daily', 'every day'), -10),
	),
	dyed=-10,
)

STRENGTH = MetricRule(
	baseline=60,
	description=(
		(('very brittle', 'extremely brittle', 'very weak'), -30),
		(('brittle', 'weak'), -20),
		(('very strong', 'extremely strong'), 30),
		(('strong',), 15),
	),
	concern=(
		(('breakage', 'brittle'), -20),
		(('split ends',), -15),
	),
	dyed=-15,
)

ELASTICITY = MetricRule(
	baseline=60,
	description=(
		(('no elasticity', 'lacks elasticity'), -30),
		(('low elasticity', 'poor elasticity'), -20),
		(('excellent elasticity', 'great elasticity'), 30),
		(('good elasticity',), 15),
	),
	concern=(
		(('breakage', 'brittle'), -15),
	),
	dyed=-10,
)

SCALP_HEALTH = MetricRule(
	baseline=70,
	description=(
		(('very dry scalp', 'flaky scalp', 'dandruff'), -30),
		(('dry scalp', 'itchy scalp'), -20),
		(('healthy scalp', 'clean scalp'), 15),
	),
	concern=(
		(('dandruff', 'flaky'), -25),
		(('itchy', 'irritated'), -20),
		(('oily scalp',), -15),
	),
	wash=(
		(('once a week', 'weekly'), -10),
		(('daily',), 5),
	),
)


def clamp(value: int) -> int:
	return max(METRIC_MIN, min(METRIC_MAX, value))


def _first_delta(text: str, tiers: Sequence[Tier]) -> int:
	if not text:
		return 0
	for keywords, delta in tiers:
		if any(k in text for k in keywords):
			return delta
	return 0


def score(rule: MetricRule, description: str, answers: UserAnswers) -> int:
	value = rule.baseline
	value += _first_delta(description.lower(), rule.description)
	value += _first_delta(answers.hair_problem.lower(), rule.concern)
	value += _first_delta(answers.wash_frequency.lower(), rule.wash)
	if answers.is_dyed:
		value += rule.dyed
	return clamp(value)


def score_metrics(description: str, answers: UserAnswers | None = None) -> Metrics:
	"""Compute all four metrics. An empty description still applies the
	questionnaire adjustments."""
	answers = answers or UserAnswers()
	description = description or ''
	return Metrics(
		moisture=score(MOISTURE, description, answers),
		strength=score(STRENGTH, description, answers),
		elasticity=score(ELASTICITY, description, answers),
		scalp_health=score(SCALP_HEALTH, description, answers),
	)
