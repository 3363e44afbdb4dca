"""Built-in interaction rules.

Generic rules are keyed by tags, so tagging a new item is enough for every
applicable rule to bind. Specific rules name individual items and are kept to a
minimum.
"""
from __future__ import annotations

from typing import List

from app.api.schemas.timing import InteractionRule
from app.services.timing import tags as T


def _separation(minutes: int, other_tag: str) -> dict:
    return {"type": "MIN_SEPARATION_MINUTES", "minutes": minutes, "other": {"type": "tag", "value": other_tag}}


def _warn(message: str) -> dict:
    return {"type": "WARN", "message": message}


GENERIC_RULES: List[InteractionRule] = [
    InteractionRule(
        rule_key="iron-vs-divalent-cation",
        applies_if_tags=[T.IRON],
        conflicts_with_tags=[T.DIVALENT_CATION],
        constraint=_separation(120, T.DIVALENT_CATION),
        confidence=80,
        rationale=(
            "Iron absorption is significantly reduced by divalent cations (calcium, magnesium, zinc). "
            "Separating by at least 2 hours may help reduce this effect."
        ),
        references=["Hallberg L. et al. Am J Clin Nutr. 1991;53(1):112-119"],
    ),
    InteractionRule(
        rule_key="thyroid-empty-stomach",
        applies_if_tags=[T.THYROID_HORMONE],
        constraint={"type": "EMPTY_STOMACH_PREFERRED", "buffer_before_food_min": 60},
        confidence=80,
        rationale=(
            "Thyroid hormones are best absorbed on an empty stomach. "
            "Many people take them 30-60 minutes before breakfast."
        ),
        references=["ATA Guidelines for Hypothyroidism, Thyroid 2014;24(12)"],
    ),
    InteractionRule(
        rule_key="thyroid-vs-iron-divalent",
        applies_if_tags=[T.THYROID_HORMONE],
        conflicts_with_tags=[T.IRON, T.DIVALENT_CATION],
        constraint=_separation(240, T.IRON),
        confidence=80,
        rationale=(
            "Iron and divalent cations can bind thyroid hormones and reduce absorption. "
            "A 4-hour separation is commonly recommended."
        ),
        references=["Campbell NR et al. Ann Intern Med. 1992;117(12):1010-1013"],
    ),
    InteractionRule(
        rule_key="tetracycline-vs-divalent-iron",
        applies_if_tags=[T.TETRACYCLINE],
        conflicts_with_tags=[T.DIVALENT_CATION, T.IRON],
        constraint=_separation(120, T.DIVALENT_CATION),
        confidence=80,
        rationale=(
            "Tetracyclines chelate with divalent cations (Ca, Mg, Zn, Fe), reducing absorption. "
            "Separate by at least 2 hours."
        ),
        references=["Leyden JJ. J Am Acad Dermatol. 1985;12(2 Pt 1):308-312"],
    ),
    InteractionRule(
        rule_key="fluoroquinolone-vs-divalent-iron",
        applies_if_tags=[T.FLUOROQUINOLONE],
        conflicts_with_tags=[T.DIVALENT_CATION, T.IRON],
        constraint=_separation(120, T.DIVALENT_CATION),
        confidence=80,
        rationale=(
            "Fluoroquinolones chelate with divalent cations, substantially reducing bioavailability. "
            "Separate by at least 2 hours."
        ),
        references=["Shiu J et al. Pharmacotherapy. 2016;36(11):1185-1196"],
    ),
    InteractionRule(
        rule_key="integrase-vs-divalent",
        applies_if_tags=[T.INTEGRASE_INHIBITOR],
        conflicts_with_tags=[T.DIVALENT_CATION],
        constraint=_separation(120, T.DIVALENT_CATION),
        confidence=75,
        rationale=(
            "Integrase inhibitors can chelate with divalent cations, potentially reducing drug levels. "
            "Separating by 2+ hours is often advised."
        ),
        references=["Song I et al. Antimicrob Agents Chemother. 2006;50(5):1859-1860"],
    ),
    InteractionRule(
        rule_key="sucralfate-binds-meds",
        applies_if_tags=[T.BINDING_AGENT],
        constraint=_separation(120, T.ANY_MED),
        confidence=75,
        rationale=(
            "Sucralfate can bind to other medications and reduce their absorption. "
            "A 2-hour separation from other medications is commonly recommended."
        ),
    ),
    InteractionRule(
        rule_key="ppi-before-meal",
        applies_if_tags=[T.ACID_REDUCER],
        constraint={"type": "EMPTY_STOMACH_PREFERRED", "buffer_before_food_min": 30},
        confidence=70,
        rationale="PPIs and H2 blockers are generally most effective when taken 30 minutes before a meal.",
    ),
    InteractionRule(
        rule_key="stimulant-avoid-late",
        applies_if_tags=[T.STIMULANT],
        constraint={"type": "AVOID_AFTER_TIME", "time": "14:00"},
        confidence=75,
        rationale=(
            "Stimulant medications taken later in the day may interfere with sleep. "
            "Many people prefer taking them before 2 PM."
        ),
    ),
    InteractionRule(
        rule_key="caffeine-plus-stimulant-warn",
        applies_if_tags=[T.CAFFEINE],
        conflicts_with_tags=[T.STIMULANT],
        constraint=_warn(
            "Caffeine combined with stimulant medications may amplify effects such as increased heart rate "
            "or restlessness. Many people moderate caffeine intake when taking stimulants."
        ),
        confidence=70,
        rationale="Both caffeine and stimulant medications increase sympathetic nervous system activity.",
    ),
]

SPECIFIC_RULES: List[InteractionRule] = [
    InteractionRule(
        rule_key="lisdexamfetamine-empty-stomach",
        applies_to=["lisdexamfetamine"],
        constraint={"type": "EMPTY_STOMACH_PREFERRED", "buffer_before_food_min": 60},
        confidence=70,
        rationale=(
            "Many people find lisdexamfetamine onset is more predictable when taken on an empty stomach, "
            "with food about 60 minutes later."
        ),
    ),
    InteractionRule(
        rule_key="bisphosphonate-upright-warn",
        applies_to=["alendronate"],
        constraint=_warn(
            "Remain upright (sitting or standing) for at least 30 minutes after taking this medication "
            "to reduce esophageal irritation risk."
        ),
        confidence=85,
        rationale="Bisphosphonates can cause esophageal irritation if the patient lies down after ingestion.",
        references=["FDA Fosamax prescribing information"],
    ),
    InteractionRule(
        rule_key="warfarin-consistency-warn",
        applies_to=["warfarin"],
        constraint=_warn(
            "Take warfarin at a consistent time each day. Sudden changes in diet "
            "(especially vitamin K-rich foods) may affect blood levels."
        ),
        confidence=80,
        rationale=(
            "Warfarin has a narrow therapeutic window; consistency in timing and diet helps maintain stable INR."
        ),
    ),
    InteractionRule(
        rule_key="lithium-consistency-warn",
        applies_to=["lithium"],
        constraint=_warn(
            "Take lithium at consistent times and stay well hydrated. "
            "Dehydration can affect blood lithium levels."
        ),
        confidence=80,
        rationale=(
            "Lithium has a narrow therapeutic window; consistent timing and hydration are important "
            "for stable serum levels."
        ),
    ),
    InteractionRule(
        rule_key="tacrolimus-consistency-warn",
        applies_to=["tacrolimus"],
        constraint=_warn(
            "Take at a consistent time each day, ideally either always with or always without food. "
            "Consistency helps maintain stable levels."
        ),
        confidence=80,
        rationale="Tacrolimus absorption varies with food; consistency minimizes variability.",
    ),
    InteractionRule(
        rule_key="cyclosporine-consistency-warn",
        applies_to=["cyclosporine"],
        constraint=_warn(
            "Take at a consistent time each day. "
            "Grapefruit and grapefruit juice can affect cyclosporine blood levels."
        ),
        confidence=80,
        rationale=(
            "Cyclosporine has a narrow therapeutic window and interacts with CYP3A4 substrates "
            "including grapefruit."
        ),
    ),
    InteractionRule(
        rule_key="digoxin-consistency-warn",
        applies_to=["digoxin"],
        constraint=_warn(
            "Take digoxin at a consistent time each day. "
            "High-fiber meals taken at the same time may reduce absorption."
        ),
        confidence=75,
        rationale=(
            "Digoxin has a narrow therapeutic window. High-fiber foods can bind digoxin and reduce bioavailability."
        ),
    ),
    InteractionRule(
        rule_key="prednisone-morning-warn",
        applies_to=["prednisone"],
        constraint=_warn(
            "Taking prednisone in the morning may help reduce insomnia side effects by aligning with "
            "the body's natural cortisol rhythm."
        ),
        confidence=75,
        rationale="Morning dosing mimics the natural cortisol diurnal rhythm and can reduce sleep disruption.",
    ),
]


def builtin_rules() -> List[InteractionRule]:
    return [*GENERIC_RULES, *SPECIFIC_RULES]
