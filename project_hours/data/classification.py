"""
Activity classification: activity-type labels → categories, work-item
descriptions → project stages.

Both classifiers are ordered rule lists evaluated first-match-wins over a
normalised label. They are total: every input yields exactly one result.
"""
import re
import unicodedata
from typing import Any, List, Pattern, Tuple

import pandas as pd

from project_hours.config import (
    CATEGORY_PRODUCTIVE,
    CATEGORY_UNPRODUCTIVE,
    CATEGORY_OUT_OF_SCOPE,
    CATEGORY_TRANSFER,
    CATEGORY_OTHER,
    UNMAPPED_STAGE,
)


# =============================================================================
# LABEL NORMALISATION
# =============================================================================

def normalise_label(value: Any) -> str:
    """Lower-case, accent-free, whitespace-collapsed text. Missing → ''."""
    if value is None:
        return ""
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    text = unicodedata.normalize("NFKD", str(value))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return " ".join(text.lower().split())


# =============================================================================
# ACTIVITY TYPE → CATEGORY
# =============================================================================
# "improdutiv" must be tested before "produtiv".

ACTIVITY_TYPE_RULES: List[Tuple[Pattern, str]] = [
    (re.compile(r"improdutiv|nao produtiv"), CATEGORY_UNPRODUCTIVE),
    (re.compile(r"fora d[oe] escopo|extra[- ]?escopo"), CATEGORY_OUT_OF_SCOPE),
    (re.compile(r"translado|traslado|deslocamento|viagem"), CATEGORY_TRANSFER),
    (re.compile(r"produtiv"), CATEGORY_PRODUCTIVE),
]


def classify_activity_type(raw_label: Any) -> str:
    """
    Map a raw activity-type label to its category.

    Unmatched or empty labels fall into CATEGORY_OTHER.
    """
    label = normalise_label(raw_label)
    if not label:
        return CATEGORY_OTHER
    for pattern, category in ACTIVITY_TYPE_RULES:
        if pattern.search(label):
            return category
    return CATEGORY_OTHER


def classify_activity_types(labels: pd.Series) -> pd.Series:
    """Vectorised classify_activity_type, index preserved."""
    return labels.astype(object).map(classify_activity_type).astype(object)


def is_unproductive(category: str) -> bool:
    """True only for the unproductive category (not out-of-scope, not transfer)."""
    return category == CATEGORY_UNPRODUCTIVE


# =============================================================================
# ACTIVITY DESCRIPTION → STAGE
# =============================================================================
# PTAF before TAF: "pre-taf" also contains the word "taf".

STAGE_RULES: List[Tuple[Pattern, str]] = [
    (re.compile(r"\bptaf\b|\bpre[- ]?taf\b"), "PTAF"),
    (re.compile(r"\btaf\b"), "TAF"),
    (re.compile(r"\btac\b"), "TAC"),
    (re.compile(r"parametriz|\bconfig"), "Parametrização"),
    (re.compile(r"tecnico (de )?campo|\bcampo\b|\bfield\b|\bvisit"), "Técnico Campo"),
]


def map_activity_to_stage(description: Any) -> str:
    """
    Map a free-text work-item description to a canonical stage.

    Descriptions matching no rule return UNMAPPED_STAGE and are dropped
    from stage-grouped output.
    """
    label = normalise_label(description)
    if not label:
        return UNMAPPED_STAGE
    for pattern, stage in STAGE_RULES:
        if pattern.search(label):
            return stage
    return UNMAPPED_STAGE


def map_activities_to_stages(descriptions: pd.Series) -> pd.Series:
    """Vectorised map_activity_to_stage, index preserved."""
    return descriptions.astype(object).map(map_activity_to_stage).astype(object)


def is_activity_in_stage(description: Any, stage: str) -> bool:
    return map_activity_to_stage(description) == stage
