from dataclasses import dataclass
from typing import Dict, List, Tuple

OUTCOME_GO = "GO"
OUTCOME_REVIEW = "REVIEW"
OUTCOME_NO_GO = "NO-GO"


@dataclass(frozen=True)
class DecisionTemplate:
    template_id: str
    template_name: str
    dimensions: List[str]
    weights: Dict[str, float]  # must sum to 1.0
    thresholds: List[Tuple[float, str]]  # (min_score_inclusive, outcome), highest first
    question: str = ""


_STANDARD_THRESHOLDS = [
    (7.5, OUTCOME_GO),
    (6.0, OUTCOME_REVIEW),
    (0.0, OUTCOME_NO_GO),
]

TEMPLATES: Dict[str, DecisionTemplate] = {
    "go_no_go": DecisionTemplate(
        template_id="go_no_go",
        template_name="Go / No-Go",
        question="Should we do this at all?",
        dimensions=["Value", "Feasibility", "Risk", "Alignment", "Urgency"],
        weights={
            "Value": 0.25,
            "Feasibility": 0.25,
            "Risk": 0.20,
            "Alignment": 0.20,
            "Urgency": 0.10,
        },
        thresholds=_STANDARD_THRESHOLDS,
    ),
    "career_move": DecisionTemplate(
        template_id="career_move",
        template_name="Career Move",
        question="Should I take this role / change direction?",
        dimensions=["Growth", "Compensation", "Stability", "Fit", "Work-Life Balance"],
        weights={
            "Growth": 0.30,
            "Compensation": 0.20,
            "Stability": 0.20,
            "Fit": 0.20,
            "Work-Life Balance": 0.10,
        },
        thresholds=_STANDARD_THRESHOLDS,
    ),
    "purchase": DecisionTemplate(
        template_id="purchase",
        template_name="Purchase / Investment",
        question="Is this worth the money right now?",
        dimensions=["Need", "Affordability", "Value for Money", "Reversibility", "Timing"],
        weights={
            "Need": 0.30,
            "Affordability": 0.25,
            "Value for Money": 0.20,
            "Reversibility": 0.15,
            "Timing": 0.10,
        },
        thresholds=_STANDARD_THRESHOLDS,
    ),
}

