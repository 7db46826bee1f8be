from typing import Dict, List, Tuple

from .templates import DecisionTemplate

ENGINE_VERSION = "0.2.0"

# Risk tolerance moves the outcome thresholds: cautious users need a higher
# score before a GO, bold users accept a lower one.
RISK_TOLERANCE_SHIFT = {
    "Low": 0.5,
    "Medium": 0.0,
    "High": -0.5,
}


def clamp_score(score: float) -> float:
    return max(0.0, min(10.0, float(score)))


def compute_weighted_score(template: DecisionTemplate, scores: Dict[str, float]) -> float:
    total = 0.0
    for dim in template.dimensions:
        total += clamp_score(scores.get(dim, 0.0)) * template.weights[dim]
    return round(total, 2)


def adjusted_thresholds(template: DecisionTemplate, risk_tolerance: str = "Medium") -> List[Tuple[float, str]]:
    shift = RISK_TOLERANCE_SHIFT.get(risk_tolerance, 0.0)
    out = []
    for min_score, label in template.thresholds:
        # the floor bucket stays at 0 so every score maps to an outcome
        out.append((min_score if min_score <= 0 else clamp_score(min_score + shift), label))
    return out


def determine_outcome(template: DecisionTemplate, final_score: float, risk_tolerance: str = "Medium") -> str:
    thresholds = adjusted_thresholds(template, risk_tolerance)
    for min_score, label in thresholds:
        if final_score >= min_score:
            return label
    return thresholds[-1][1]


def confidence_band(score: float) -> str:
    if score >= 8.0:
        return "HIGH"
    if score >= 6.0:
        return "MEDIUM"
    return "LOW"
