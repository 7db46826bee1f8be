from typing import Dict, List, Tuple

from .scoring import clamp_score
from .templates import DecisionTemplate


def explain_decision(template: DecisionTemplate, scores: Dict[str, float], top: int = 2) -> Dict[str, object]:
    """
    Returns:
    - lowest_dimensions / highest_dimensions by raw score
    - top_positive_contributors / top_negative_contributors by weighted contribution
    """
    items: List[Tuple[str, float, float]] = []  # (dimension, score, weighted_contribution)

    for dim in template.dimensions:
        s = clamp_score(scores.get(dim, 0.0))
        items.append((dim, s, s * template.weights[dim]))

    by_score = sorted(items, key=lambda x: x[1])
    by_contrib = sorted(items, key=lambda x: x[2])

    return {
        "lowest_dimensions": [{"dimension": d, "score": s} for d, s, _ in by_score[:top]],
        "highest_dimensions": [{"dimension": d, "score": s} for d, s, _ in list(reversed(by_score))[:top]],
        "top_positive_contributors": [
            {"dimension": d, "weighted": round(c, 2)} for d, _, c in list(reversed(by_contrib))[:top]
        ],
        "top_negative_contributors": [{"dimension": d, "weighted": round(c, 2)} for d, _, c in by_contrib[:top]],
    }
