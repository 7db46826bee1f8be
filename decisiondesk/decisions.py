from typing import Any, Dict, List, Optional

from .errors import DecisionInputError, ProfileInputError
from .explain import explain_decision
from .playbook import build_playbook
from .scoring import (
    ENGINE_VERSION,
    clamp_score,
    compute_weighted_score,
    confidence_band,
    determine_outcome,
)
from .storage import new_id, now_iso
from .templates import TEMPLATES, DecisionTemplate

SCHEMA_VERSION = 1
RISK_TOLERANCES = ["Low", "Medium", "High"]


def parse_lines(text: Optional[str]) -> List[str]:
    return [x.strip() for x in (text or "").splitlines() if x.strip()]


def build_profile(name: str, role: str = "", focus: str = "", risk_tolerance: str = "Medium") -> Dict[str, Any]:
    name = (name or "").strip()
    if not name:
        raise ProfileInputError("Please tell us your name to finish setup.")
    if risk_tolerance not in RISK_TOLERANCES:
        raise ProfileInputError(f"Unknown risk tolerance: {risk_tolerance}")
    return {
        "name": name,
        "role": (role or "").strip(),
        "focus": (focus or "").strip(),
        "risk_tolerance": risk_tolerance,
        "created_at_utc": now_iso(),
    }


def stress_test(
    template: DecisionTemplate,
    final_score: float,
    best_delta: float,
    expected_delta: float,
    worst_delta: float,
    risk_tolerance: str = "Medium",
) -> Dict[str, Any]:
    results = {}
    for name, delta in (("best", best_delta), ("expected", expected_delta), ("worst", worst_delta)):
        score = round(clamp_score(final_score + float(delta)), 2)
        results[name] = {
            "score": score,
            "outcome": determine_outcome(template, score, risk_tolerance),
            "confidence": confidence_band(score),
        }
    return {
        "best_delta": float(best_delta),
        "expected_delta": float(expected_delta),
        "worst_delta": float(worst_delta),
        "results": results,
        "spread": round(results["best"]["score"] - results["worst"]["score"], 2),
    }


def build_decision(
    template_id: str,
    title: str,
    context: str = "",
    scores: Optional[Dict[str, float]] = None,
    assumptions_text: str = "",
    risks_text: str = "",
    best_delta: float = 1.0,
    expected_delta: float = 0.0,
    worst_delta: float = -2.0,
    profile: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Evaluate the decision form input into a complete decision record.

    Raises DecisionInputError when the input cannot be evaluated. The record
    is not persisted here; saving is the result screen's job.
    """
    title = (title or "").strip()
    if not title:
        raise DecisionInputError("Give the decision a title before analyzing it.")
    template = TEMPLATES.get(template_id)
    if template is None:
        raise DecisionInputError(f"Unknown decision template: {template_id}")
    if float(worst_delta) > float(best_delta):
        raise DecisionInputError("The worst case cannot be better than the best case.")

    scores = {dim: clamp_score((scores or {}).get(dim, 5.0)) for dim in template.dimensions}
    risk_tolerance = (profile or {}).get("risk_tolerance", "Medium")

    final_score = compute_weighted_score(template, scores)
    outcome = determine_outcome(template, final_score, risk_tolerance)
    explanation = explain_decision(template, scores)

    return {
        "decision_id": new_id(),
        "timestamp_utc": now_iso(),
        "schema_version": SCHEMA_VERSION,
        "engine_version": ENGINE_VERSION,
        "template_id": template.template_id,
        "template_name": template.template_name,
        "title": title,
        "context": (context or "").strip(),
        "assumptions": parse_lines(assumptions_text),
        "risks": parse_lines(risks_text),
        "scores": scores,
        "weights": dict(template.weights),
        "final_score": final_score,
        "outcome": outcome,
        "confidence": confidence_band(final_score),
        "risk_tolerance": risk_tolerance,
        "explanation": explanation,
        "playbook": build_playbook(scores, outcome, explanation),
        "scenario_stress_test": stress_test(
            template, final_score, best_delta, expected_delta, worst_delta, risk_tolerance
        ),
    }
