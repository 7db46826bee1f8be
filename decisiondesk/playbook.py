from typing import Any, Dict, List

from .templates import OUTCOME_GO

GENERIC_ACTIONS = [
    "Write down what a good score on this dimension would look like.",
    "Collect one piece of evidence that would change your score.",
    "Run a small, cheap test before committing.",
]

ACTIONS_BY_DIMENSION = {
    "Value": [
        "Put a number on the benefit (money, time, or stress saved).",
        "Ask two people affected by the outcome what they expect.",
    ],
    "Feasibility": [
        "Break the work into milestones and estimate each one.",
        "List the skills or tools you are missing.",
    ],
    "Risk": [
        "List the three worst things that could happen and how likely each is.",
        "Run a pre-mortem: assume it failed and write down why.",
    ],
    "Urgency": [
        "Write down what concretely happens if you wait a month.",
        "Set a decision date and stick to it.",
    ],
    "Growth": [
        "Ask someone already in the role what they learned in year one.",
        "Map which skills this move adds that you do not have today.",
    ],
    "Compensation": [
        "Compare the full package, not just base pay.",
        "Check the market rate for the role from two sources.",
    ],
    "Stability": [
        "Look at the team's and company's last 12 months.",
        "Decide how many months of runway you need if it goes wrong.",
    ],
    "Affordability": [
        "Check the purchase against next quarter's budget, not today's balance.",
        "Price in running costs, not only the sticker price.",
    ],
    "Reversibility": [
        "Find out the return, cancellation, or exit terms in writing.",
        "Estimate the cost of undoing this in six months.",
    ],
}


def build_playbook(scores: Dict[str, float], outcome: str, explanation: Dict[str, Any]) -> Dict[str, Any]:
    lows = explanation.get("lowest_dimensions") or []
    if lows:
        focus = [x["dimension"] for x in lows][:3]
    else:
        focus = sorted(scores.keys(), key=lambda d: scores[d])[:3]

    actions: List[Dict[str, Any]] = []
    for d in focus:
        actions.append({
            "dimension": d,
            "score": scores.get(d),
            "recommended_actions": ACTIONS_BY_DIMENSION.get(d, GENERIC_ACTIONS),
        })

    flags = [f"Very low score in '{d}' ({s})." for d, s in scores.items() if s <= 3]
    if outcome != OUTCOME_GO:
        flags.append("Outcome is not a clear GO: fix the focus areas and re-score before committing.")

    return {
        "summary": f"Top focus areas: {', '.join(focus)}" if focus else "No focus areas.",
        "focus_dimensions": focus,
        "actions": actions,
        "flags": flags,
        "checklist": [
            "Write the assumptions down explicitly",
            "Agree what success looks like",
            "Run a quick validation test",
            "Re-score after fixes",
        ],
    }
