"""DecisionDesk: explainable decision support with local storage."""
