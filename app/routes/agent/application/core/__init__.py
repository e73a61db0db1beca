"""
Core module for prompt agent application logic.

- Intent classification: natural language prompt to a structured Decision
- Keyword rules: ordered fallback table used when no AI backend answers
- Params: per-action parameter validation before execution
"""

from .intent_classifier import IntentClassifier, parse_decision
from .keyword_rules import KEYWORD_RULES, match_keyword_rules
from .params import prepare_params

__all__ = [
    "IntentClassifier",
    "parse_decision",
    "KEYWORD_RULES",
    "match_keyword_rules",
    "prepare_params",
]
