"""
Router
======

Classifies free-text requests and turns them into tasks.

This module provides:
- Router: small talk, clarification or task creation for one request
- IntentClassifier: explicit tag -> heuristics -> model classification
- heuristics: the keyword rules behind the first two stages
"""

from switchboard.router.classifier import IntentClassifier, extract_first_json_object
from switchboard.router.router import RouteOutcome, Router

__all__ = [
    "IntentClassifier",
    "RouteOutcome",
    "Router",
    "extract_first_json_object",
]
