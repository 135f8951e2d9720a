from .client import AdvisorClient, EMPTY_ANSWER_MESSAGE, FAILURE_MESSAGE, MISSING_KEY_MESSAGE
from .summary import build_inventory_summary, build_prompt, summarize_inventory

__all__ = [
    "AdvisorClient",
    "EMPTY_ANSWER_MESSAGE",
    "FAILURE_MESSAGE",
    "MISSING_KEY_MESSAGE",
    "build_inventory_summary",
    "build_prompt",
    "summarize_inventory",
]
