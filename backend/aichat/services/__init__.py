"""
Services module for aichat
"""

from .human_query import CANCELLED, TIMEOUT, HumanQuery, HumanQueryPhase, ask

__all__ = [
    'HumanQuery',
    'HumanQueryPhase',
    'ask',
    'TIMEOUT',
    'CANCELLED',
]
