"""
aichat: goal-directed agent loop with tool dispatch and human-in-the-loop queries
"""

__version__ = "0.1.0"
