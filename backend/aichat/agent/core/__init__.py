"""Core runtime for the agent loop.

Provider-agnostic primitives: the conversation data model, response collection,
tool dispatch, outcome classification and the transport contract.
"""
