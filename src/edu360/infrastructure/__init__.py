"""
EDU360 Infrastructure Layer

Event store backends, database access, LLM providers, metrics and
error tracking.
"""
