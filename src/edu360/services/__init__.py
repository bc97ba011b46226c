"""
EDU360 Service Layer

Escalation policy, realtime broadcasting, sentiment analysis, support
chat and dashboard queries. Everything here is callable without HTTP.
"""
