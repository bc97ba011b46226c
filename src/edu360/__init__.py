"""
EDU360 - School Safety and Wellness Backend

This package provides the backend services for the EDU360 platform:
mood check-ins, anonymous reports, panic alerts, counselor dashboards
and the escalation engine that turns incoming events into alerts.

IMPORTANT: Panic alerts and emergency reports are safety-critical.
Their escalation paths are unconditional and must stay that way.
"""

__version__ = "0.1.0"
__author__ = "EDU360 Engineering Team"
