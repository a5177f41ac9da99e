"""
Complaint Desk: complaint tracking service.

Students file complaints; category admins and super admins triage,
assign, annotate and resolve them.
"""

__version__ = "0.1.0"
