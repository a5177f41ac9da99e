# complaintdesk/core/constants.py
from __future__ import annotations

"""
Core application constants.

Values that are fixed by the complaint lifecycle rather than by
deployment configuration.
"""

# API prefixes
API_PREFIX: str = "/api"

# Common HTTP header names
HEADER_REQUEST_ID: str = "X-Request-ID"

# Attachment file extensions accepted alongside the MIME type allow-list
ATTACHMENT_EXTENSIONS: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

# Audit note templates written by assignment and deadline changes
ASSIGNMENT_NOTE_TEMPLATE: str = "Assigned to admin. Note: {note}"
DEADLINE_NOTE_TEMPLATE: str = "Deadline set to {deadline}"
DEADLINE_FORMAT: str = "%b %d, %Y, %I:%M %p"

UNCATEGORIZED_LABEL: str = "Uncategorized"
