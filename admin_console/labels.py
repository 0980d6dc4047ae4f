"""Display labels for backend enums."""

REPORT_STATUS_LABELS = {
    "PENDING": "Pending",
    "RESOLVED": "Resolved",
    "REJECTED": "Rejected",
}

REPORT_REASON_LABELS = {
    "SPAM": "Spam / advertising",
    "INAPPROPRIATE": "Inappropriate content",
    "FAKE_REVIEW": "Fake review",
    "NO_RECEIPT": "Missing receipt",
    "HARASSMENT": "Abuse / harassment",
    "COPYRIGHT": "Copyright violation",
    "OTHER": "Other",
}

CHAT_REPORT_REASON_LABELS = {
    "HARASSMENT": "Abuse / harassment",
    "SPAM": "Spam / advertising",
    "SEXUAL_HARASSMENT": "Sexual harassment",
    "FRAUD": "Fraud",
    "INAPPROPRIATE": "Inappropriate content",
    "OTHER": "Other",
}

GATHERING_STATUS_LABELS = {
    "RECRUITING": "Recruiting",
    "CONFIRMED": "Confirmed",
    "IN_PROGRESS": "In progress",
    "COMPLETED": "Completed",
    "CANCELLED": "Cancelled",
}


def label(mapping: dict, value) -> str:
    """Label for an enum member or raw value, falling back to the value itself."""
    key = getattr(value, "value", value)
    return mapping.get(key, str(key))
