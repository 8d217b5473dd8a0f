# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services, the outcome reporter and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "congregation_requests_total",
    "Total HTTP requests to congregation service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "congregation_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "congregation_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Outcome Metrics (updated by the outcome reporter only) ──
OUTCOMES_TOTAL = Counter(
    "congregation_outcomes_total",
    "Operation outcomes by severity and status",
    ["severity", "status"],
)

# ── Business Metrics (updated by service layer only) ──
CONGREGATIONS_CREATED = Counter(
    "congregation_created_total",
    "Total congregations created",
    ["source"],
)
CONGREGATION_REQUESTS = Counter(
    "congregation_intake_requests_total",
    "Congregation requests received",
    ["outcome"],
)
BACKUPS_SAVED = Counter(
    "congregation_backups_saved_total",
    "Total congregation backups saved",
)
MEMBERSHIP_CHANGES = Counter(
    "congregation_membership_changes_total",
    "Member additions and removals",
    ["action"],
)
POCKET_USERS_DELETED = Counter(
    "congregation_pocket_users_deleted_total",
    "Pocket users deleted on removal or after losing their last device or code",
    ["trigger"],
)
UPSTREAM_FETCHES = Counter(
    "congregation_upstream_fetches_total",
    "Calls to the directory and content upstreams",
    ["target", "status"],
)
EMAILS_SENT = Counter(
    "congregation_emails_sent_total",
    "Emails handed to the notification service",
    ["template"],
)
