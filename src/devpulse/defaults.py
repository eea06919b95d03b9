"""Single source of truth for shared thresholds, weights and defaults.

Every magic number that appears in more than one module is defined here.
Constants that are truly local to one module (a regex used by a single
heuristic, a narrative template) stay in that module.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------

DEFAULT_MODULE = "setup"
TRIVIAL_MODULES = frozenset({"setup", "other"})
UNKNOWN_MODULE = "unknown"

# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

UNKNOWN_MEMBER_ID = "unknown"
DEFAULT_ROLE = "Developer"
MEMBER_COLORS: tuple[str, ...] = (
    "#3b82f6", "#10b981", "#8b5cf6", "#f59e0b",
    "#ef4444", "#06b6d4", "#f97316", "#ec4899",
    "#84cc16", "#14b8a6", "#a855f7", "#f43f5e",
)

# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------

DEFAULT_BRANCH = "main"
BRANCH_STALE_DAYS = 7
BRANCH_ABANDONED_DAYS = 14
BRANCH_DIVERGED_BEHIND = 5

# ---------------------------------------------------------------------------
# Activity thresholds (days)
# ---------------------------------------------------------------------------

PR_STAGNANT_DAYS = 3
PR_CRITICAL_AGE_DAYS = 7
MEMBER_IDLE_DAYS = 2
MEMBER_INACTIVE_DAYS = 5
INACTIVITY_GRACE_DAYS = 2         # members without commits are not flagged before this
NO_ACTIVITY_DAYS = 999

# ---------------------------------------------------------------------------
# Delivery risk weights
# ---------------------------------------------------------------------------

W_STAGNANT_PR = 15
W_INACTIVE_MEMBER = 18
W_UNREVIEWED_PR = 8

# ---------------------------------------------------------------------------
# Integration risk weights
# ---------------------------------------------------------------------------

W_DIVERGED_BRANCH = 12
W_SINGLE_OWNER = 40
W_CROSS_MODULE = 3
CROSS_MODULE_CAP = 20
SINGLE_OWNER_SHARE = 0.8

# ---------------------------------------------------------------------------
# Stability risk weights
# ---------------------------------------------------------------------------

W_VAGUE_RATIO = 50
W_LARGE_RATIO = 25
W_REVERT = 10
W_NEAR_DEADLINE = 5
LARGE_COMMIT_FILES = 5
NEAR_DEADLINE_HOURS = 24

# ---------------------------------------------------------------------------
# Composite health weights
# ---------------------------------------------------------------------------

HEALTH_WEIGHTS: dict[str, float] = {
    "deliveryRisk": 0.45,
    "integrationRisk": 0.30,
    "stabilityRisk": 0.25,
}
HEALTH_ON_TRACK = 70

# ---------------------------------------------------------------------------
# Module integration table
# ---------------------------------------------------------------------------

INTEGRATION_RISK_MIN = 5
INTEGRATION_RISK_MAX = 95
INTEGRATION_SHARED_BONUS = 20
INTEGRATION_STATUS_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (70, "isolated"),
    (50, "at-risk"),
    (20, "partial"),
)
MAX_DEPENDENCIES = 4
SCENARIO_RISKY_MODULE = 40
BUS_FACTOR_CRITICAL_THRESHOLD = 85

# ---------------------------------------------------------------------------
# Simulation scenarios
# ---------------------------------------------------------------------------

MAX_STALE_PR_SCENARIOS = 2
MAX_INACTIVE_SCENARIOS = 2
SCENARIO_DELAY_HOURS = 48

# ---------------------------------------------------------------------------
# GitHub sync
# ---------------------------------------------------------------------------

GITHUB_API_URL = "https://api.github.com"
GITHUB_PAGE_SIZE = 100
GITHUB_COMMIT_PAGES = 3
GITHUB_DETAIL_LIMIT = 30
GITHUB_DETAIL_CONCURRENCY = 5
GITHUB_MAX_MEMBERS = 10
GITHUB_TIMEOUT_SECONDS = 15.0
DEADLINE_HOURS = 48

# ---------------------------------------------------------------------------
# Advisor
# ---------------------------------------------------------------------------

LLM_MAX_CALLS_PER_HOUR = 30
LLM_CONFIDENCE = 95
