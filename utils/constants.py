APP_NAME = "Budget Categories"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "budget_categories.db"

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_REQUEST_TIMEOUT = 10  # seconds

INCOME = "INCOME"
EXPENSE = "EXPENSE"
CATEGORY_TYPES = [INCOME, EXPENSE]
CATEGORY_NAME_MAX_LENGTH = 100

DEFAULT_CATEGORY_COLOR = "#3b82f6"
QUICK_CATEGORY_COLORS = {
    INCOME:  "#10b981",
    EXPENSE: "#f43f5e",
}

# ── Category list ────────────────────────────────────────────────────────────
PAGE_SIZE = 10
FREQUENT_USAGE_THRESHOLD = 10

FILTER_TYPES = ["all", INCOME, EXPENSE]
FILTER_USAGES = ["all", "active", "unused", "frequent"]
FILTER_ORIGINS = ["all", "default", "custom"]
SORT_OPTIONS = ["newest", "oldest", "name", "name_desc", "usage", "type"]
SORT_LABELS = {
    "newest":    "Newest first",
    "oldest":    "Oldest first",
    "name":      "Name (A-Z)",
    "name_desc": "Name (Z-A)",
    "usage":     "Most used",
    "type":      "Type",
}

# ── Notifications ────────────────────────────────────────────────────────────
NOTIFICATIONS_KEY = "categoryNotifications"
READ_NOTIFICATION_IDS_KEY = "readNotificationIds"
NOTIFICATION_RETENTION_HOURS = 24
POPULAR_USAGE_THRESHOLD = 20
EXPENSE_IMBALANCE_RATIO = 3

MIN_REFRESH_SECONDS = 30
MAX_REFRESH_SECONDS = 15 * 60

NOTIFICATION_TYPES = ["info", "warning", "success", "error"]

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "success": "#4CAF50",
    "info":    "#2196F3",
}

SEVERITY_ICONS = {
    "error":   "✖",
    "warning": "⚠",
    "success": "✔",
    "info":    "ℹ",
}

TYPE_COLORS = {
    INCOME:  "#4CAF50",
    EXPENSE: "#F44336",
}
