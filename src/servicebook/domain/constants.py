"""Business constants for the workshop ledger."""

from decimal import Decimal

# Share of positive daily gross profit reserved for marketing
MARKETING_BUDGET_SHARE = Decimal("0.20")

# Average distance driven per month, used to turn a distance interval into days
AVG_MONTHLY_USAGE = 3750
DAYS_PER_MONTH = 30

# Predictions at most this many days away are "due"
DUE_WINDOW_DAYS = 7

DEFAULT_SERVICE_INTERVAL = 5000
DEFAULT_INTERVAL_SETTING = "followup.default_interval"

CUSTOMER_CODE_PREFIX = "CUST"
EMPLOYEE_CODE_PREFIX = "EMP"
CODE_WIDTH = 4

# Amounts are stored with this many decimal places
AMOUNT_PLACES = 2

# Ordered keyword -> interval table. Matching is by substring in table
# order and the first hit wins.
DEFAULT_SERVICE_INTERVALS: tuple[tuple[str, int], ...] = (
    ("oil change", 5000),
    ("oil", 5000),
    ("engine oil", 5000),
    ("filter change", 10000),
    ("air filter", 15000),
    ("brake service", 20000),
    ("brakes", 20000),
    ("brake pads", 25000),
    ("brake", 20000),
    ("tire rotation", 10000),
    ("tires", 40000),
    ("transmission", 50000),
    ("coolant", 40000),
    ("spark plugs", 50000),
    ("timing belt", 100000),
    ("battery", 50000),
    ("ac service", 20000),
    ("ac", 20000),
    ("general service", 10000),
    ("service", 10000),
    ("tuning", 15000),
    ("tune up", 15000),
)

# Reminder messages sent to customers about their next service
BUSINESS_NAME = "ZB Autocare"
BUSINESS_CONTACT = "+92-3331385571"
COUNTRY_DIAL_CODE = "92"
REMINDER_LINK_BASE = "https://wa.me/"
