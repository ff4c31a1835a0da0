"""Follow-up scheduler: predicts each customer's next service."""

import logging
import re
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence
from urllib.parse import quote

from servicebook.database.base import Database
from servicebook.domain.constants import (
    AVG_MONTHLY_USAGE,
    BUSINESS_CONTACT,
    BUSINESS_NAME,
    COUNTRY_DIAL_CODE,
    DAYS_PER_MONTH,
    DEFAULT_INTERVAL_SETTING,
    DEFAULT_SERVICE_INTERVAL,
    DEFAULT_SERVICE_INTERVALS,
    DUE_WINDOW_DAYS,
    REMINDER_LINK_BASE,
)
from servicebook.domain.customer import normalize_key
from servicebook.domain.entities import (
    FollowUpPrediction,
    FollowUpStats,
    FollowUpStatus,
    IncomeTransaction,
    Transaction,
)
from servicebook.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger("servicebook.followup")

IntervalTable = Sequence[tuple[str, int]]

_NON_DIGITS = re.compile(r"\D+")


def resolve_interval(
    service_type: str,
    interval_table: IntervalTable = DEFAULT_SERVICE_INTERVALS,
    default_interval: int = DEFAULT_SERVICE_INTERVAL,
) -> int:
    """Return the distance interval for a service type.

    The normalized type is tested against each keyword in table order; the
    first keyword contained in it wins.
    """
    normalized = service_type.strip().lower()
    for keyword, interval in interval_table:
        if keyword in normalized:
            return interval
    return default_interval


def days_for_distance(distance: int, avg_monthly_usage: int = AVG_MONTHLY_USAGE) -> int:
    """Days needed to drive a distance at the assumed monthly usage."""
    days = Decimal(distance) / Decimal(avg_monthly_usage) * DAYS_PER_MONTH
    return int(days.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify(days_until_due: int) -> FollowUpStatus:
    """Urgency for a number of days until the estimated service date."""
    if days_until_due <= 0:
        return FollowUpStatus.OVERDUE
    if days_until_due <= DUE_WINDOW_DAYS:
        return FollowUpStatus.DUE
    return FollowUpStatus.UPCOMING


def _service_type(txn: IncomeTransaction) -> Optional[str]:
    candidate = (txn.customer.service_type if txn.customer else None) or txn.note
    if candidate and candidate.strip():
        return candidate.strip()
    return None


def latest_service_records(
    transactions: Iterable[Transaction],
) -> dict[str, IncomeTransaction]:
    """Pick each customer's most recent qualifying service record.

    A record qualifies when it is income with customer name and contact, a
    service type (explicit or the note) and a recorded distance. Among
    records on the same latest date the highest distance wins, then the most
    recently inserted one.
    """
    latest: dict[str, IncomeTransaction] = {}
    for txn in transactions:
        if not isinstance(txn, IncomeTransaction) or txn.customer is None:
            continue
        customer = txn.customer
        if not customer.name or not customer.contact:
            continue
        if customer.distance is None or _service_type(txn) is None:
            logger.debug("Skipping %s: insufficient service data", txn.id)
            continue

        key = normalize_key(customer.name, customer.contact)
        current = latest.get(key)
        rank = (txn.occurred_on, customer.distance, txn.sequence)
        if current is None or rank > (
            current.occurred_on,
            current.customer.distance,
            current.sequence,
        ):
            latest[key] = txn
    return latest


def compute_predictions(
    transactions: Iterable[Transaction],
    interval_table: IntervalTable = DEFAULT_SERVICE_INTERVALS,
    default_interval: int = DEFAULT_SERVICE_INTERVAL,
    dismissed: Optional[set[str]] = None,
    today: Optional[date] = None,
    avg_monthly_usage: int = AVG_MONTHLY_USAGE,
) -> list[FollowUpPrediction]:
    """Derive one follow-up prediction per customer, most urgent first.

    Args:
        transactions: Ledger records to scan
        interval_table: Ordered (keyword, interval) pairs
        default_interval: Interval when no keyword matches
        dismissed: Prediction IDs to leave out
        today: Reference date (defaults to date.today())
        avg_monthly_usage: Assumed distance driven per month

    Returns:
        Predictions sorted by days until due, then customer name
    """
    today = today or date.today()
    dismissed = dismissed or set()

    predictions = []
    for key, txn in latest_service_records(transactions).items():
        customer = txn.customer
        service_type = _service_type(txn)
        prediction_id = f"{key}-{txn.occurred_on.isoformat()}"
        if prediction_id in dismissed:
            continue

        interval = resolve_interval(service_type, interval_table, default_interval)
        next_distance = customer.distance + interval
        estimated = txn.occurred_on + timedelta(
            days=days_for_distance(next_distance - customer.distance, avg_monthly_usage)
        )
        days_until_due = (estimated - today).days

        predictions.append(
            FollowUpPrediction(
                id=prediction_id,
                customer_name=customer.name,
                customer_contact=customer.contact,
                customer_code=customer.code or "",
                vehicle=customer.vehicle or "N/A",
                registration_number=customer.registration_number or customer.vehicle or "N/A",
                last_service_date=txn.occurred_on,
                last_service_type=service_type,
                last_distance=customer.distance,
                next_service_distance=next_distance,
                estimated_next_date=estimated,
                days_until_due=days_until_due,
                status=classify(days_until_due),
            )
        )

    return sorted(
        predictions, key=lambda p: (p.days_until_due, p.customer_name.lower(), p.id)
    )


def filter_predictions(
    predictions: Sequence[FollowUpPrediction],
    status: Optional[FollowUpStatus] = None,
    search: Optional[str] = None,
) -> list[FollowUpPrediction]:
    """Filter predictions by status and a free-text query."""
    results = list(predictions)
    if status is not None:
        results = [p for p in results if p.status == status]
    if search:
        query = search.strip().lower()
        results = [
            p
            for p in results
            if query in p.customer_name.lower()
            or query in p.customer_contact
            or query in p.vehicle.lower()
            or query in p.registration_number.lower()
        ]
    return results


def reminder_message(
    prediction: FollowUpPrediction,
    business_name: str = BUSINESS_NAME,
    business_contact: str = BUSINESS_CONTACT,
) -> str:
    """Compose the service reminder sent to a customer."""
    return (
        f"Assalam-o-Alaikum {prediction.customer_name}!\n"
        f"\n"
        f"This is a friendly reminder from {business_name}.\n"
        f"\n"
        f"Your vehicle ({prediction.vehicle} - {prediction.registration_number}) "
        f"is due for its next service:\n"
        f"\n"
        f"Service Type: {prediction.last_service_type}\n"
        f"Last Service: {prediction.last_service_date.isoformat()}\n"
        f"Current KM: {prediction.last_distance:,}\n"
        f"Next Service at: {prediction.next_service_distance:,} KM\n"
        f"\n"
        f"Please schedule your appointment to keep your vehicle running smoothly!\n"
        f"\n"
        f"Call/WhatsApp: {business_contact}\n"
        f"\n"
        f"Thank you for choosing {business_name}!"
    )


def reminder_phone(contact: str, dial_code: str = COUNTRY_DIAL_CODE) -> str:
    """Turn a local contact number into an international digit string.

    A leading 0 is replaced by the country dial code.

    Raises:
        ValidationError: If the contact holds no digits
    """
    digits = _NON_DIGITS.sub("", contact or "")
    if not digits:
        raise ValidationError(f"Contact '{contact}' has no phone number")
    if digits.startswith("0"):
        digits = dial_code + digits[1:]
    return digits


def reminder_link(prediction: FollowUpPrediction, **message_options) -> str:
    """Return a chat link that opens the reminder addressed to the customer."""
    phone = reminder_phone(prediction.customer_contact)
    text = quote(reminder_message(prediction, **message_options), safe="")
    return f"{REMINDER_LINK_BASE}{phone}?text={text}"


class FollowUpService:
    """Service for follow-up predictions, dismissals and settings."""

    def __init__(self, db: Database, interval_table: IntervalTable = DEFAULT_SERVICE_INTERVALS):
        """Initialize follow-up service.

        Args:
            db: Database instance
            interval_table: Ordered (keyword, interval) pairs
        """
        self.db = db
        self.interval_table = interval_table

    def get_default_interval(self) -> int:
        """Return the persisted default service interval."""
        value = self.db.get_setting(DEFAULT_INTERVAL_SETTING)
        if value is None:
            return DEFAULT_SERVICE_INTERVAL
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring invalid default interval setting %r", value)
            return DEFAULT_SERVICE_INTERVAL

    def set_default_interval(self, interval: int) -> None:
        """Persist the default service interval.

        Raises:
            ValidationError: If interval is not positive
        """
        if interval <= 0:
            raise ValidationError("Default interval must be greater than zero")
        self.db.set_setting(DEFAULT_INTERVAL_SETTING, str(interval))
        logger.info("Default follow-up interval set to %d", interval)

    def dismissed_ids(self) -> set[str]:
        """Return IDs of dismissed predictions."""
        return self.db.list_dismissed_followups()

    def dismiss(self, prediction_id: str) -> None:
        """Mark a prediction as done so it leaves the active list."""
        if not prediction_id or not prediction_id.strip():
            raise ValidationError("Follow-up ID is required")
        self.db.add_dismissed_followup(prediction_id.strip())
        logger.info("Dismissed follow-up %s", prediction_id)

    def predictions(
        self,
        today: Optional[date] = None,
        status: Optional[FollowUpStatus] = None,
        search: Optional[str] = None,
    ) -> list[FollowUpPrediction]:
        """Active predictions, most urgent first."""
        predictions = compute_predictions(
            self.db.list_transactions(),
            interval_table=self.interval_table,
            default_interval=self.get_default_interval(),
            dismissed=self.dismissed_ids(),
            today=today,
        )
        return filter_predictions(predictions, status=status, search=search)

    def get_prediction(self, prediction_id: str, today: Optional[date] = None) -> FollowUpPrediction:
        """Find one active prediction by ID.

        Raises:
            NotFoundError: If no active prediction has that ID
        """
        for prediction in self.predictions(today=today):
            if prediction.id == prediction_id:
                return prediction
        raise NotFoundError(f"Follow-up {prediction_id} not found")

    def stats(self, today: Optional[date] = None) -> FollowUpStats:
        """Counts of active predictions per status."""
        predictions = self.predictions(today=today)
        return FollowUpStats(
            total=len(predictions),
            overdue=sum(1 for p in predictions if p.status == FollowUpStatus.OVERDUE),
            due=sum(1 for p in predictions if p.status == FollowUpStatus.DUE),
            upcoming=sum(1 for p in predictions if p.status == FollowUpStatus.UPCOMING),
        )
