"""Role projection: which fields and actions each actor role gets.

This is a display and action-gating policy evaluated per render. It assumes
the data channel already scopes data to the authenticated actor.
"""

from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from servicebook.domain.errors import PermissionDenied, ValidationError, action_not_permitted


class Role(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    STAFF = "staff"


class Action(str, Enum):
    CREATE_INCOME = "create_income"
    CREATE_EXPENSE = "create_expense"
    VIEW_ENTRIES = "view_entries"
    DELETE_ENTRY = "delete_entry"
    CLEAR_DATE = "clear_date"
    VIEW_DAILY_SUMMARY = "view_daily_summary"
    VIEW_MONTHLY_SUMMARY = "view_monthly_summary"
    VIEW_CUSTOMERS = "view_customers"
    MANAGE_DISCOUNTS = "manage_discounts"
    VIEW_FOLLOWUPS = "view_followups"
    DISMISS_FOLLOWUP = "dismiss_followup"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_MARKETING = "manage_marketing"
    MANAGE_EMPLOYEES = "manage_employees"
    VIEW_DOCUMENTS = "view_documents"
    EXPORT_DATA = "export_data"
    IMPORT_DATA = "import_data"


# Field names hidden from roles that may not see contact details
CONTACT_FIELDS = frozenset({"contact", "customer_contact"})

# Field names carrying money figures
FINANCIAL_FIELDS = frozenset(
    {
        "amount",
        "income",
        "expense",
        "gross_profit",
        "marketing_budget",
        "net_profit",
        "budget",
        "spent",
        "remaining",
        "monthly_salary",
        "daily_wage",
        "visits",
        "discount",
    }
)

ROLE_ACTIONS: dict[Role, frozenset[Action]] = {
    Role.OWNER: frozenset(Action),
    Role.EDITOR: frozenset(
        {
            Action.CREATE_INCOME,
            Action.CREATE_EXPENSE,
            Action.VIEW_ENTRIES,
            Action.DELETE_ENTRY,
            Action.VIEW_DAILY_SUMMARY,
            Action.VIEW_CUSTOMERS,
            Action.MANAGE_DISCOUNTS,
            Action.VIEW_FOLLOWUPS,
            Action.DISMISS_FOLLOWUP,
            Action.VIEW_DOCUMENTS,
        }
    ),
    Role.STAFF: frozenset(
        {
            Action.CREATE_INCOME,
            Action.VIEW_ENTRIES,
            Action.VIEW_FOLLOWUPS,
        }
    ),
}

ROLE_HIDDEN_FIELDS: dict[Role, frozenset[str]] = {
    Role.OWNER: frozenset(),
    Role.EDITOR: frozenset(),
    Role.STAFF: CONTACT_FIELDS | FINANCIAL_FIELDS,
}


def parse_role(value: Optional[str]) -> Role:
    """Parse a role name. A missing role means the least privileged one."""
    if value is None or not value.strip():
        return Role.STAFF
    try:
        return Role(value.strip().lower())
    except ValueError:
        valid = ", ".join(r.value for r in Role)
        raise ValidationError(f"Unknown role '{value}'. Valid roles: {valid}")


def permitted_actions(role: Role) -> frozenset[Action]:
    return ROLE_ACTIONS[Role(role)]


def can(role: Role, action: Action) -> bool:
    return Action(action) in permitted_actions(role)


def require(role: Role, action: Action) -> None:
    """Raise PermissionDenied unless role may perform action."""
    if not can(role, action):
        raise PermissionDenied(action_not_permitted(Role(role).value, Action(action).value))


def visible_fields(role: Role, fields: Iterable[str]) -> list[str]:
    """Return the subset of field names the role may see, order preserved."""
    hidden = ROLE_HIDDEN_FIELDS[Role(role)]
    return [name for name in fields if name not in hidden]


def project(role: Role, view: Any) -> dict[str, Any]:
    """Drop the fields of an entity view that the role may not see.

    Args:
        role: Actor role
        view: A mapping or a dataclass instance

    Returns:
        New dict with only the visible fields. Nested mappings (such as a
        customer block inside a transaction) are projected too.
    """
    if is_dataclass(view) and not isinstance(view, type):
        view = asdict(view)
    if not isinstance(view, Mapping):
        raise TypeError(f"Cannot project {type(view).__name__}")

    projected: dict[str, Any] = {}
    for name in visible_fields(role, view.keys()):
        value = view[name]
        if isinstance(value, Mapping):
            value = project(role, value)
        projected[name] = value
    return projected
