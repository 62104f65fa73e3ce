"""Seed rows inserted on first startup."""

import logging

from sqlalchemy.orm import Session

from cashflow.database.models import Category, PaymentMethod, User
from cashflow.domain.entities import DEFAULT_USER_ID

logger = logging.getLogger(__name__)

INCOME_COLOR = "#10B981"
EXPENSE_COLOR = "#EF4444"

# (name, description)
DEFAULT_PAYMENT_METHODS = [
    ("Cash", "Cash payment"),
    ("Credit Card", "Credit card payment"),
    ("Debit Card", "Debit card payment"),
    ("Bank Transfer", "Bank wire transfer"),
    ("Check", "Check payment"),
    ("PayPal", "PayPal digital payment"),
    ("Venmo", "Venmo digital payment"),
    ("Other", "Other payment method"),
]

# (name, type, icon)
DEFAULT_CATEGORIES = [
    ("Sales Revenue", "income", "dollar-sign"),
    ("Service Income", "income", "briefcase"),
    ("Other Income", "income", "plus-circle"),
    ("Product Purchases", "expense", "shopping-cart"),
    ("Operating Expenses", "expense", "settings"),
    ("Salaries & Wages", "expense", "users"),
    ("Rent", "expense", "home"),
    ("Utilities", "expense", "zap"),
    ("Marketing", "expense", "megaphone"),
    ("Office Supplies", "expense", "paperclip"),
    ("Travel", "expense", "plane"),
    ("Meals & Entertainment", "expense", "coffee"),
    ("Insurance", "expense", "shield"),
    ("Taxes", "expense", "file-text"),
    ("Bank Fees", "expense", "credit-card"),
    ("Professional Services", "expense", "briefcase"),
    ("Equipment", "expense", "tool"),
    ("Software & Subscriptions", "expense", "cloud"),
    ("Repairs & Maintenance", "expense", "wrench"),
    ("Other Expenses", "expense", "minus-circle"),
]


def seed_defaults(session: Session) -> int:
    """Insert the default user, payment methods and categories that are missing.

    Rows are matched by key (user id, name), so edits to seeded rows survive
    restarts while a deleted seed row is recreated on the next startup.
    Returns the number of rows inserted. Does not commit.
    """
    inserted = 0

    if session.get(User, DEFAULT_USER_ID) is None:
        session.add(User(id=DEFAULT_USER_ID, name="Default User"))
        inserted += 1

    existing_methods = {name for (name,) in session.query(PaymentMethod.name).all()}
    for name, description in DEFAULT_PAYMENT_METHODS:
        if name not in existing_methods:
            session.add(PaymentMethod(name=name, description=description))
            inserted += 1

    existing_categories = {name for (name,) in session.query(Category.name).all()}
    for name, category_type, icon in DEFAULT_CATEGORIES:
        if name not in existing_categories:
            color = INCOME_COLOR if category_type == "income" else EXPENSE_COLOR
            session.add(Category(name=name, type=category_type, color=color, icon=icon))
            inserted += 1

    logger.debug(f"Seeded {inserted} default row(s)")
    return inserted
