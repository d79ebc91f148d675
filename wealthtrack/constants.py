"""
Fixed reference data: payment modes, default category groups and
the storage keys the app reads and writes.
"""

PAYMENT_MODES = [
    "Cash",
    "UPI",
    "Indusind (Personal)",
    "Infinity Sol. (Indian Bank)",
    "Om Dev (Indian Bank)",
    "SBI Savings",
    "Tierra Alor (AU Bank)",
    "Credit Card",
    "Other",
]

DEFAULT_PAYMENT_MODE = "UPI"

INVESTOR_GROUP = "Investor Payments"
INVESTMENTS_GROUP = "Investments"
PERSONAL_GROUP = "Personal"

INVESTOR_FUNDS_CATEGORY = "Investor Funds"
INTEREST_PAYMENT_NOTE = "Interest Payment"

DEFAULT_CATEGORIES = [
    {
        "group": "Real Estate Projects",
        "items": [
            "Galaxy",
            "Tatva Developer",
            "Kalpchandra Serenity",
            "Bougainvilla",
            "Varaj Vihar",
        ],
    },
    {
        "group": INVESTOR_GROUP,
        "items": [
            INVESTOR_FUNDS_CATEGORY,
            "Interest Payment",
            "Principal Return",
        ],
    },
    {
        "group": INVESTMENTS_GROUP,
        "items": [
            "SIP (Regular)",
            "SIP (Gold)",
            "Mutual Funds",
            "Stocks",
        ],
    },
    {
        "group": PERSONAL_GROUP,
        "items": [
            # Income sources
            "Salary",
            "Business Profit",
            "Rental Income",
            "Interest",
            # Insurance
            "Mediclaim",
            "Term Plan",
            "LIC",
            # Loans
            "Home Loan",
            "Personal Loan",
            "Friends/Family Loan",
            # Daily & living
            "Utilities",
            "Property Tax",
            "Vehicle",
            "Travel",
            "School Fees",
            "Family Welfare",
            "Groceries",
            "Entertainment",
            "Other",
        ],
    },
]


class StorageKeys:
    """Keys under which whole JSON documents are stored."""
    USERS = "wt_users"
    TRANSACTIONS = "wt_transactions"
    ACTIVE_USER = "wt_active_user_id"
    CATEGORIES = "wt_categories"
    AUDIT_LOG = "wt_audit_log"
