"""
Relational tables. Column name → column type, fed to SQLStore.create_table().

Every row carries user_id (and business_id where applicable) so artifacts
can be listed per user.
"""

BUSINESSES = {
    "id": "TEXT PRIMARY KEY",
    "user_id": "TEXT NOT NULL",
    "type": "TEXT",
    "industry": "TEXT",
    "stage": "TEXT",
    "revenue_model": "TEXT",
    "current_revenue": "REAL",
    "current_expenses": "REAL",
    "answers": "TEXT",
    "created_at": "TEXT",
}

WEEKLY_PLANS = {
    "id": "TEXT PRIMARY KEY",
    "user_id": "TEXT NOT NULL",
    "business_id": "TEXT NOT NULL",
    "plan": "TEXT",
    "week": "TEXT",
    "created_at": "TEXT",
}

FORECASTS = {
    "id": "TEXT PRIMARY KEY",
    "user_id": "TEXT NOT NULL",
    "business_id": "TEXT NOT NULL",
    "forecast": "TEXT",
    "period": "TEXT",
    "created_at": "TEXT",
}

FINANCIAL_DATA = {
    "id": "TEXT PRIMARY KEY",
    "user_id": "TEXT NOT NULL",
    "business_id": "TEXT NOT NULL",
    "revenue": "REAL",
    "expenses": "REAL",
    "month": "TEXT",
    "created_at": "TEXT",
}

TABLES = {
    "businesses": BUSINESSES,
    "weekly_plans": WEEKLY_PLANS,
    "forecasts": FORECASTS,
    "financial_data": FINANCIAL_DATA,
}
