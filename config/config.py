"""Settings shared by every environment module."""

import os


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "hr_ledger"),
    }


def payroll_schedule_from_env() -> dict:
    """Monthly allowance/deduction schedule; rates are fractions of earned basic."""
    return {
        "hra_rate": os.getenv("PAYROLL_HRA_RATE", "0.40"),
        "transport": os.getenv("PAYROLL_TRANSPORT", "2000"),
        "medical": os.getenv("PAYROLL_MEDICAL", "1500"),
        "other_allowance": os.getenv("PAYROLL_OTHER_ALLOWANCE", "0"),
        "tax_rate": os.getenv("PAYROLL_TAX_RATE", "0.10"),
        "pf_rate": os.getenv("PAYROLL_PF_RATE", "0.12"),
        "insurance": os.getenv("PAYROLL_INSURANCE", "500"),
        "other_deduction": os.getenv("PAYROLL_OTHER_DEDUCTION", "0"),
    }
