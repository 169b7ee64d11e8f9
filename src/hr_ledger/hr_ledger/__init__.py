"""HR Ledger package.

Time & compensation ledger (attendance, leave, payroll) organized by feature
modules with a thin Flask controller layer over service/repository layers.
"""
