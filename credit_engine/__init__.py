"""
Credit Due Engine

Billing and accrual engine for credit lines: derives the next bill, past-due
amounts and late fees from a credit's configuration, its last billing record
and the current time, using integer arithmetic only.
"""

__version__ = "1.0.0"
