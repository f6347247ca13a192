"""
Error types raised by the credit due engine and the credit book.
"""


class BorrowAmountLessThanPlatformFees(ValueError):
    """The platform fee for a draw exceeds the amount being borrowed"""

    def __init__(self, borrow_amount: int, platform_fee: int):
        self.borrow_amount = borrow_amount
        self.platform_fee = platform_fee
        super().__init__(
            f"Borrow amount {borrow_amount} is less than platform fees {platform_fee}"
        )


class StartDateLaterThanEndDate(ValueError):
    """A day-count or period-count query was given a reversed date range"""

    def __init__(self, start_date: int, end_date: int):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"Start date {start_date} is later than end date {end_date}")


class CreditNotFound(KeyError):
    """No credit is registered under the given ID"""

    def __init__(self, credit_id: str):
        self.credit_id = credit_id
        super().__init__(f"Credit {credit_id} not found")


class CreditAlreadyExists(ValueError):
    """A credit with the given ID is already registered"""

    def __init__(self, credit_id: str):
        self.credit_id = credit_id
        super().__init__(f"Credit {credit_id} already exists")


class OutOfOrderRefresh(ValueError):
    """A refresh was requested with a timestamp earlier than the last refresh"""

    def __init__(self, credit_id: str, last_refreshed_at: int, timestamp: int):
        self.credit_id = credit_id
        self.last_refreshed_at = last_refreshed_at
        self.timestamp = timestamp
        super().__init__(
            f"Refresh of credit {credit_id} at {timestamp} is earlier than "
            f"last refresh at {last_refreshed_at}"
        )
