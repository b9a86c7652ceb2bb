"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnsupportedFeeTypeError(DomainException):
    """Platform fee type has no known fee rule"""

    def __init__(self, fee_type: object):
        self.fee_type = fee_type
        super().__init__(f"Unsupported platform fee type: {fee_type}")


class ExchangeRateUnavailableError(DomainException):
    """No rate is known for the requested currency pair"""

    pass


class ExchangeRateAPIError(DomainException):
    """Exchange rate API returned an error or is unavailable"""

    pass
