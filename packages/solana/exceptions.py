class WalletConfigurationError(Exception):
    """Exception raised when the wallet secret key cannot be decoded."""

    pass


class TransactionFailedError(Exception):
    """Exception raised when a transaction cannot be built, sent or confirmed."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")


class InsufficientFundsError(Exception):
    def __init__(self, required: float, available: float):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient funds: required {required}, available {available}"
        )


class NFTNotFoundError(Exception):
    """Exception raised when the wallet does not hold the requested NFT."""

    pass
