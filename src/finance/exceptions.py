class PayoutImmutableError(Exception):
    """Raised when code tries to modify or delete a recorded payout."""
