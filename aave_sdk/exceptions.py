"""Errors raised by the Aave SDK"""


class AaveSdkError(Exception):
    """
    Base error for the SDK.

    Attributes:
        stage: workflow stage that was being attempted when the error was raised.
        Set by BorrowWorkflowRunner, None outside of a workflow run.
    """

    stage = None


class InsufficientFunds(AaveSdkError):
    """Caller lacks the balance required for an operation"""


class ProtocolRejected(AaveSdkError):
    """Remote call reverted or failed validation"""


class OracleUnavailable(AaveSdkError):
    """Price feed read failed or returned no round data"""


class InvalidPriceQuote(AaveSdkError):
    """Price quote cannot be used for a computation (zero or negative rate)"""


class ConfirmationTimeout(AaveSdkError):
    """Transaction was submitted but not confirmed within the allowed time"""


class InvalidQuantity(AaveSdkError, ValueError):
    """Quantity is negative or does not fit into uint256"""
