from decimal import Decimal

from .exceptions import InvalidPriceQuote, InvalidQuantity

MAX_UINT256 = 2**256 - 1
DEFAULT_DECIMALS = 18


def validate_quantity(amount) -> int:
    """
    Returns `amount` unchanged if it is a usable token quantity.

    Quantities are non-negative integers in the smallest unit of the asset.
    Floats are refused, they cannot represent wei amounts exactly.
    """

    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Quantity must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidQuantity(f"Quantity must be non-negative, got {amount}")
    if amount > MAX_UINT256:
        raise InvalidQuantity(f"Quantity {amount} does not fit into uint256")
    return amount


def to_native_units(whole_units: int, decimals: int = DEFAULT_DECIMALS) -> int:
    return validate_quantity(validate_quantity(whole_units) * 10**decimals)


def from_native_units(quantity: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    return Decimal(quantity).scaleb(-decimals)


def compute_borrow_amount(
    available_borrow_value: int, price_quote, decimals: int = DEFAULT_DECIMALS
) -> int:
    """
    Converts borrowing capacity into a quantity of the borrow asset.

    Capacity and rate share the collateral's unit of account, so their integer
    ratio is a whole number of borrow-asset units. That number is scaled to the
    borrow asset's native precision. Both sides are assumed to use 18 decimals;
    pairs with other precisions need their own conversion.

    No safety margin is applied: the result borrows up to full capacity.

    Args:
        available_borrow_value: capacity from the latest account position read
        price_quote: PriceQuote of the borrow asset in the unit of account
        decimals: native decimals of the borrow asset

    Returns:
        quantity of the borrow asset in its smallest unit
    """

    rate = price_quote.rate
    if rate <= 0:
        raise InvalidPriceQuote(
            f"Price quote for {price_quote.pair} has unusable rate {rate}"
        )
    if available_borrow_value < 0:
        raise InvalidQuantity(
            f"Available borrow value must be non-negative, got {available_borrow_value}"
        )

    whole_units = available_borrow_value // rate
    return to_native_units(whole_units, decimals)
