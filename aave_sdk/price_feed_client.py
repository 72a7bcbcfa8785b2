import logging
from dataclasses import dataclass
from decimal import Decimal

from brownie import interface
from brownie.exceptions import VirtualMachineError

from .borrow_math import from_native_units
from .exceptions import OracleUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    """
    Exchange rate reported by a price feed at read time.

    A quote is a point-in-time snapshot. It is only meant to be used by the
    computation that immediately follows the read.

    Attributes:
        pair: name of the feed, e.g. "DAI/ETH"
        rate: price of one unit of the base asset in the quote asset, scaled by `decimals`
        observed_at: `updatedAt` timestamp of the round
        round_id: id of the round the rate comes from
        decimals: number of decimals used by the feed
    """

    pair: str
    rate: int
    observed_at: int
    round_id: int
    decimals: int = 18

    def as_decimal(self) -> Decimal:
        return from_native_units(self.rate, self.decimals)


class PriceFeedClient:
    def __init__(self, contract, pair: str):
        self._contract = contract
        self.feed_address = contract.address
        self.pair = pair

    @classmethod
    def at(cls, feed_address: str, pair: str) -> "PriceFeedClient":
        # reads only, no signer needed
        return cls(interface.AggregatorV3Interface(feed_address), pair)

    def get_contract(self):
        return self._contract

    def get_latest_price(self) -> PriceQuote:
        """
        Reads the latest round of the feed.

        Returns:
            PriceQuote for the most recent round
        """

        try:
            round_id, answer, _, updated_at, _ = self._contract.latestRoundData()
            decimals = self._contract.decimals()
        except (VirtualMachineError, ValueError) as exc:
            raise OracleUnavailable(
                f"Failed to read {self.pair} price from {self.feed_address}: {exc}"
            ) from exc

        if round_id == 0 or updated_at == 0:
            raise OracleUnavailable(
                f"Price feed {self.feed_address} has no round data for {self.pair}"
            )

        quote = PriceQuote(
            pair=self.pair,
            rate=answer,
            observed_at=updated_at,
            round_id=round_id,
            decimals=decimals,
        )
        logger.info("The %s price is %s", self.pair, quote.rate)
        return quote
