from brownie.network.account import LocalAccount

from .borrow_workflow_runner import BorrowWorkflowRunner
from .erc20_token_client import ERC20TokenClient, WethTokenClient
from .exceptions import AaveSdkError
from .lending_pool_client import LendingPoolClient
from .price_feed_client import PriceFeedClient
from .protocol_definition import BorrowWorkflowDefinition


class AaveProtocol:
    def __init__(self, account: LocalAccount, lending_pool: LendingPoolClient) -> None:
        self.account = account
        self.lending_pool = lending_pool

        self._tokens = {}
        self._price_feeds = {}

    @classmethod
    def from_definition(
        cls, definition: BorrowWorkflowDefinition, account: LocalAccount
    ) -> "AaveProtocol":
        """
        Resolves the lending pool and creates clients for tokens and price feed
        used by `definition`.

        Args:
            definition: BorrowWorkflowDefinition
            account: account acting in the workflow

        Returns:
            AaveProtocol
        """

        confirmation = {
            "required_confs": definition.required_confs,
            "timeout": definition.confirmation_timeout,
        }

        lending_pool = LendingPoolClient.from_addresses_provider(
            definition.lending_pool_addresses_provider, **confirmation
        )

        protocol = cls(account, lending_pool)
        protocol.add_token(WethTokenClient.at(definition.collateral_address, **confirmation))
        protocol.add_token(ERC20TokenClient.at(definition.borrow_address, **confirmation))
        protocol.add_price_feed(
            PriceFeedClient.at(definition.price_feed_address, definition.price_pair)
        )

        return protocol

    def get_runner(self) -> BorrowWorkflowRunner:
        """
        Returns the runner executing the borrow workflow against this protocol
        """
        return BorrowWorkflowRunner(self)

    def get_lending_pool(self) -> LendingPoolClient:
        return self.lending_pool

    def add_token(self, token: ERC20TokenClient) -> None:
        """
        Adds ERC20 token client to AaveProtocol.

        Args:
            token: ERC20TokenClient or WethTokenClient
        """

        self._tokens[token.token_address.lower()] = token

    def get_token(self, token_address: str) -> ERC20TokenClient:
        """
        Returns ERC20 token client for given token address.
        It has to be added to AaveProtocol first using `add_token` method.

        Args:
            token_address: ERC20 token address

        Returns:
            ERC20TokenClient
        """

        token_address = token_address.lower()

        if token_address in self._tokens:
            return self._tokens[token_address]
        else:
            raise AaveSdkError(
                f"Token {token_address} not found. Add it first with `add_token`"
            )

    def add_price_feed(self, feed: PriceFeedClient) -> None:
        self._price_feeds[feed.feed_address.lower()] = feed

    def get_price_feed(self, feed_address: str) -> PriceFeedClient:
        feed_address = feed_address.lower()

        if feed_address in self._price_feeds:
            return self._price_feeds[feed_address]
        else:
            raise AaveSdkError(
                f"Price feed {feed_address} not found. Add it first with `add_price_feed`"
            )
