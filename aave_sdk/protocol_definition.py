from dataclasses import dataclass

from brownie import Wei

from .exceptions import AaveSdkError
from .lending_pool_client import InterestRateMode


WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
DAI_ADDRESS = "0x6B175474E89094C44Da98b954EedeAC495271d0F"

LENDING_POOL_ADDRESSES_PROVIDER = "0xB53C1a33016B2DC2fF3653530bfF1848a515c8c5"
DAI_ETH_PRICE_FEED = "0x773616E4d11A78F511299002da57A0a94577F1f4"

AMOUNT = Wei("0.02 ether")


@dataclass
class BorrowWorkflowDefinition:
    """
    Definition of a deposit, borrow and repay run against the lending pool.

    Attributes:
        collateral_address: address of WETH-like token deposited as collateral
        borrow_address: address of ERC20 token to borrow
        lending_pool_addresses_provider: address of ILendingPoolAddressesProvider contract
        price_feed_address: address of AggregatorV3Interface feed pricing borrow token in collateral's unit of account
        amount: amount of native asset to wrap and deposit
        price_pair: name of the price feed pair, used for reporting
        rate_mode: interest rate mode used for borrow and repay
        referral_code: protocol referral code, 0 for none
        required_confs: confirmations to wait for after each transaction
        confirmation_timeout: seconds to wait for each receipt. None waits without bound.
        borrow_decimals: native decimals of the borrow token
        acquire_collateral: if True, `amount` of native asset is wrapped before the deposit
    """

    collateral_address: str
    borrow_address: str
    lending_pool_addresses_provider: str
    price_feed_address: str
    amount: int = AMOUNT
    price_pair: str = "DAI/ETH"
    rate_mode: InterestRateMode = InterestRateMode.STABLE
    referral_code: int = 0
    required_confs: int = 1
    confirmation_timeout: float = None
    borrow_decimals: int = 18
    acquire_collateral: bool = True

    @staticmethod
    def DEFAULT():
        """
        Returns default BorrowWorkflowDefinition.

        Default is:
            - 0.02 ETH wrapped into WETH and deposited to Aave v2 mainnet pool
            - DAI borrowed at stable rate, priced with Chainlink DAI/ETH feed
        """

        return BorrowWorkflowDefinitionBuilder().build()

    @staticmethod
    def from_network_config(network_config: dict, **overrides):
        """
        Builds definition from a network section of brownie-config.yaml.

        Args:
            network_config: e.g. `config["networks"][network.show_active()]`
            overrides: BorrowWorkflowDefinition fields overriding the defaults
        """

        keys = {
            "collateral_address": "weth_token",
            "borrow_address": "dai_token",
            "lending_pool_addresses_provider": "lending_pool_addresses_provider",
            "price_feed_address": "dai_eth_price_feed",
        }

        missing = [key for key in keys.values() if key not in network_config]
        if missing:
            raise AaveSdkError(
                f"Network config is missing {', '.join(missing)}. Add it to brownie-config.yaml"
            )

        values = {field: network_config[key] for field, key in keys.items()}
        values.update(overrides)
        return BorrowWorkflowDefinition(**values)


class BorrowWorkflowDefinitionBuilder:
    def __init__(self) -> None:
        self._definition = BorrowWorkflowDefinition(
            collateral_address=WETH_ADDRESS,
            borrow_address=DAI_ADDRESS,
            lending_pool_addresses_provider=LENDING_POOL_ADDRESSES_PROVIDER,
            price_feed_address=DAI_ETH_PRICE_FEED,
        )

    def build(self) -> BorrowWorkflowDefinition:
        return self._definition

    def with_collateral(self, address: str, amount: int) -> "BorrowWorkflowDefinitionBuilder":
        """
        Sets collateral token and amount to deposit.

        Args:
            address: address of WETH-like token contract
            amount: amount to wrap and deposit
        """

        self._definition.collateral_address = address
        self._definition.amount = amount
        return self

    def with_borrow_token(
        self, address: str, decimals: int = 18
    ) -> "BorrowWorkflowDefinitionBuilder":
        self._definition.borrow_address = address
        self._definition.borrow_decimals = decimals
        return self

    def with_price_feed(
        self, address: str, pair: str
    ) -> "BorrowWorkflowDefinitionBuilder":
        self._definition.price_feed_address = address
        self._definition.price_pair = pair
        return self

    def with_lending_pool_addresses_provider(
        self, address: str
    ) -> "BorrowWorkflowDefinitionBuilder":
        self._definition.lending_pool_addresses_provider = address
        return self

    def with_rate_mode(
        self, rate_mode: InterestRateMode, referral_code: int = 0
    ) -> "BorrowWorkflowDefinitionBuilder":
        self._definition.rate_mode = InterestRateMode(rate_mode)
        self._definition.referral_code = referral_code
        return self

    def with_confirmations(
        self, required_confs: int, timeout: float = None
    ) -> "BorrowWorkflowDefinitionBuilder":
        """
        Sets how long each transaction is waited for.

        Args:
            required_confs: number of confirmations per transaction
            timeout: seconds to wait for each receipt. None waits without bound.
        """

        self._definition.required_confs = required_confs
        self._definition.confirmation_timeout = timeout
        return self

    def without_collateral_acquisition(self) -> "BorrowWorkflowDefinitionBuilder":
        """
        Skips wrapping. The account must already hold the collateral token.
        """

        self._definition.acquire_collateral = False
        return self
