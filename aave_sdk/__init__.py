from brownie import *
from .aave_protocol import *
from .borrow_math import *
from .borrow_workflow_runner import *
from .confirmations import *
from .erc20_token_client import *
from .exceptions import *
from .lending_pool_client import *
from .price_feed_client import *
from .protocol_definition import *


def create_sdk(definition: BorrowWorkflowDefinition, account) -> AaveProtocol:
    """
    Creates AaveProtocol for `account` with clients for the tokens, pool and
    price feed used by `definition`.
    """
    return AaveProtocol.from_definition(definition, account)


def create_default_sdk(account) -> AaveProtocol:
    """
    Creates AaveProtocol for Aave v2 mainnet pool, WETH collateral, DAI borrow
    token and Chainlink DAI/ETH price feed.
    """
    return create_sdk(BorrowWorkflowDefinition.DEFAULT(), account)


def create_sdk_for_network(network_config: dict, account, **overrides):
    """
    Creates AaveProtocol from a network section of brownie-config.yaml.

    Returns:
        tuple of AaveProtocol and the BorrowWorkflowDefinition it was built from
    """
    definition = BorrowWorkflowDefinition.from_network_config(
        network_config, **overrides
    )
    return create_sdk(definition, account), definition
