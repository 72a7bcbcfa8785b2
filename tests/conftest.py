import pytest
from aave_sdk import *
from sdk.fake_protocol import *


WETH = "0x00000000000000000000000000000000000000e1"
DAI = "0x00000000000000000000000000000000000000d1"
POOL = "0x00000000000000000000000000000000000000a1"
ADDRESSES_PROVIDER = "0x00000000000000000000000000000000000000a2"
DAI_ETH_FEED = "0x00000000000000000000000000000000000000f1"

# 1 DAI is worth 0.00025 ETH
DAI_ETH_RATE = 250_000_000_000_000
POOL_DAI_LIQUIDITY = 1_000_000 * 10**18

NETWORK_CONFIG = {
    "weth_token": WETH,
    "dai_token": DAI,
    "lending_pool_addresses_provider": ADDRESSES_PROVIDER,
    "dai_eth_price_feed": DAI_ETH_FEED,
}


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def account():
    return FakeAccount("0x0000000000000000000000000000000000000b01", balance=10 * 10**18)


@pytest.fixture
def weth(chain):
    return FakeWeth(chain, WETH)


@pytest.fixture
def dai(chain):
    return FakeERC20(chain, DAI, "DAI")


@pytest.fixture
def price_feed():
    return FakePriceFeed(DAI_ETH_FEED, DAI_ETH_RATE)


@pytest.fixture
def lending_pool(chain, weth, dai):
    pool = FakeLendingPool(
        chain,
        POOL,
        tokens={WETH: weth, DAI: dai},
        prices={WETH: 10**18, DAI: DAI_ETH_RATE},
    )
    dai.mint(pool, POOL_DAI_LIQUIDITY)
    return pool


@pytest.fixture
def weth_client(weth):
    return WethTokenClient(weth)


@pytest.fixture
def dai_client(dai):
    return ERC20TokenClient(dai)


@pytest.fixture
def price_feed_client(price_feed):
    return PriceFeedClient(price_feed, "DAI/ETH")


@pytest.fixture
def lending_pool_client(lending_pool):
    return LendingPoolClient(lending_pool)


@pytest.fixture
def aave_protocol(account, lending_pool_client, weth_client, dai_client, price_feed_client):
    protocol = AaveProtocol(account, lending_pool_client)
    protocol.add_token(weth_client)
    protocol.add_token(dai_client)
    protocol.add_price_feed(price_feed_client)
    return protocol


@pytest.fixture
def definition():
    return (
        BorrowWorkflowDefinitionBuilder()
        .with_collateral(WETH, AMOUNT)
        .with_borrow_token(DAI)
        .with_price_feed(DAI_ETH_FEED, "DAI/ETH")
        .with_lending_pool_addresses_provider(ADDRESSES_PROVIDER)
        .build()
    )


@pytest.fixture
def deposited(account, lending_pool_client, weth_client):
    """Account with AMOUNT of WETH deposited as collateral"""
    weth_client.acquire(AMOUNT, account)
    weth_client.approve(lending_pool_client.address, AMOUNT, account)
    lending_pool_client.deposit(WETH, AMOUNT, account)
    return account
