from brownie import *
from aave_sdk import WethTokenClient, AMOUNT
from aave_sdk.logging_setup import configure_logging
from scripts.helpful_scripts import get_account, get_network_config


def get_weth(amount=AMOUNT):
    account = get_account()
    network_config = get_network_config()

    weth = WethTokenClient.at(network_config["weth_token"])
    weth.acquire(amount, account)

    print(f"Got {weth.balance(account)} WETH")
    return weth


def main():
    configure_logging()
    get_weth()
