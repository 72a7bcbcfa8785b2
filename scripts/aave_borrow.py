from brownie import *
from aave_sdk import create_sdk_for_network
from aave_sdk.logging_setup import configure_logging
from scripts.helpful_scripts import get_account, get_network_config


def main():
    configure_logging()

    account = get_account()
    network_config = get_network_config()

    # collateral is always wrapped from the account's ETH first
    aave_protocol, definition = create_sdk_for_network(network_config, account)
    print(f"LendingPool address {aave_protocol.get_lending_pool().address}")

    report = aave_protocol.get_runner().run(definition)

    print(f"The {report.price_quote.pair} price is {report.price_quote.rate}")
    print(f"Borrowed and repaid {report.borrow_amount} DAI wei")
    for label, position in (
        ("after deposit", report.position_after_deposit),
        ("after borrow", report.position_after_borrow),
        ("after repay", report.position_after_repay),
    ):
        print(
            f"Position {label}: collateral {position.total_collateral_value}, "
            f"debt {position.total_debt_value}, "
            f"available {position.available_borrow_value} (ETH wei)"
        )

    # what is left is interest accrued while the loan was open
    print(f"Residual debt: {report.residual_debt} ETH wei")
