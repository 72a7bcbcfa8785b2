import logging

import pytest

from aave_sdk import (
    AMOUNT,
    InsufficientFunds,
    InvalidPriceQuote,
    InvalidQuantity,
    OracleUnavailable,
    ProtocolRejected,
    WorkflowStage,
)
from conftest import DAI, DAI_ETH_RATE, POOL, WETH


ALL_STAGES = list(WorkflowStage)


def test_workflow_end_to_end(account, aave_protocol, definition, dai_client, weth_client, lending_pool):
    report = aave_protocol.get_runner().run(definition)

    assert report.stages == ALL_STAGES
    assert report.stage == WorkflowStage.DONE
    assert lending_pool.calls == ["deposit", "borrow", "repay"]

    # 0.02 ETH deposited, 80% of it can be borrowed
    assert report.position_after_deposit.total_collateral_value == AMOUNT
    available = report.position_after_deposit.available_borrow_value
    assert available == 16 * 10**15

    # floor(available / rate) DAI, scaled to 18 decimals
    assert report.price_quote.rate == DAI_ETH_RATE
    assert report.borrow_amount == (available // DAI_ETH_RATE) * 10**18 == 64 * 10**18
    assert report.borrow_amount * DAI_ETH_RATE // 10**18 <= available

    assert report.position_after_borrow.has_debt
    assert report.position_after_borrow.available_borrow_value <= available

    # interest accrued while the loan was open is still owed
    assert report.residual_debt > 0
    assert report.position_after_repay.total_debt_value == report.residual_debt
    assert report.position_after_repay.total_collateral_value == AMOUNT

    assert weth_client.balance(account) == 0
    assert dai_client.balance(account) == 0


def test_workflow_approves_before_each_transfer(account, aave_protocol, definition, weth, dai):
    report = aave_protocol.get_runner().run(definition)

    assert weth.approve_calls == [(account.address, POOL, AMOUNT)]
    assert dai.approve_calls == [(account.address, POOL, report.borrow_amount)]

    receipts = report.receipts
    assert (
        receipts[WorkflowStage.COLLATERAL_ACQUIRED].block_number
        < receipts[WorkflowStage.DEPOSIT_APPROVED].block_number
        < receipts[WorkflowStage.DEPOSITED].block_number
        < receipts[WorkflowStage.BORROWED].block_number
        < receipts[WorkflowStage.REPAY_APPROVED].block_number
        < receipts[WorkflowStage.REPAID].block_number
    )


def test_workflow_waits_for_configured_confirmations(aave_protocol, definition, weth_client, dai_client, lending_pool_client):
    for client in (weth_client, dai_client, lending_pool_client):
        client.required_confs = 2

    report = aave_protocol.get_runner().run(definition)

    assert all(tx.confirmations == 2 for tx in report.receipts.values())


def test_workflow_logs_residual_debt(aave_protocol, definition, caplog):
    caplog.set_level(logging.INFO)

    report = aave_protocol.get_runner().run(definition)

    assert f"{report.residual_debt} worth of ETH is still borrowed" in caplog.text


def test_oracle_failure_halts_before_borrow(account, aave_protocol, definition, price_feed, lending_pool, lending_pool_client):
    price_feed.reverts = True
    runner = aave_protocol.get_runner()

    with pytest.raises(OracleUnavailable) as exc:
        runner.run(definition)

    assert exc.value.stage == WorkflowStage.PRICE_READ
    assert lending_pool.calls == ["deposit"]

    report = runner.last_report
    assert report.stage == WorkflowStage.POSITION_READ_AFTER_DEPOSIT
    assert report.borrow_amount is None
    assert lending_pool_client.get_account_position(account) == report.position_after_deposit


def test_zero_price_halts_at_amount_computation(aave_protocol, definition, price_feed, lending_pool):
    price_feed.rate = 0
    runner = aave_protocol.get_runner()

    with pytest.raises(InvalidPriceQuote) as exc:
        runner.run(definition)

    assert exc.value.stage == WorkflowStage.AMOUNT_COMPUTED
    assert runner.last_report.stage == WorkflowStage.PRICE_READ
    assert "borrow" not in lending_pool.calls


def test_negative_capacity_halts_at_amount_computation(aave_protocol, definition, lending_pool, caplog):
    lending_pool._available = lambda user: -1
    runner = aave_protocol.get_runner()

    with pytest.raises(InvalidQuantity) as exc:
        runner.run(definition)

    assert exc.value.stage == WorkflowStage.AMOUNT_COMPUTED
    assert runner.last_report.stage == WorkflowStage.PRICE_READ
    assert "borrow" not in lending_pool.calls
    assert "Workflow halted at stage" in caplog.text


def test_price_moved_before_borrow(aave_protocol, definition, lending_pool):
    # pool prices DAI higher than the feed the amount was computed with
    lending_pool.prices[DAI.lower()] = DAI_ETH_RATE * 2
    runner = aave_protocol.get_runner()

    with pytest.raises(ProtocolRejected) as exc:
        runner.run(definition)

    assert exc.value.stage == WorkflowStage.BORROWED
    assert runner.last_report.stage == WorkflowStage.AMOUNT_COMPUTED
    assert lending_pool.calls == ["deposit", "borrow"]


def test_not_enough_native_funds(account, aave_protocol, definition, lending_pool):
    account._balance = AMOUNT - 1
    runner = aave_protocol.get_runner()

    with pytest.raises(InsufficientFunds) as exc:
        runner.run(definition)

    assert exc.value.stage == WorkflowStage.COLLATERAL_ACQUIRED
    assert runner.last_report.stages == [WorkflowStage.STARTED]
    assert lending_pool.calls == []


def test_workflow_with_collateral_already_held(account, aave_protocol, definition, weth_client, weth):
    definition.acquire_collateral = False
    weth.mint(account, AMOUNT)

    report = aave_protocol.get_runner().run(definition)

    assert report.stage == WorkflowStage.DONE
    assert WorkflowStage.COLLATERAL_ACQUIRED not in report.receipts
    assert report.position_after_deposit.total_collateral_value == AMOUNT


def test_workflow_without_collateral_held(aave_protocol, definition, lending_pool):
    definition.acquire_collateral = False

    with pytest.raises(InsufficientFunds) as exc:
        aave_protocol.get_runner().run(definition)

    assert exc.value.stage == WorkflowStage.COLLATERAL_ACQUIRED
    assert lending_pool.calls == []


def test_missing_token_client(account, lending_pool_client, definition):
    from aave_sdk import AaveProtocol, AaveSdkError

    protocol = AaveProtocol(account, lending_pool_client)

    with pytest.raises(AaveSdkError):
        protocol.get_runner().run(definition)


def test_rerun_deposits_again(account, aave_protocol, definition, lending_pool_client):
    runner = aave_protocol.get_runner()
    runner.run(definition)
    second = runner.run(definition)

    assert runner.last_report is second
    assert second.position_after_deposit.total_collateral_value == 2 * AMOUNT
    assert lending_pool_client.get_account_position(account).total_collateral_value == 2 * AMOUNT
