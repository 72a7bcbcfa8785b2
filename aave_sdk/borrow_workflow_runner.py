import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from brownie.network.transaction import TransactionReceipt

from .borrow_math import compute_borrow_amount
from .exceptions import AaveSdkError
from .lending_pool_client import AccountPosition
from .price_feed_client import PriceQuote
from .protocol_definition import BorrowWorkflowDefinition

logger = logging.getLogger(__name__)


class WorkflowStage(Enum):
    STARTED = "started"
    COLLATERAL_ACQUIRED = "collateral acquired"
    DEPOSIT_APPROVED = "deposit approved"
    DEPOSITED = "deposited"
    POSITION_READ_AFTER_DEPOSIT = "position read after deposit"
    PRICE_READ = "price read"
    AMOUNT_COMPUTED = "amount computed"
    BORROWED = "borrowed"
    POSITION_READ_AFTER_BORROW = "position read after borrow"
    REPAY_APPROVED = "repay approved"
    REPAID = "repaid"
    POSITION_READ_AFTER_REPAY = "position read after repay"
    DONE = "done"


@dataclass
class WorkflowReport:
    """
    Record of a workflow run. Filled stage by stage, so a halted run keeps
    everything observed before the failure.

    Attributes:
        stages: completed stages, in order
        receipts: confirmed transactions by the stage that produced them
        position_after_deposit: account position read right after the deposit
        price_quote: price used to compute the borrow amount
        borrow_amount: amount of borrow token borrowed and repaid
        position_after_borrow: account position read right after the borrow
        position_after_repay: account position read right after the repay
    """

    stages: List[WorkflowStage] = field(default_factory=list)
    receipts: Dict[WorkflowStage, TransactionReceipt] = field(default_factory=dict)
    position_after_deposit: Optional[AccountPosition] = None
    price_quote: Optional[PriceQuote] = None
    borrow_amount: Optional[int] = None
    position_after_borrow: Optional[AccountPosition] = None
    position_after_repay: Optional[AccountPosition] = None

    @property
    def stage(self) -> Optional[WorkflowStage]:
        return self.stages[-1] if self.stages else None

    @property
    def residual_debt(self) -> Optional[int]:
        """
        Debt left after repaying the borrowed amount, i.e. interest accrued
        while the loan was open.
        """
        if self.position_after_repay is None:
            return None
        return self.position_after_repay.total_debt_value


class BorrowWorkflowRunner:
    def __init__(self, protocol) -> None:
        self.protocol = protocol
        self.last_report = None

    @contextmanager
    def _stage(self, report: WorkflowReport, stage: WorkflowStage):
        try:
            yield
        except AaveSdkError as exc:
            exc.stage = stage
            logger.error("Workflow halted at stage '%s': %s", stage.value, exc)
            raise
        report.stages.append(stage)

    def run(self, definition: BorrowWorkflowDefinition) -> WorkflowReport:
        """
        Runs the workflow for the protocol's account:
            - acquires collateral and deposits it into the lending pool
            - reads the position and the price, computes the borrow amount
            - borrows that amount and repays it

        Every step waits for the previous one to be confirmed. A failing step
        halts the run, prior on-chain effects are left in place. The error is
        re-raised with `stage` set to the stage that failed, and the partial
        report stays available as `last_report`.

        Args:
            definition: BorrowWorkflowDefinition

        Returns:
            WorkflowReport
        """

        report = WorkflowReport(stages=[WorkflowStage.STARTED])
        self.last_report = report

        account = self.protocol.account
        lending_pool = self.protocol.get_lending_pool()
        collateral = self.protocol.get_token(definition.collateral_address)
        borrow_token = self.protocol.get_token(definition.borrow_address)
        price_feed = self.protocol.get_price_feed(definition.price_feed_address)

        with self._stage(report, WorkflowStage.COLLATERAL_ACQUIRED):
            if definition.acquire_collateral:
                report.receipts[WorkflowStage.COLLATERAL_ACQUIRED] = collateral.acquire(
                    definition.amount, account
                )
            else:
                collateral.ensure_balance(account, definition.amount)

        with self._stage(report, WorkflowStage.DEPOSIT_APPROVED):
            report.receipts[WorkflowStage.DEPOSIT_APPROVED] = collateral.approve(
                lending_pool.address, definition.amount, account
            )

        with self._stage(report, WorkflowStage.DEPOSITED):
            collateral.ensure_balance(account, definition.amount)
            report.receipts[WorkflowStage.DEPOSITED] = lending_pool.deposit(
                definition.collateral_address,
                definition.amount,
                account,
                definition.referral_code,
            )

        with self._stage(report, WorkflowStage.POSITION_READ_AFTER_DEPOSIT):
            report.position_after_deposit = lending_pool.get_account_position(account)

        with self._stage(report, WorkflowStage.PRICE_READ):
            report.price_quote = price_feed.get_latest_price()

        with self._stage(report, WorkflowStage.AMOUNT_COMPUTED):
            report.borrow_amount = compute_borrow_amount(
                report.position_after_deposit.available_borrow_value,
                report.price_quote,
                definition.borrow_decimals,
            )
            logger.info(
                "You can borrow %s of %s",
                report.borrow_amount,
                definition.borrow_address,
            )

        with self._stage(report, WorkflowStage.BORROWED):
            report.receipts[WorkflowStage.BORROWED] = lending_pool.borrow(
                definition.borrow_address,
                report.borrow_amount,
                account,
                definition.rate_mode,
                definition.referral_code,
            )

        with self._stage(report, WorkflowStage.POSITION_READ_AFTER_BORROW):
            report.position_after_borrow = lending_pool.get_account_position(account)

        with self._stage(report, WorkflowStage.REPAY_APPROVED):
            report.receipts[WorkflowStage.REPAY_APPROVED] = borrow_token.approve(
                lending_pool.address, report.borrow_amount, account
            )

        with self._stage(report, WorkflowStage.REPAID):
            borrow_token.ensure_balance(account, report.borrow_amount)
            report.receipts[WorkflowStage.REPAID] = lending_pool.repay(
                definition.borrow_address,
                report.borrow_amount,
                account,
                definition.rate_mode,
            )

        with self._stage(report, WorkflowStage.POSITION_READ_AFTER_REPAY):
            report.position_after_repay = lending_pool.get_account_position(account)

        # interest accrued while the loan was open stays as debt
        if report.residual_debt:
            logger.info("%s worth of ETH is still borrowed", report.residual_debt)

        report.stages.append(WorkflowStage.DONE)
        return report
