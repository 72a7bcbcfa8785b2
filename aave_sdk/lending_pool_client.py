import logging
from dataclasses import dataclass
from enum import IntEnum

from brownie import interface
from brownie.network.account import LocalAccount
from brownie.network.transaction import TransactionReceipt

from .borrow_math import validate_quantity
from .confirmations import send_and_confirm

logger = logging.getLogger(__name__)


class InterestRateMode(IntEnum):
    STABLE = 1
    VARIABLE = 2


@dataclass(frozen=True)
class AccountPosition:
    """
    Snapshot of a borrower's account in the lending pool.

    Values are denominated in the unit of account of the pool (ETH for Aave v2
    mainnet), with 18 decimals.

    Attributes:
        total_collateral_value: value of all deposited collateral
        total_debt_value: value of all outstanding debt, accrued interest included
        available_borrow_value: value that can still be borrowed
        current_liquidation_threshold: weighted liquidation threshold, in basis points
        ltv: weighted loan to value ratio, in basis points
        health_factor: health factor with 18 decimals
    """

    total_collateral_value: int
    total_debt_value: int
    available_borrow_value: int
    current_liquidation_threshold: int = 0
    ltv: int = 0
    health_factor: int = 0

    @property
    def has_debt(self) -> bool:
        return self.total_debt_value > 0


class LendingPoolClient:
    def __init__(self, pool, required_confs: int = 1, timeout: float = None):
        self.pool_contract = pool
        self.address = pool.address
        self.required_confs = required_confs
        self.timeout = timeout

    @classmethod
    def from_addresses_provider(
        cls, provider_address: str, **kwargs
    ) -> "LendingPoolClient":
        """
        Resolves the lending pool through the protocol's addresses provider.

        Args:
            provider_address: address of ILendingPoolAddressesProvider contract

        Returns:
            LendingPoolClient
        """

        provider = interface.ILendingPoolAddressesProvider(provider_address)
        pool_address = provider.getLendingPool()
        logger.info("LendingPool address %s", pool_address)

        return cls(interface.ILendingPool(pool_address), **kwargs)

    def get_contract(self):
        return self.pool_contract

    def _send(self, description: str, method, *args) -> TransactionReceipt:
        return send_and_confirm(
            description,
            method,
            *args,
            required_confs=self.required_confs,
            timeout=self.timeout,
        )

    def deposit(
        self,
        asset: str,
        amount: int,
        account: LocalAccount,
        referral_code: int = 0,
    ) -> TransactionReceipt:
        """
        Deposits `amount` of `asset` as collateral of `account`.
        The pool has to be approved to move `amount` of `asset` first.

        Args:
            asset: address of ERC20 token to deposit
            amount: amount of tokens to deposit
            account: depositing account, also credited with the deposit
            referral_code: protocol referral code, 0 for none
        """

        validate_quantity(amount)
        logger.info("Depositing...")

        tx = self._send(
            f"deposit {amount} of {asset} to pool {self.address}",
            self.pool_contract.deposit,
            asset,
            amount,
            account.address,
            referral_code,
            {"from": account},
        )
        logger.info("Deposited!")
        return tx

    def borrow(
        self,
        asset: str,
        amount: int,
        account: LocalAccount,
        rate_mode: InterestRateMode = InterestRateMode.STABLE,
        referral_code: int = 0,
    ) -> TransactionReceipt:
        """
        Borrows `amount` of `asset` against collateral of `account`.

        The position may have changed since the amount was computed, in which
        case the pool rejects the borrow.

        Args:
            asset: address of ERC20 token to borrow
            amount: amount of tokens to borrow
            account: borrowing account
            rate_mode: stable or variable interest rate
            referral_code: protocol referral code, 0 for none
        """

        validate_quantity(amount)

        tx = self._send(
            f"borrow {amount} of {asset} from pool {self.address}",
            self.pool_contract.borrow,
            asset,
            amount,
            int(rate_mode),
            referral_code,
            account.address,
            {"from": account},
        )
        logger.info("You have borrowed!")
        return tx

    def repay(
        self,
        asset: str,
        amount: int,
        account: LocalAccount,
        rate_mode: InterestRateMode = InterestRateMode.STABLE,
    ) -> TransactionReceipt:
        """
        Repays up to `amount` of `asset` debt of `account`.

        The pool caps the repayment at the outstanding debt. The pool has to be
        approved to move `amount` of `asset` first.

        Args:
            asset: address of borrowed ERC20 token
            amount: amount of tokens to repay
            account: repaying account
            rate_mode: interest rate mode of the debt being repaid
        """

        validate_quantity(amount)

        tx = self._send(
            f"repay {amount} of {asset} to pool {self.address}",
            self.pool_contract.repay,
            asset,
            amount,
            int(rate_mode),
            account.address,
            {"from": account},
        )
        logger.info("Repaid %s of %s", amount, asset)
        return tx

    def get_account_position(self, account) -> AccountPosition:
        """
        Reads current position of `account`. Every call queries the pool.

        Args:
            account: borrower account or address

        Returns:
            AccountPosition
        """

        (
            total_collateral,
            total_debt,
            available_borrows,
            liquidation_threshold,
            ltv,
            health_factor,
        ) = self.pool_contract.getUserAccountData(getattr(account, "address", account))

        position = AccountPosition(
            total_collateral_value=total_collateral,
            total_debt_value=total_debt,
            available_borrow_value=available_borrows,
            current_liquidation_threshold=liquidation_threshold,
            ltv=ltv,
            health_factor=health_factor,
        )

        logger.info("You have %s worth of ETH deposited.", position.total_collateral_value)
        logger.info("You have %s worth of ETH borrowed.", position.total_debt_value)
        logger.info("You can borrow %s worth of ETH.", position.available_borrow_value)
        return position
