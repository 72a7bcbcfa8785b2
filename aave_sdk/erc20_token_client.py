import logging

from brownie import interface
from brownie.network.account import LocalAccount
from brownie.network.transaction import TransactionReceipt

from .borrow_math import DEFAULT_DECIMALS, MAX_UINT256, validate_quantity
from .confirmations import send_and_confirm
from .exceptions import InsufficientFunds, ProtocolRejected

logger = logging.getLogger(__name__)


class ERC20TokenClient:
    def __init__(self, contract, required_confs: int = 1, timeout: float = None):
        self._contract = contract
        self.token_address = contract.address
        self.required_confs = required_confs
        self.timeout = timeout

    @classmethod
    def at(cls, token_address: str, **kwargs) -> "ERC20TokenClient":
        """
        Creates client for ERC20 token deployed at `token_address`.
        """

        return cls(interface.IERC20(token_address), **kwargs)

    def get_contract(self):
        """
        Returns ERC20 token contract used by this client.
        """

        return self._contract

    def _send(self, description: str, method, *args) -> TransactionReceipt:
        return send_and_confirm(
            description,
            method,
            *args,
            required_confs=self.required_confs,
            timeout=self.timeout,
        )

    def approve(
        self,
        spender,
        amount: int,
        owner: LocalAccount,
        *,
        reset_allowance: bool = False,
    ) -> TransactionReceipt:
        """
        Approves `spender` to spend `amount` tokens from `owner` account.
        Blocks until the approval is confirmed.

        Approving twice with the same arguments leaves the allowance at `amount`,
        grants replace the previous allowance rather than adding to it.

        Args:
            spender: account or contract allowed to move the tokens
            amount: amount of tokens to approve
            owner: account address to approve from
            reset_allowance: set allowance to zero first when it is non-zero.
            Needed for tokens that refuse non-zero to non-zero allowance changes.
        """

        validate_quantity(amount)

        if reset_allowance:
            current = self.allowance(owner, spender)
            if current != 0:
                self._send(
                    f"reset allowance of {self.token_address} for {_address(spender)}",
                    self._contract.approve,
                    spender,
                    0,
                    {"from": owner},
                )

        tx = self._send(
            f"approve {amount} tokens of {self.token_address} to {_address(spender)}",
            self._contract.approve,
            spender,
            amount,
            {"from": owner},
        )
        logger.info("Approved %s to spend %s of %s", _address(spender), amount, self.token_address)
        return tx

    def approve_max(self, spender, owner: LocalAccount) -> TransactionReceipt:
        """
        Approves `spender` to spend all tokens from `owner` account.

        Args:
            spender: account or contract allowed to move the tokens
            owner: account address to approve from
        """

        return self.approve(spender, MAX_UINT256, owner)

    def allowance(self, owner, spender) -> int:
        return self._contract.allowance(owner, spender)

    def balance(self, user) -> int:
        """
        Returns current balance of `user` account.

        Args:
            user: account address to check balance
        """
        return self._contract.balanceOf(user)

    def ensure_balance(self, user, amount: int) -> None:
        balance = self.balance(user)
        if balance < amount:
            raise InsufficientFunds(
                f"{_address(user)} holds {balance} of {self.token_address}, {amount} required"
            )

    def transfer(self, from_: LocalAccount, to, amount: int) -> TransactionReceipt:
        """
        Transfers `amount` tokens from `from_` account to `to` account.

        Args:
            from_: account address to transfer from
            to: account address to transfer to
            amount: amount of tokens to transfer
        """

        validate_quantity(amount)
        self.ensure_balance(from_, amount)

        return self._send(
            f"transfer {amount} tokens from {_address(from_)} to {_address(to)}",
            self._contract.transfer,
            to,
            amount,
            {"from": from_},
        )

    def symbol(self) -> str:
        return self._contract.symbol()

    def decimals(self) -> int:
        if not hasattr(self._contract, "decimals"):
            return DEFAULT_DECIMALS
        return self._contract.decimals()


class WethTokenClient(ERC20TokenClient):
    @classmethod
    def at(cls, token_address: str, **kwargs) -> "WethTokenClient":
        return cls(interface.IWeth(token_address), **kwargs)

    def acquire(self, amount: int, owner: LocalAccount) -> TransactionReceipt:
        """
        Wraps `amount` of the native asset into WETH for `owner`.

        Args:
            amount: amount of wei to wrap
            owner: account paying the native asset and receiving WETH

        Returns:
            TransactionReceipt of the confirmed deposit
        """

        validate_quantity(amount)

        native_balance = owner.balance()
        if native_balance < amount:
            raise InsufficientFunds(
                f"{owner.address} holds {native_balance} wei, {amount} required to wrap"
            )

        balance_before = self.balance(owner)
        tx = self._send(
            f"wrap {amount} wei into {self.token_address}",
            self._contract.deposit,
            {"from": owner, "value": amount},
        )

        balance_after = self.balance(owner)
        if balance_after - balance_before != amount:
            raise ProtocolRejected(
                f"Wrapping {amount} wei credited {balance_after - balance_before} WETH to {owner.address}"
            )

        logger.info("Got %s WETH", balance_after)
        return tx

    def release(self, amount: int, owner: LocalAccount) -> TransactionReceipt:
        """
        Unwraps `amount` WETH of `owner` back into the native asset.
        """

        validate_quantity(amount)
        self.ensure_balance(owner, amount)

        tx = self._send(
            f"unwrap {amount} of {self.token_address}",
            self._contract.withdraw,
            amount,
            {"from": owner},
        )
        logger.info("Unwrapped %s WETH", amount)
        return tx


def _address(account) -> str:
    return getattr(account, "address", account)
