import logging

from brownie import web3
from brownie.exceptions import VirtualMachineError
from brownie.network.transaction import TransactionReceipt
from web3.exceptions import TimeExhausted

from .exceptions import ConfirmationTimeout, ProtocolRejected

logger = logging.getLogger(__name__)


def send_and_confirm(
    description: str,
    method,
    *args,
    required_confs: int = 1,
    timeout: float = None,
) -> TransactionReceipt:
    """
    Submits a state-changing contract call and blocks until it is confirmed.

    Args:
        description: human readable name of the operation, used in errors
        method: bound contract method, e.g. `token.approve`
        args: arguments of the call, including brownie's trailing `{"from": ...}` dict
        required_confs: number of confirmations to wait for
        timeout: seconds to wait for the receipt. None waits without bound.

    Returns:
        TransactionReceipt of the confirmed transaction
    """

    if timeout is not None and args and isinstance(args[-1], dict):
        # brownie would otherwise block inside the call until the receipt is mined
        args = args[:-1] + ({**args[-1], "required_confs": 0},)

    try:
        tx = method(*args)
    except VirtualMachineError as exc:
        raise ProtocolRejected(
            f"Failed to {description}. Revert message: {exc.revert_msg}"
        ) from exc

    return wait_for_confirmation(
        tx, description, required_confs=required_confs, timeout=timeout
    )


def wait_for_confirmation(
    tx: TransactionReceipt,
    description: str,
    required_confs: int = 1,
    timeout: float = None,
) -> TransactionReceipt:
    if timeout is not None:
        try:
            web3.eth.wait_for_transaction_receipt(tx.txid, timeout=timeout)
        except TimeExhausted as exc:
            raise ConfirmationTimeout(
                f"Transaction {tx.txid} ({description}) not confirmed within {timeout} seconds"
            ) from exc

    tx.wait(required_confs)

    if bool(tx.revert_msg) or tx.status == 0:
        raise ProtocolRejected(
            f"Failed to {description}. Revert message: {tx.revert_msg}"
        )

    logger.debug("%s confirmed in transaction %s", description, tx.txid)
    return tx
