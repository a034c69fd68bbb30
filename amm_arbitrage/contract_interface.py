# Settlement contract interaction
# amm_arbitrage/contract_interface.py
"""
Contract Interface - Settlement Contract Interaction Layer

Thin wrapper around the flash-loan settlement contract. The evaluator
only reads gas estimates and ownership from it; signing and sending
happen here, on behalf of the executor, and only when a private key is
configured.
"""

from dataclasses import dataclass
from typing import Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, TransactionNotFound

from config.addresses import get_token_symbol
from config.settings import Settings
from .cost_model import gas_units_with_margin
from .exceptions import ExecutionError
from .utils.logger import get_logger

logger = get_logger(__name__)

SETTLEMENT_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"}
        ],
        "name": "requestFlashLoan",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "address", "name": "token", "type": "address"}],
        "name": "getBalance",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]


@dataclass
class TradeResult:
    """Outcome of one requestFlashLoan submission"""
    success: bool
    tx_hash: Optional[str] = None
    gas_used: Optional[int] = None
    block_number: Optional[int] = None
    error: Optional[str] = None


class ContractInterface:
    """
    Handles settlement contract interactions.

    Without a private key the interface is read-only and every
    submission returns a failed TradeResult.
    """

    def __init__(self, settings: Settings, w3: Web3):
        self.settings = settings
        self.w3 = w3
        self.account = None
        self.contract = None
        self.timeout_seconds = settings.execution.receipt_timeout

        if settings.execution.private_key:
            self.account = Account.from_key(settings.execution.private_key)
            logger.info(f"Account loaded: {self.account.address}")

        address = settings.execution.settlement_contract_address
        if address:
            self.contract = self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=SETTLEMENT_ABI)
            logger.info(f"Settlement contract loaded: {address}")
        else:
            logger.warning("⚠️ No settlement contract configured")

    @property
    def can_execute(self) -> bool:
        return self.account is not None and self.contract is not None

    def estimate_flash_loan_gas(self, token: str, amount: int) -> Optional[int]:
        """Raw gas estimate for requestFlashLoan, None when unavailable"""
        if self.contract is None:
            return None

        tx_params = {'from': self.account.address} if self.account else {}
        try:
            return int(self.contract.functions.requestFlashLoan(
                Web3.to_checksum_address(token), amount
            ).estimate_gas(tx_params))
        except ContractLogicError as e:
            logger.debug(f"requestFlashLoan would revert: {e}")
            return None
        except Exception as e:
            logger.debug(f"Gas estimation failed: {e}")
            return None

    def execution_gas_limit(self, token: str, amount: int) -> int:
        """Estimate plus 20%, or the configured fallback"""
        estimate = self.estimate_flash_loan_gas(token, amount)
        if not estimate:
            return self.settings.execution.execution_gas_limit_fallback
        return gas_units_with_margin(estimate, self.settings.trading.gas_safety_margin)

    def owner(self) -> Optional[str]:
        if self.contract is None:
            return None
        try:
            return self.contract.functions.owner().call()
        except Exception as e:
            logger.error(f"Failed to read contract owner: {e}")
            return None

    def is_owner(self) -> bool:
        """True when the configured account owns the settlement contract"""
        if self.account is None:
            return False
        owner = self.owner()
        return owner is not None and owner.lower() == self.account.address.lower()

    def ensure_executable(self):
        """
        Raises:
            ExecutionError: no signer, no settlement contract, or the signer is not the owner
        """
        if not self.can_execute:
            raise ExecutionError("Report-only mode: no private key or settlement contract")
        if not self.is_owner():
            raise ExecutionError(f"Account {self.account.address} does not own the settlement contract")

    def get_balance(self, token: str) -> int:
        """Settlement contract balance of token, in base units"""
        if self.contract is None:
            return 0
        try:
            return int(self.contract.functions.getBalance(Web3.to_checksum_address(token)).call())
        except Exception as e:
            logger.error(f"Failed to get contract balance for {get_token_symbol(token)}: {e}")
            return 0

    def get_native_balance(self) -> int:
        """Gas balance of the signing account, in wei"""
        if self.account is None:
            return 0
        try:
            return int(self.w3.eth.get_balance(self.account.address))
        except Exception as e:
            logger.error(f"Failed to get account balance: {e}")
            return 0

    def request_flash_loan(self, token: str, amount: int, gas_limit: Optional[int] = None) -> TradeResult:
        """
        Sign and submit requestFlashLoan, then wait for the receipt.

        Args:
            token: Asset to borrow
            amount: Amount in base units
            gas_limit: Gas limit; estimated with margin when omitted

        Returns:
            TradeResult with the transaction hash and receipt details
        """
        if not self.can_execute:
            return TradeResult(success=False, error="No private key or settlement contract configured")

        try:
            gas_limit = gas_limit or self.execution_gas_limit(token, amount)
            txn = self.contract.functions.requestFlashLoan(
                Web3.to_checksum_address(token), amount
            ).build_transaction({
                'from': self.account.address,
                'gas': gas_limit,
                'gasPrice': self.w3.eth.gas_price,
                'nonce': self.w3.eth.get_transaction_count(self.account.address),
                'chainId': self.settings.network.chain_id,
            })

            signed_txn = self.account.sign_transaction(txn)
            tx_hash = self.w3.eth.send_raw_transaction(signed_txn.raw_transaction)
            logger.info(f"Transaction sent: {tx_hash.hex()}")
        except Exception as e:
            logger.error(f"Failed to submit flash loan: {e}")
            return TradeResult(success=False, error=str(e))

        return self._wait_for_confirmation(tx_hash)

    def _wait_for_confirmation(self, tx_hash) -> TradeResult:
        try:
            logger.info("Waiting for transaction confirmation...")
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.timeout_seconds)
        except (TimeExhausted, TransactionNotFound) as e:
            logger.error(f"Transaction not confirmed: {e}")
            return TradeResult(success=False, tx_hash=tx_hash.hex(), error=str(e))

        if receipt['status'] != 1:
            logger.error(f"Transaction reverted: {tx_hash.hex()}")
            return TradeResult(success=False, tx_hash=tx_hash.hex(), gas_used=receipt['gasUsed'],
                               block_number=receipt['blockNumber'], error="Transaction reverted")

        logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
        logger.info(f"Gas used: {receipt['gasUsed']:,}")
        return TradeResult(success=True, tx_hash=tx_hash.hex(), gas_used=receipt['gasUsed'],
                           block_number=receipt['blockNumber'])

    def __str__(self) -> str:
        account = self.account.address[:8] if self.account else "read-only"
        return f"ContractInterface(account={account}...)"
