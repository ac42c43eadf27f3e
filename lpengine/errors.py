"""Pool and router error classes.

Errors are grouped by what a caller can do about them:
- InputValidationError: the call itself is malformed
- InvariantError: the pool refused a state transition
- SlippageError: a caller-supplied bound was not met; adjust and retry
- LiquidityStateError: the pool state cannot serve the request
- ReentrancyError: a locked pool was re-entered from a callback
- LedgerError: balance, allowance or permission failure on an asset
"""


class AMMError(Exception):
    """Base error for pool and router operations."""

    code: str = "amm_error"
    category: str = "amm"
    message: str = "AMM operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InputValidationError(AMMError):
    category = "input_validation"


class InvariantError(AMMError):
    category = "invariant"


class SlippageError(AMMError):
    """Conditions not met; callers may retry with looser bounds."""

    category = "slippage"


class LiquidityStateError(AMMError):
    category = "liquidity_state"


class LedgerError(AMMError):
    category = "ledger"


class ReentrancyError(AMMError):
    """A mutating pool entry point was called while the pool was locked."""

    code = "reentrancy"
    category = "reentrancy"
    message = "Pool is locked"


# --- Input validation ---


class NotSingleSided(InputValidationError):
    code = "not_single_sided"
    message = "Only single-sided swaps allowed"


class MustSendPositiveBase(InputValidationError):
    code = "must_send_positive_base"
    message = "Must input a positive base amount"


class NoSharesProvided(InputValidationError):
    code = "no_shares_provided"
    message = "Need shares to remove liquidity"


class MustBeTaxed(InputValidationError):
    code = "must_be_taxed"
    message = "Transfer tax must be active"


class MustNotBeTaxed(InputValidationError):
    code = "must_not_be_taxed"
    message = "Transfer tax must not be active"


class InvalidAmount(InputValidationError):
    code = "invalid_amount"
    message = "Amount must be a non-negative integer"


class InvalidRecipient(InputValidationError):
    code = "invalid_recipient"
    message = "Invalid recipient"


class UnsolicitedTransfer(InputValidationError):
    """Base asset arrived outside of a payable entry point."""

    code = "unsolicited_transfer"
    message = "Direct base transfers are not accepted"


class InsufficientInputAmount(InputValidationError):
    code = "insufficient_input_amount"
    message = "Insufficient base/quote input amount"


# --- Invariant ---


class KInvariantViolated(InvariantError):
    """Fee-adjusted reserve product would decrease."""

    code = "k_invariant_violated"
    message = "Fee-adjusted constant product decreased"


class InsufficientLiquidity(InvariantError, LiquidityStateError):
    """Requested output meets or exceeds the reserve, or the pool is empty."""

    code = "insufficient_liquidity"
    category = "liquidity_state"
    message = "Not enough liquidity"


# --- Liquidity state ---


class InsufficientInitialLiquidity(LiquidityStateError):
    code = "insufficient_initial_liquidity"
    message = "Initial deposit does not cover the locked minimum liquidity"


class ZeroLiquidityMinted(LiquidityStateError):
    code = "zero_liquidity_minted"
    message = "Deposit would mint zero shares"


class ZeroAmountBurned(LiquidityStateError):
    code = "zero_amount_burned"
    message = "Burn would return zero of an asset"


class InsufficientReserves(LiquidityStateError):
    code = "insufficient_reserves"
    message = "Reserves must be positive to quote"


# --- Slippage ---


class InsufficientBaseAmount(SlippageError):
    code = "insufficient_base_amount"
    message = "Insufficient base amount"


class InsufficientQuoteAmount(SlippageError):
    code = "insufficient_quote_amount"
    message = "Insufficient quote amount"


class BaseMinimumTooHigh(SlippageError):
    code = "base_minimum_too_high"
    message = "Base minimum too high"


class QuoteMinimumTooHigh(SlippageError):
    code = "quote_minimum_too_high"
    message = "Quote minimum too high"


class BelowMinimumOut(SlippageError):
    code = "below_minimum_out"
    message = "Did not meet minimum output conditions"


class InsufficientOutputAmount(SlippageError):
    code = "insufficient_output_amount"
    message = "Swap output rounds down to zero"


# --- Ledger ---


class InsufficientBalance(LedgerError):
    code = "insufficient_balance"
    message = "Transfer amount exceeds balance"


class InsufficientAllowance(LedgerError):
    code = "insufficient_allowance"
    message = "Insufficient allowance"


class LockedSharesError(LedgerError):
    """The sink's locked minimum liquidity can never be debited."""

    code = "locked_shares"
    message = "Locked minimum liquidity cannot move"


class Unauthorized(LedgerError):
    code = "unauthorized"
    message = "Caller is not allowed to perform this action"


class BalanceOverflow(LedgerError):
    code = "balance_overflow"
    message = "Balance or supply would exceed uint256"
