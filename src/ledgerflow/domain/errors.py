"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class NoUsableRowsError(ValidationError):
    """Parsing finished but not a single row survived normalization."""

    def __init__(self, source_label: str, row_count: int):
        self.source_label = source_label
        self.row_count = row_count
        super().__init__(
            f"No usable transactions found in '{source_label}' "
            f"({row_count} row{'s' if row_count != 1 else ''} read). "
            "Check that the file has a date column and an amount or debit/credit columns."
        )


class StatementParseError(ValidationError):
    """Free-text statement input could not be parsed.

    The user's original input is kept on the exception so the caller can
    offer it back for editing and retry.
    """

    retryable = True

    def __init__(self, message: str, original_text: str):
        self.original_text = original_text
        super().__init__(message)


def account_not_found(account: int | str) -> str:
    """Return message for missing account."""
    return f"Account {account} not found"


def account_name_exists(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def no_transaction_types() -> str:
    """Return message when the type table is empty."""
    return "No transaction types defined. Run 'ledgerflow type init' first."


def invalid_rule(name: str, reason: str) -> str:
    """Return message for a rule definition that cannot be loaded."""
    return f"Invalid rule '{name}': {reason}"
