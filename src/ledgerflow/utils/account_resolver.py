"""Utility for resolving account names to IDs."""

from ledgerflow.domain.account import AccountService
from ledgerflow.domain.errors import NotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(account_not_found(account))
        return account

    # Try to parse as integer (handles string IDs like "1")
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    by_name = account_service.get_account_by_name(str(account).strip())
    if by_name is not None:
        return by_name.id

    raise NotFoundError(account_not_found(f"'{account}'"))
