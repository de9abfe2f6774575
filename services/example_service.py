from typing import Literal, Optional

from typing_extensions import NotRequired, TypedDict, Unpack


class Address(TypedDict):
    street: str
    city: NotRequired[str | int]
    country: NotRequired[str]


class User(TypedDict):
    name: str
    age: float
    address: NotRequired[Address]


class BalanceQuery(TypedDict):
    user: User
    token: int


async def get_user_token_balance(**query: Unpack[BalanceQuery]) -> None:
    """
    Fetch the token balance for a user based on their username and token details.

    Args:
        user: The user. This can be a wallet address, Discord ID, etc.
        token: The token to search for, which can be its symbol, address, or name.
    """


def this_is_a_new_function(param1: str, param2: float) -> None:
    """
    Just testing a new function

    Args:
        param1: this is the description for param1
        param2: this is the description for param2
    """


def set_status(status: Literal["active", "inactive"], reason: Optional[str] = None) -> None:
    """
    Change the status of the current account.

    Args:
        status: The new status.
        reason: Why the status changes.
    """
