"""
Token and sentinel types for wordchain.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Sentinel(Enum):
    """
    Synthetic markers bounding every training sequence.

    Enum members never compare equal to strings, so no input token can collide with them.
    """

    START = "start"
    END = "end"

    def __repr__(self) -> str:
        return f"<{self.name}>"


START = Sentinel.START
END = Sentinel.END

Token = Union[str, Sentinel]


def is_word(token: object) -> bool:
    """
    Return whether a value is an ordinary word token.

    :param token: Candidate token.
    :type token: object
    :return: True for strings, False for sentinels and anything else.
    :rtype: bool
    """
    return isinstance(token, str)
