"""
Error types for wordchain.
"""

from __future__ import annotations


class WordchainError(RuntimeError):
    """
    Base class for errors raised by the wordchain pipeline.
    """


class UsageError(WordchainError):
    """
    Required command-line inputs are missing or inconsistent.
    """


class ModelError(WordchainError):
    """
    A structural invariant was violated while compiling a transition graph.
    """


class EncodingError(WordchainError):
    """
    A value does not fit the fixed-width field it must be written to.

    :param field: Name of the field being written.
    :type field: str
    :param value: Offending value or size.
    :type value: int
    :param limit: Largest value the field can hold.
    :type limit: int
    """

    def __init__(self, *, field: str, value: int, limit: int) -> None:
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"Value too large for {field}: {value} (limit {limit})")


class CorruptDataError(WordchainError):
    """
    A serialized model is truncated or structurally invalid.

    :param message: Description of the problem.
    :type message: str
    :param offset: Byte offset at which decoding failed.
    :type offset: int
    """

    def __init__(self, message: str, *, offset: int) -> None:
        self.offset = offset
        super().__init__(f"{message} (offset {offset})")


class GenerationError(WordchainError):
    """
    A random walk reached a state that a well-formed model cannot produce.
    """
