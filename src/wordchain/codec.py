"""
Binary serialization of compiled wordchain models.

Layout, little-endian throughout::

    u32   row_count                  number of rows after the START row
    table                            START row, no token
    row_count x (table, u8 token_length, token_length bytes of UTF-8)

    table = u32 table_length, table_length x (f64 cumulative_probability, u32 target_index)
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import ValidationError

from .constants import ROW_COUNT_MAX, TABLE_LENGTH_MAX, TOKEN_BYTES_MAX
from .errors import CorruptDataError, EncodingError
from .models import CompiledModel, ModelRow, ProbabilityEntry

logger = logging.getLogger(__name__)

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_ENTRY = struct.Struct("<dI")
_U32_MAX = 0xFFFFFFFF


def _encode_table(buffer: bytearray, row: ModelRow) -> None:
    if len(row.table) > TABLE_LENGTH_MAX:
        raise EncodingError(field="table length", value=len(row.table), limit=TABLE_LENGTH_MAX)
    buffer += _U32.pack(len(row.table))
    for entry in row.table:
        if entry.target_index > _U32_MAX:
            raise EncodingError(field="target index", value=entry.target_index, limit=_U32_MAX)
        buffer += _ENTRY.pack(entry.cumulative_probability, entry.target_index)


def _encode_token(buffer: bytearray, token: str) -> None:
    raw = token.encode("utf-8")
    if len(raw) > TOKEN_BYTES_MAX:
        raise EncodingError(field="token length", value=len(raw), limit=TOKEN_BYTES_MAX)
    buffer += _U8.pack(len(raw))
    buffer += raw


def encode_model(model: CompiledModel) -> bytes:
    """
    Serialize a compiled model.

    :param model: Compiled model.
    :type model: CompiledModel
    :return: Serialized bytes.
    :rtype: bytes
    :raises EncodingError: If a count, index, or token does not fit its field.
    """
    row_count = model.row_count - 1
    if row_count > ROW_COUNT_MAX:
        raise EncodingError(field="row count", value=row_count, limit=ROW_COUNT_MAX)
    buffer = bytearray(_U32.pack(row_count))
    start_row, *word_rows = model.rows
    _encode_table(buffer, start_row)
    for row in word_rows:
        _encode_table(buffer, row)
        _encode_token(buffer, str(row.token))
    return bytes(buffer)


class _Reader:
    """
    Sequential reader over a byte buffer that reports truncation as corrupt data.
    """

    def __init__(self, data: bytes) -> None:
        self._view = memoryview(data)
        self.offset = 0

    def _take(self, size: int, field: str) -> memoryview:
        end = self.offset + size
        if end > len(self._view):
            raise CorruptDataError(
                f"Truncated {field}: needed {size} bytes, {len(self._view) - self.offset} left",
                offset=self.offset,
            )
        chunk = self._view[self.offset : end]
        self.offset = end
        return chunk

    def u8(self, field: str) -> int:
        return _U8.unpack(self._take(_U8.size, field))[0]

    def u32(self, field: str) -> int:
        return _U32.unpack(self._take(_U32.size, field))[0]

    def entries(self, count: int) -> List[Tuple[float, int]]:
        chunk = self._take(count * _ENTRY.size, "probability table")
        return list(_ENTRY.iter_unpack(chunk))

    def text(self, size: int) -> str:
        start = self.offset
        chunk = self._take(size, "token")
        try:
            return bytes(chunk).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptDataError(f"Token is not valid UTF-8: {exc.reason}", offset=start) from exc

    @property
    def remaining(self) -> int:
        return len(self._view) - self.offset


def _decode_table(reader: _Reader) -> Tuple[ProbabilityEntry, ...]:
    length = reader.u32("table length")
    return tuple(
        ProbabilityEntry(cumulative_probability=probability, target_index=target)
        for probability, target in reader.entries(length)
    )


def decode_model(data: bytes) -> CompiledModel:
    """
    Reconstruct a compiled model from serialized bytes.

    :param data: Bytes produced by :func:`encode_model`.
    :type data: bytes
    :return: Compiled model equal to the one encoded.
    :rtype: CompiledModel
    :raises CorruptDataError: If the data is truncated, carries trailing bytes, or decodes to an
        invalid model.
    """
    reader = _Reader(data)
    row_count = reader.u32("row count")
    rows: List[ModelRow] = []
    try:
        rows.append(ModelRow(token=None, table=_decode_table(reader)))
        for _ in range(row_count):
            table = _decode_table(reader)
            token = reader.text(reader.u8("token length"))
            rows.append(ModelRow(token=token, table=table))
        model = CompiledModel(rows=tuple(rows))
    except ValidationError as exc:
        raise CorruptDataError(f"Invalid model structure: {exc}", offset=reader.offset) from exc
    if reader.remaining:
        raise CorruptDataError(
            f"{reader.remaining} trailing bytes after the last row", offset=reader.offset
        )
    return model


def write_model(model: CompiledModel, path: Union[str, Path]) -> Path:
    """
    Serialize a compiled model to a file.

    :param model: Compiled model.
    :type model: CompiledModel
    :param path: Destination file path.
    :type path: str or Path
    :return: Written path.
    :rtype: Path
    :raises EncodingError: If the model cannot be serialized.
    """
    target = Path(path)
    data = encode_model(model)
    target.write_bytes(data)
    logger.info("Wrote %s bytes to %s", len(data), target)
    return target


def read_model(path: Union[str, Path]) -> CompiledModel:
    """
    Load a compiled model from a file.

    :param path: Model file path.
    :type path: str or Path
    :return: Compiled model.
    :rtype: CompiledModel
    :raises FileNotFoundError: If the file does not exist.
    :raises CorruptDataError: If the file contents are not a valid model.
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Model file not found: {source}")
    model = decode_model(source.read_bytes())
    logger.debug("Loaded %s rows from %s", model.row_count, source)
    return model
