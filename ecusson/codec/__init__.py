"""History import/export package."""

from ecusson.codec.history import (
    EmptyHistoryError,
    HistoryFileError,
    HistoryTransfer,
    HistoryTransferError,
    decode_history,
    encode_history,
    parse_history_line,
)

__all__ = [
    "EmptyHistoryError",
    "HistoryFileError",
    "HistoryTransfer",
    "HistoryTransferError",
    "decode_history",
    "encode_history",
    "parse_history_line",
]
