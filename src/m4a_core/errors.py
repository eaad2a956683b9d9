"""Error kinds raised while decoding or encoding atom payloads."""
from __future__ import annotations

ERRORS = {
    "E_PARSING": "Malformed atom structure",
    "E_UNKNOWN_DATA_TYPE": "Unknown data type code",
    "E_UNWRITABLE_DATA_TYPE": "Data type cannot be written",
    "E_IO": "Read or write on the underlying stream failed",
    "E_ENCODING": "Invalid text encoding",
}


class AtomError(Exception):
    """Base class for every failure surfaced by m4a_core."""

    code = "E_PARSING"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        message = ERRORS[self.code]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def to_dict(self) -> dict:
        err = {"code": self.code, "message": ERRORS[self.code]}
        if self.detail:
            err["detail"] = self.detail
        return err


class ParsingError(AtomError):
    code = "E_PARSING"


class UnknownDataTypeError(AtomError):
    code = "E_UNKNOWN_DATA_TYPE"

    def __init__(self, datatype: int):
        self.datatype = datatype
        super().__init__(str(datatype))

    def to_dict(self) -> dict:
        err = super().to_dict()
        err["datatype"] = self.datatype
        return err


class UnwritableDataTypeError(AtomError):
    code = "E_UNWRITABLE_DATA_TYPE"


class AtomIOError(AtomError):
    code = "E_IO"


class EncodingError(AtomError):
    code = "E_ENCODING"
