"""Protocol layer: frame encoding, command table, and reply parsing."""

from .framing import EncodingError, ResponseBuffer, encode_hex_frame
from .commands import Command, command_for_code
from .parser import ResponseOutcome, StatusResponse, ValidationError, decode_status
