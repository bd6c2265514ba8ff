"""Transport layer: serial port, bus direction, and transactions."""

from .serial_connection import SerialConnection
from .direction import BusDirectionController
from .transceiver import Transceiver, TransactionResult
