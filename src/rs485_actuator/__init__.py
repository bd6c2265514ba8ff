"""Half-duplex RS-485 driver for a light/fan dimmer actuator."""

__version__ = "0.1.0"
