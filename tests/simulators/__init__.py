"""
TCP peer simulators for session testing.

Provide real sockets on 127.0.0.1 so sessions can be exercised
without hardware.
"""
from .base_simulator import BaseSimulator
from .peer_simulators import EchoSimulator, HangupSimulator, ResetSimulator, SilentSimulator

__all__ = [
    "BaseSimulator",
    "EchoSimulator",
    "HangupSimulator",
    "ResetSimulator",
    "SilentSimulator",
]
