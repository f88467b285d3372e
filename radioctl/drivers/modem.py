"""In-memory modem backend used by the packaged drivers.

The radio protocol transport is outside radioctl; drivers talk to this
object instead, which keeps the modem-side state and can be told to fail
named operations.
"""

from __future__ import annotations

from radioctl.core.errors import DriverFailureError
from radioctl.core.model import GsmBand, ModemSpec, Technology, UmtsBand


class SimulatedModem:
    def __init__(self, spec: ModemSpec, *, log_prefix: str = "") -> None:
        self.techs = spec.techs
        self.supported_modes = spec.supported_modes
        self.pref_mode: Technology = spec.pref_mode
        self.band_gsm: GsmBand = spec.band_gsm
        self.band_umts: UmtsBand = spec.band_umts
        self.fast_dormancy = spec.fast_dormancy
        self.failures: set[str] = set(spec.failures)
        self.log_prefix = log_prefix
        self.calls: list[str] = []

    def check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise DriverFailureError(f"{self.log_prefix}{operation} failed")
