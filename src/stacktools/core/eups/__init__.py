from stacktools.core.eups.abc import Eups
from stacktools.core.eups.noop import NoopEups
from stacktools.core.eups.real import RealEups
from stacktools.core.eups.types import CommandResult

__all__ = [
    "CommandResult",
    "Eups",
    "NoopEups",
    "RealEups",
]
