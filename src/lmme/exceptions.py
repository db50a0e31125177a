"""Exception types raised by LMME."""


class LMMEError(Exception):
    """Base class for all LMME errors."""


class InputMissingError(LMMEError):
    """Raised when an action is invoked before the data it depends on exists.

    Examples are running a decomposition without a model, or running an
    over-representation analysis before an overview graph was constructed.
    The session is left untouched when this is raised.
    """


class CloningError(LMMEError):
    """Raised when the species cloning preprocessing step cannot be performed."""


class SubsystemFrozenError(LMMEError):
    """Raised when a subsystem is modified after it was added to a decomposition."""


class UnknownDecompositionMethodError(LMMEError, KeyError):
    """Raised when a decomposition method name is not registered."""
