# exceptions.py
"""Error taxonomy for derived-parameter extraction."""


class TPCParamsError(Exception):
    """Base class for all tpcparams-specific exceptions."""


class EmptyGridError(TPCParamsError, ValueError):
    """A sampling operation produced no finite (temp, rate) pair."""


class InsufficientDataError(TPCParamsError, ValueError):
    """Too few points on one side of topt for a local regression."""


class BoundaryNotFoundError(TPCParamsError):
    """No grid point satisfies a boundary criterion. Handled inside the boundary search."""


__all__ = [
    'TPCParamsError',
    'EmptyGridError',
    'InsufficientDataError',
    'BoundaryNotFoundError',
]
