# livechart/data/errors.py


class LiveChartError(Exception):
    pass


class OutOfOrderError(LiveChartError, ValueError):
    """Append d'un point plus ancien que le dernier du buffer."""


class RangeError(LiveChartError, IndexError):
    """Bornes de slice invalides (bug du ViewportController)."""


class SourceUnavailable(LiveChartError, RuntimeError):
    """La source n'a pas pu fournir de point (transitoire, retry au tick suivant)."""
