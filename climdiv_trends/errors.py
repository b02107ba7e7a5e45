"""Exceptions raised (or collected) by the trend pipeline."""


class ClimdivError(Exception):
    """Base class for all pipeline errors."""


class SchemaError(ClimdivError):
    """A required column is missing or has the wrong type in an input table."""

    def __init__(self, table, missing=(), mistyped=()):
        self.table = table
        self.missing = list(missing)
        self.mistyped = list(mistyped)
        parts = []
        if self.missing:
            parts.append('missing columns: %s' % ', '.join(self.missing))
        if self.mistyped:
            parts.append('mistyped columns: %s' % ', '.join(self.mistyped))
        super().__init__('table %s: %s' % (table, '; '.join(parts)))


class InsufficientData(ClimdivError):
    """A series cannot support a linear trend (too few points or one distinct year)."""

    def __init__(self, key, n_points, n_years):
        self.key = key
        self.n_points = n_points
        self.n_years = n_years
        super().__init__('%s: %i points over %i distinct years, need at least 2 years'
                         % (key, n_points, n_years))


class UnrecognizedMonth(ClimdivError):
    """A month value is not one of the twelve three-letter abbreviations."""

    def __init__(self, values, units=()):
        self.values = list(values)
        self.units = list(units)
        msg = 'unrecognized month value(s): %s' % ', '.join(repr(v) for v in self.values)
        if self.units:
            msg += ' (units: %s)' % ', '.join(str(u) for u in self.units)
        super().__init__(msg)


class JoinMismatch(ClimdivError):
    """Ids present on one side of a join but not the other.

    Normally collected and reported as a diagnostic; raised only when joins
    are configured to be strict. Evaluates False when both sides match.
    """

    def __init__(self, left_name, right_name, left_only=(), right_only=()):
        self.left_name = left_name
        self.right_name = right_name
        self.left_only = sorted(left_only)
        self.right_only = sorted(right_only)
        super().__init__('%i ids in %s without %s, %i ids in %s without %s'
                         % (len(self.left_only), left_name, right_name,
                            len(self.right_only), right_name, left_name))

    def __bool__(self):
        return bool(self.left_only or self.right_only)


class InputReadError(ClimdivError):
    """An input file exists but cannot be read."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__('cannot read %s: %s' % (path, reason))
