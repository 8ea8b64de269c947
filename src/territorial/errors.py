"""Exception types raised by the policy engine."""


class TerritorialError(Exception):
    """Base class for territorial policy errors."""


class RuleParseError(TerritorialError, ValueError):
    """Raised when a raw rule table cannot be turned into a rule."""


class UnknownCategoryError(TerritorialError, KeyError):
    """Raised when a rule category has no corresponding rule list."""
