class RuleMinerError(Exception):
    """Base class of every error raised by ruleminer."""


class KeyLengthError(RuleMinerError, ValueError):
    """A key tuple does not have the length the HashTree was built for."""


class EmptyTransactionSetError(RuleMinerError, ValueError):
    """Mining was requested on a data set without transactions."""


class LatticeConsistencyError(RuleMinerError, RuntimeError):
    """An itemset needed during rule generation is missing from the lattice or has no support."""
