"""Exceptions shared across discovery components."""


class DiscoveryCancelled(Exception):
    """Raised inside a cache rebuild when the caller's cancellation signal fires.

    Raising (rather than returning a partial list) keeps half-built results
    out of the cache.  Providers catch it and contribute nothing.
    """
