"""Discovery across all registered providers."""

from .aggregator import DiscoveryAggregator, merge_results

__all__ = ["DiscoveryAggregator", "merge_results"]
