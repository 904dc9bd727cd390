"""Shared state module for Recent Workspaces MCP.

This module provides a single shared instance of configuration, the provider
list and the discovery aggregator used by the tool modules.  Providers hold
their caches, so sharing them is what makes repeated queries cheap.

All tool modules should import CONFIG, PROVIDERS and AGGREGATOR from this
module instead of creating their own instances.
"""

from __future__ import annotations

from .config import Config
from .discovery.aggregator import DiscoveryAggregator
from .providers.base import WorkspaceProvider
from .providers.registry import build_providers

# Single shared configuration loaded once at import time
CONFIG: Config = Config.load_from_env()

# Providers in priority order, each with its own timestamp cache
PROVIDERS: list[WorkspaceProvider] = build_providers(CONFIG)

# Single shared aggregator - every query goes through this
AGGREGATOR: DiscoveryAggregator = DiscoveryAggregator(PROVIDERS)
