"""
Shared utilities: seeded site generation and logging setup.
"""

from .random import make_rng, generate_sites
from .logging import configure_logging

__all__ = ['make_rng', 'generate_sites', 'configure_logging']
