"""Chainfolio Package.

This package discovers and normalizes wallet holdings across EVM chains and
Bitcoin (including Ordinals inscriptions), and relays inscription content
through a same-origin HTTP endpoint.
"""

__version__ = "0.1.0"
__author__ = "Chainfolio Contributors"
__email__ = "dev@chainfolio.example"
