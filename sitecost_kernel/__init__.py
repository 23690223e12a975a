"""
Sitecost Kernel - shared foundations for the time-card rollup engine.

Provides:
- Decimal money and ISO date helpers (``sitecost_kernel.domain``)
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
