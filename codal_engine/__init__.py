"""
Compliance Engine Module.

This module contains the rule engines that evaluate finished drainage
networks against building and drainage codes.

CRITICAL PRINCIPLES:
- Determines compliance (PASS / FAIL / WARN)
- NEVER sizes pipes
- NEVER considers cost
"""

from codal_engine.base import ComplianceEngine, summarize
from codal_engine.nbc_engine import NBCEngine

__all__ = [
    'ComplianceEngine',
    'NBCEngine',
    'summarize',
]
