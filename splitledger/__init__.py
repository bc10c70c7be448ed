"""
splitledger - Source Package

Balance ledger engine for shared expenses: turns recorded expenses into
per-group and per-friend balances and a single net position for the
signed-in user.

DESIGN PRINCIPLES:
1. Balances are derived, never stored
2. Invalid expenses are rejected before they reach the resolvers
3. Drafts never count
4. Every change to the expense book is auditable
5. Storage is supplied by the caller
"""

# Importing the audit logger configures structlog for the whole package
import splitledger.audit.logger  # noqa: F401

__version__ = "1.0.0"
__author__ = "splitledger Team"
