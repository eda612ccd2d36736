"""
Tenant Finance Core - Source Package

The accounting core of a multi-tenant small-business finance product:
chart of accounts, double-entry posting, ledger, statements, period
closing, inventory costing and tax reporting.

DESIGN PRINCIPLES:
1. Debits equal credits, always
2. Fail early, fail visibly
3. No silent corrections
4. The ledger is append-only
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Tenant Finance Team"
