"""
Dairy Ledger - Source Package

Billing and delivery tracking for a home milk-delivery business.

DESIGN PRINCIPLES:
1. One owned store, explicit mutations
2. Fail early, fail visibly
3. No silent corrections of user input
4. Every mutation is auditable
5. Backup storage is swappable
"""

__version__ = "1.0.0"
__author__ = "Dairy Ledger Team"
