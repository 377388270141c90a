"""
Invoices Module.

Customer invoices, created directly or from an approved quotation, and the
payments recorded against them.
"""

from ops_modules.invoices.models import Invoice, InvoiceDraft

__all__ = [
    "Invoice",
    "InvoiceDraft",
]
