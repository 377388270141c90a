"""
Quotations Module.

Priced offers to customers.  A quotation's breakdown is fixed when it is
drafted and carried over verbatim when an approved quotation is invoiced.
"""

from ops_modules.quotations.models import Quotation, QuotationDraft

__all__ = [
    "Quotation",
    "QuotationDraft",
]
