"""
Operations Hub Kernel

Shared foundation for quotations, invoices and purchase orders:
- Typed, coded exceptions
- Structured JSON logging
- Immutable domain values and document state machines
- Database base classes, engine and transactional scope
- Document numbering and per-document write locks
"""

__version__ = "0.1.0"
