"""
Module ORM Registry (``ops_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before
``ops_kernel.db.engine.create_tables()`` runs.

Architecture position
---------------------
**Modules layer** -- utility.  Imported lazily by the kernel's
``create_tables``; MUST NOT be imported at module level by ``ops_kernel``.
"""


def import_all_orm_models() -> None:
    """Import every ``ops_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    import ops_kernel.services.sequence_service  # noqa: F401  # sequence_counters
    import ops_modules.inventory.orm  # noqa: F401
    import ops_modules.invoices.orm  # noqa: F401
    import ops_modules.purchasing.orm  # noqa: F401
    import ops_modules.quotations.orm  # noqa: F401
