"""Domain layer for budgetledger application.

Services live in their own modules (``budgetledger.domain.importer``,
``budgetledger.domain.transaction``, ...) and are imported from there; the
database layer imports ``budgetledger.domain.entities`` while this package
is still initializing.
"""
