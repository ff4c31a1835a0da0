"""Domain layer for servicebook application.

Services are imported from their modules directly
(``from servicebook.domain.ledger import LedgerService``) so that the
database layer can depend on ``servicebook.domain.entities`` without a cycle.
"""
