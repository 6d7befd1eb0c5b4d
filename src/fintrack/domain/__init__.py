"""Domain layer for fintrack application.

Services live in their own modules (``fintrack.domain.ledger``,
``fintrack.domain.transaction``, ...) and are imported from there; this
package does not re-export them so that the database layer can import
``fintrack.domain.entities`` without pulling in the services.
"""
