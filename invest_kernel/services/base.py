"""
BaseService -- abstract base for kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for the
    schema registry, settings gateway, balance ledger, transaction log and
    investment state store.  Each receives a SQLAlchemy ``Session`` from
    the distributor; writers use ``session.flush()`` -- never
    ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's item
      transaction and never commit or rollback themselves.  The distributor
      owns commit/rollback, so the ledger, log and state writes for one
      investment land together or not at all.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.
    """

    def __init__(self, session: Session):
        self.session = session
