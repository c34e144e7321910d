"""
SchemaRegistry -- read-only lookup of investment plans.

Responsibility:
    Resolves a schema id to an immutable ``InvestmentSchema`` record.  Only
    active schemas are returned; a missing or disabled plan is reported as
    ``SchemaNotFoundError`` so the calling item fails in isolation.

Architecture position:
    Kernel > Services.  Leaf dependency of the distributor.
"""

from uuid import UUID

from sqlalchemy import select

from invest_kernel.domain.types import InvestmentSchema
from invest_kernel.exceptions import SchemaNotFoundError
from invest_kernel.logging_config import get_logger
from invest_kernel.models.investment_schema import InvestmentSchemaModel
from invest_kernel.services.base import BaseService

logger = get_logger("services.schema_registry")


class SchemaRegistry(BaseService):
    """Lookup of active investment schemas."""

    def get_schema_by_id(
        self,
        schema_id: UUID,
        investment_id: UUID | None = None,
    ) -> InvestmentSchema:
        """
        Return the active schema with ``schema_id``.

        Raises:
            SchemaNotFoundError: No row, or the schema is inactive.
        """
        model = self.session.execute(
            select(InvestmentSchemaModel).where(
                InvestmentSchemaModel.id == schema_id,
                InvestmentSchemaModel.is_active.is_(True),
            )
        ).scalar_one_or_none()

        if model is None:
            logger.warning(
                "schema_not_found",
                extra={
                    "schema_id": str(schema_id),
                    "investment_id": str(investment_id) if investment_id else None,
                },
            )
            raise SchemaNotFoundError(
                str(schema_id),
                str(investment_id) if investment_id is not None else None,
            )

        return model.to_dto()
