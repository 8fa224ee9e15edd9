"""Application service: Update Order Status use case (admin only).

Transitions are deliberately permissive: any status may follow any other.
The only rejected change is one that would leave the status as it is.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import StatusChangeDTO
from storefront.domain.exceptions import EntityNotFoundError, PermissionDeniedError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, actor: AuthenticatedUser, order_id: int, new_status: str | None
    ) -> StatusChangeDTO:
        # Checked before the payload is parsed.
        if not actor.is_admin:
            raise PermissionDeniedError(
                "Access denied. This action requires administrator privileges.",
                {"required_role": "admin", "current_role": actor.role.value},
            )

        status = OrderStatus.parse(new_status)

        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError("Order not found.", {"order_id": order_id})

            change = order.change_status(status, changed_by=actor.id)
            self._uow.orders.record_status_change(order, change)
            self._uow.commit()

        logger.info(
            "order_status_changed",
            admin_id=actor.id,
            admin_email=actor.email,
            order_id=order.id,
            order_number=order.order_number,
            previous_status=change.previous_status.value,
            new_status=change.new_status.value,
            changed_at=change.changed_at.isoformat(),
        )
        return StatusChangeDTO(
            order_id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            previous_status=change.previous_status.value,
            new_status=change.new_status.value,
            updated_by=actor.id,
        )
