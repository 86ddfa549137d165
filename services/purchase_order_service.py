"""
Purchase order draft service.

Groups replenishment lines into one draft per supplier. Persisting,
sending and receiving drafts belong to the caller; references come
from a caller-supplied sequence so the same input always yields the
same drafts.
"""

from datetime import datetime
from typing import Iterable, Optional
from uuid import NAMESPACE_URL, uuid5
import structlog

from config.planning import UNASSIGNED_SUPPLIER_LABEL
from exceptions import PurchasingNotPermittedError
from models.purchase_order import PurchaseOrderDraft, PurchaseOrderLine, PurchaseOrderStatus
from utils.date_utils import as_utc
from utils.text_utils import clean_label, name_sort_key

logger = structlog.get_logger(__name__)


def supplier_group_label(line: PurchaseOrderLine) -> str:
    """Trimmed supplier name; blank suppliers share one group."""
    return clean_label(line.preferred_supplier) or UNASSIGNED_SUPPLIER_LABEL


class PurchaseOrderService:
    """Draft purchase order business logic."""

    def create_drafts_grouped_by_supplier(
        self,
        lines: Iterable[PurchaseOrderLine],
        created_at: datetime,
        can_manage_purchasing: bool,
        workspace_id: Optional[str] = None,
        source: str = "manual",
        notes: str = "",
        reference_start: int = 1001,
    ) -> list[PurchaseOrderDraft]:
        """
        Create one draft per supplier.

        Lines with no suggested units are dropped. Suppliers are ordered
        case-insensitively and so are the lines inside each draft.
        References run PO-<reference_start>, PO-<reference_start + 1>, ...

        Raises:
            PurchasingNotPermittedError: caller lacks the purchasing capability

        Returns:
            Drafts, or [] when no line has units to order
        """
        if not can_manage_purchasing:
            logger.warning("purchase_order_draft_denied", source=source, workspace_id=workspace_id)
            raise PurchasingNotPermittedError()

        orderable = [line for line in lines if line.suggested_units > 0]
        if not orderable:
            logger.info("purchase_order_draft_skipped", source=source, reason="no_orderable_lines")
            return []

        grouped: dict[str, list[PurchaseOrderLine]] = {}
        for line in orderable:
            grouped.setdefault(supplier_group_label(line), []).append(line)

        base_notes = clean_label(notes)
        drafts = []
        for offset, supplier in enumerate(sorted(grouped, key=name_sort_key)):
            supplier_lines = sorted(
                grouped[supplier],
                key=lambda line: (name_sort_key(line.item_name), line.id),
            )
            supplier_note = f"Supplier batch: {supplier}."
            drafts.append(self.build_draft(
                lines=supplier_lines,
                supplier_label=supplier,
                reference=f"PO-{reference_start + offset}",
                created_at=created_at,
                workspace_id=workspace_id,
                source=source,
                notes=f"{supplier_note} {base_notes}" if base_notes else supplier_note,
            ))

        logger.info(
            "purchase_order_drafts_created",
            source=source,
            drafts=len(drafts),
            lines=len(orderable),
            units=sum(d.total_suggested_units for d in drafts),
        )
        return drafts

    def build_draft(
        self,
        lines: list[PurchaseOrderLine],
        supplier_label: str,
        reference: str,
        created_at: datetime,
        workspace_id: Optional[str] = None,
        source: str = "manual",
        notes: str = "",
    ) -> PurchaseOrderDraft:
        """Assemble a DRAFT order; the id is derived from reference and time."""
        created_at = as_utc(created_at)
        draft_id = uuid5(NAMESPACE_URL, f"purchase-order/{reference}/{created_at.isoformat()}")

        return PurchaseOrderDraft(
            id=str(draft_id),
            reference=reference,
            supplier_label=supplier_label,
            workspace_id=workspace_id,
            created_at=created_at,
            updated_at=created_at,
            status=PurchaseOrderStatus.DRAFT,
            source=source,
            notes=notes,
            lines=tuple(lines),
        )


# Singleton instance
_purchase_order_service: Optional[PurchaseOrderService] = None


def get_purchase_order_service() -> PurchaseOrderService:
    """Get or create PurchaseOrderService instance."""
    global _purchase_order_service
    if _purchase_order_service is None:
        _purchase_order_service = PurchaseOrderService()
    return _purchase_order_service
