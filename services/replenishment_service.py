"""
Replenishment service: Core "what to order" business logic.

Computes reorder points and supplier-constrained order quantities from
the same demand and lead-time model the count planner uses.

    demand          = max(average daily usage, moving average)
    reorder point   = max(1, ceil(demand x lead time) + safety stock)
    suggested units = max(1, reorder point - on hand)
                      -> raised to MOQ -> rounded up to case pack

See config/planning.py for the auto-reorder constants.
"""

import math
from decimal import Decimal
from typing import Iterable, Optional
import structlog

from config.planning import (
    URGENT_COVER_RATIO,
    MOVING_DEMAND_WEIGHT,
    BASELINE_DEMAND_WEIGHT,
    REVIEW_WINDOW_FACTOR,
    REVIEW_WINDOW_MIN_DAYS,
    REVIEW_WINDOW_MAX_DAYS,
    HIGH_CONFIDENCE_SAMPLES,
    MEDIUM_CONFIDENCE_SAMPLES,
)
from models.item import ItemSnapshot
from models.purchase_order import PurchaseOrderLine
from models.replenishment import (
    ReplenishmentSignal,
    ReplenishmentStatus,
    AutoReorderSuggestion,
    SuggestionConfidence,
)
from services.unit_normalizer_service import total_units_on_hand
from utils.text_utils import name_sort_key

logger = structlog.get_logger(__name__)


def adjust_for_supplier(
    units: int,
    minimum_order_quantity: int = 0,
    reorder_case_pack: int = 0,
) -> int:
    """
    Apply supplier constraints to a raw order quantity.

    MOQ floor first, then round up to the next whole case pack, so the
    result is both >= MOQ and pack-aligned. 0 means unconstrained.

    Example:
        raw 40, MOQ 50, case pack 12 -> 50 -> 60
    """
    units = max(0, units)
    if units == 0:
        return 0

    moq = max(0, minimum_order_quantity)
    if moq > 0 and units < moq:
        units = moq

    case_pack = max(0, reorder_case_pack)
    if case_pack > 0:
        remainder = units % case_pack
        if remainder:
            units += case_pack - remainder

    return units


class ReplenishmentService:
    """
    Reorder point and order quantity business logic.

    Stateless; every figure comes from the item snapshot passed in.
    """

    def forecast_daily_demand(self, item: ItemSnapshot) -> Decimal:
        """max(average daily usage, moving average or 0)."""
        return item.forecast_daily_demand

    def reorder_point(self, item: ItemSnapshot) -> int:
        """
        On-hand level that should trigger an order.

        Without both demand and lead time, falls back to the safety
        stock floor. Never below 1.
        """
        demand = self.forecast_daily_demand(item)
        lead_time = item.lead_time_days
        safety_stock = max(0, item.safety_stock_units)

        if demand <= 0 or lead_time <= 0:
            return max(1, safety_stock)

        demand_during_lead = math.ceil(demand * lead_time)
        return max(1, demand_during_lead + safety_stock)

    def suggested_units(self, item: ItemSnapshot) -> int:
        """
        Units to order now, supplier constraints applied.

        Always at least 1; callers decide whether an order is needed
        (see signal()).
        """
        on_hand = max(0, total_units_on_hand(item))
        raw = max(1, self.reorder_point(item) - on_hand)
        return adjust_for_supplier(raw, item.minimum_order_quantity, item.reorder_case_pack)

    def build_purchase_order_line(
        self,
        item: ItemSnapshot,
        suggested_units: Optional[int] = None,
        reorder_point: Optional[int] = None,
        forecast_daily_demand: Optional[Decimal] = None,
    ) -> PurchaseOrderLine:
        """
        Build an immutable order line for one item.

        Figures default to this engine's own calculations; the
        auto-reorder path passes its target-based quantity instead.
        Supplier and constraint fields are carried so the caller can
        group lines by supplier.
        """
        return PurchaseOrderLine(
            id=item.id,
            item_id=item.id,
            item_name=item.name,
            category=item.category,
            suggested_units=self.suggested_units(item) if suggested_units is None else suggested_units,
            reorder_point=self.reorder_point(item) if reorder_point is None else reorder_point,
            on_hand_units=total_units_on_hand(item),
            lead_time_days=item.lead_time_days,
            forecast_daily_demand=(
                self.forecast_daily_demand(item) if forecast_daily_demand is None else forecast_daily_demand
            ),
            preferred_supplier=item.preferred_supplier,
            supplier_sku=item.supplier_sku,
            minimum_order_quantity=item.minimum_order_quantity or None,
            reorder_case_pack=item.reorder_case_pack or None,
            lead_time_variance_days=item.lead_time_variance_days or None,
        )

    # ===================
    # SIGNALS
    # ===================

    def signal(self, item: ItemSnapshot) -> ReplenishmentSignal:
        """
        Reorder status for one item.

        NEEDS_DATA: no demand or no lead time.
        URGENT:     order needed and cover <= max(1, lead x 0.5), or nothing on hand.
        DUE_SOON:   order needed otherwise.
        HEALTHY:    on hand at or above the reorder point.
        """
        on_hand = max(0, total_units_on_hand(item))
        demand = self.forecast_daily_demand(item)
        lead_time = item.lead_time_days
        reorder_point = self.reorder_point(item)

        if demand <= 0 or lead_time <= 0:
            status = ReplenishmentStatus.NEEDS_DATA
            suggested = 0
            days_of_supply = None
        else:
            days_of_supply = Decimal(on_hand) / demand
            if reorder_point - on_hand > 0:
                suggested = self.suggested_units(item)
                urgent_cutoff = max(Decimal("1"), lead_time * URGENT_COVER_RATIO)
                if on_hand == 0 or days_of_supply <= urgent_cutoff:
                    status = ReplenishmentStatus.URGENT
                else:
                    status = ReplenishmentStatus.DUE_SOON
            else:
                suggested = 0
                status = ReplenishmentStatus.HEALTHY

        return ReplenishmentSignal(
            item_id=item.id,
            item_name=item.name,
            category=item.category,
            location=item.location,
            status=status,
            on_hand_units=on_hand,
            reorder_point=reorder_point,
            suggested_units=suggested,
            lead_time_days=lead_time,
            forecast_daily_demand=demand,
            sample_count=item.sample_count,
            days_of_supply=days_of_supply,
        )

    def signals(self, items: Iterable[ItemSnapshot]) -> list[ReplenishmentSignal]:
        """All signals: status order, then suggested units desc, then name."""
        results = [self.signal(item) for item in items]
        results.sort(key=lambda s: (
            s.status.sort_order,
            -s.suggested_units,
            name_sort_key(s.item_name),
            s.item_id,
        ))

        logger.info(
            "replenishment_signals_built",
            items=len(results),
            urgent=sum(1 for s in results if s.status == ReplenishmentStatus.URGENT),
            due_soon=sum(1 for s in results if s.status == ReplenishmentStatus.DUE_SOON),
        )
        return results

    def draft_lines(self, items: Iterable[ItemSnapshot]) -> list[PurchaseOrderLine]:
        """Order lines for every URGENT or DUE_SOON item."""
        items = list(items)
        by_id = {item.id: item for item in items}
        lines = []
        for signal in self.signals(items):
            if signal.status not in (ReplenishmentStatus.URGENT, ReplenishmentStatus.DUE_SOON):
                continue
            if signal.suggested_units <= 0:
                continue
            lines.append(self.build_purchase_order_line(by_id[signal.item_id]))
        return lines

    # ===================
    # AUTO-REORDER
    # ===================

    def blended_velocity(self, moving_demand: Decimal, baseline_demand: Decimal) -> Decimal:
        """0.65 x moving + 0.35 x baseline when both exist, else the larger."""
        if moving_demand > 0 and baseline_demand > 0:
            return moving_demand * MOVING_DEMAND_WEIGHT + baseline_demand * BASELINE_DEMAND_WEIGHT
        return max(moving_demand, baseline_demand)

    def suggestion_confidence(
        self,
        sample_count: int,
        moving_demand: Decimal,
        baseline_demand: Decimal,
    ) -> SuggestionConfidence:
        if sample_count >= HIGH_CONFIDENCE_SAMPLES and moving_demand > 0:
            return SuggestionConfidence.HIGH
        if sample_count >= MEDIUM_CONFIDENCE_SAMPLES or (moving_demand > 0 and baseline_demand > 0):
            return SuggestionConfidence.MEDIUM
        return SuggestionConfidence.LOW

    def auto_reorder_suggestion(self, item: ItemSnapshot) -> Optional[AutoReorderSuggestion]:
        """
        Forecast-based suggestion covering lead time + review window.

        review window = clamp(lead x 1.5, 7, 21) days
        target        = ceil(velocity x (lead + review)) + safety stock
        recommended   = supplier-adjusted(target - on hand)

        Returns None when there is no velocity, no lead time, or
        nothing to order.
        """
        on_hand = max(0, total_units_on_hand(item))
        lead_time = item.lead_time_days
        safety_stock = max(0, item.safety_stock_units)
        moving_demand = item.smoothed_daily_demand or Decimal("0")
        baseline_demand = item.average_daily_usage
        velocity = self.blended_velocity(moving_demand, baseline_demand)

        if lead_time <= 0 or velocity <= 0:
            return None

        review_window = min(
            REVIEW_WINDOW_MAX_DAYS,
            max(REVIEW_WINDOW_MIN_DAYS, lead_time * REVIEW_WINDOW_FACTOR),
        )
        reorder_point = math.ceil(velocity * lead_time) + safety_stock
        target_units = math.ceil(velocity * (lead_time + review_window)) + safety_stock
        recommended = adjust_for_supplier(
            target_units - on_hand,
            item.minimum_order_quantity,
            item.reorder_case_pack,
        )
        if recommended <= 0:
            return None

        days_of_cover = Decimal(on_hand) / velocity
        risk_score = (days_of_cover - lead_time) / max(1, lead_time)

        return AutoReorderSuggestion(
            item_id=item.id,
            item_name=item.name,
            on_hand_units=on_hand,
            reorder_point=reorder_point,
            target_units=target_units,
            recommended_units=recommended,
            lead_time_days=lead_time,
            review_window_days=review_window,
            velocity_per_day=velocity,
            safety_stock_units=safety_stock,
            sample_count=item.sample_count,
            days_of_cover=days_of_cover,
            risk_score=risk_score,
            confidence=self.suggestion_confidence(item.sample_count, moving_demand, baseline_demand),
        )

    def auto_reorder_suggestions(self, items: Iterable[ItemSnapshot]) -> list[AutoReorderSuggestion]:
        """Riskiest first, then larger orders, then name."""
        suggestions = []
        for item in items:
            suggestion = self.auto_reorder_suggestion(item)
            if suggestion is not None:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: (
            s.risk_score,
            -s.recommended_units,
            name_sort_key(s.item_name),
            s.item_id,
        ))

        logger.info("auto_reorder_suggestions_built", suggestions=len(suggestions))
        return suggestions

    def auto_draft_lines(self, items: Iterable[ItemSnapshot]) -> list[PurchaseOrderLine]:
        """Order lines for every auto-reorder suggestion."""
        items = list(items)
        by_id = {item.id: item for item in items}
        return [
            self.build_purchase_order_line(
                by_id[suggestion.item_id],
                suggested_units=suggestion.recommended_units,
                reorder_point=suggestion.reorder_point,
                forecast_daily_demand=suggestion.velocity_per_day,
            )
            for suggestion in self.auto_reorder_suggestions(items)
        ]


# Singleton instance
_replenishment_service: Optional[ReplenishmentService] = None


def get_replenishment_service() -> ReplenishmentService:
    """Get or create ReplenishmentService instance."""
    global _replenishment_service
    if _replenishment_service is None:
        _replenishment_service = ReplenishmentService()
    return _replenishment_service
