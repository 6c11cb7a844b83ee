"""
Basket Apportioner

Distributes the basket of fees across its line items, either by applying a
global discount to every base fee or by back-solving a target percentage of
the value of works around pinned rows.

The modes floor differently: a discount above 100% drives every fee
negative, while an over-pinned target leaves the unpinned rows at exactly
zero.
"""

from decimal import Decimal

from ..models import BasketResult, BasketRow, LineItem

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def _is_nan(value) -> bool:
    return Decimal(value).is_nan()


def _is_positive(value) -> bool:
    """NaN counts as non-positive instead of raising on comparison."""
    return not _is_nan(value) and value > 0


class BasketApportioner:
    """Computes proposed fees for a list of line items."""

    def apportion(
        self,
        items: list[LineItem],
        global_vow: Decimal,
        discount_pct: Decimal = ZERO,
        target_pct: Decimal = ZERO
    ) -> BasketResult:
        """
        Run one apportionment pass.

        Target mode applies when both target_pct and global_vow are positive;
        otherwise every row is discounted and pins are ignored.
        """
        in_target_mode = _is_positive(target_pct) and _is_positive(global_vow)
        target_amount = ZERO

        if in_target_mode:
            target_amount = global_vow * target_pct / HUNDRED
            proposed = self._apportion_target(items, global_vow, target_amount)
        else:
            proposed = self._apportion_discount(items, discount_pct)

        rows = []
        for item in items:
            fee = proposed.get(item.key, ZERO) if item.enabled else ZERO
            rows.append(BasketRow(
                key=item.key,
                label=item.label,
                group=item.group,
                vow=item.vow,
                base_fee=item.base_fee,
                proposed_fee=fee,
                effective_pct=fee / global_vow * HUNDRED if _is_positive(global_vow) else ZERO,
                enabled=item.enabled,
                is_manual=item.is_manual,
                is_pinned=item.pinned_effective_pct is not None,
            ))

        return BasketResult(
            rows=rows,
            subtotal=sum((r.proposed_fee for r in rows if r.enabled), ZERO),
            total_base_fee=sum((r.base_fee for r in rows if r.enabled), ZERO),
            mode='target' if in_target_mode else 'discount',
            target_amount=target_amount,
        )

    def _apportion_discount(self, items: list[LineItem], discount_pct: Decimal) -> dict[str, Decimal]:
        """Scale every base fee by the same (unclamped) factor."""
        factor = 1 - discount_pct / HUNDRED
        return {item.key: item.base_fee * factor for item in items}

    def _apportion_target(
        self,
        items: list[LineItem],
        global_vow: Decimal,
        target_amount: Decimal
    ) -> dict[str, Decimal]:
        """
        Honour pins exactly, then share what is left of the target.

        Unpinned rows split the remainder in proportion to their base fee.
        If they have no base fee at all they split it evenly, which can go
        negative when the pins already exceed the target.
        """
        proposed = {}
        enabled = [item for item in items if item.enabled]
        pinned = [item for item in enabled if item.pinned_effective_pct is not None]
        unpinned = [item for item in enabled if item.pinned_effective_pct is None]

        pinned_total = ZERO
        for item in pinned:
            fee = global_vow * item.pinned_effective_pct / HUNDRED
            proposed[item.key] = fee
            pinned_total += fee

        remaining = target_amount - pinned_total
        unpinned_base_total = sum((item.base_fee for item in unpinned), ZERO)

        if _is_positive(unpinned_base_total):
            factor = remaining / unpinned_base_total if _is_positive(remaining) else ZERO
            for item in unpinned:
                proposed[item.key] = item.base_fee * factor
        elif unpinned:
            per_row = remaining / len(unpinned)
            for item in unpinned:
                proposed[item.key] = per_row

        return proposed


def discount_needed_for_target(total_base_fee: Decimal, global_vow: Decimal, target_pct: Decimal) -> Decimal:
    """
    Global discount % that brings an unpinned basket down to the target.

    The target is clamped to [0, 100] and the resulting factor to [0, 1], so
    the answer never asks for a negative discount.
    """
    pct = max(ZERO, min(HUNDRED, target_pct)) if not _is_nan(target_pct) else ZERO
    target_amount = global_vow * pct / HUNDRED

    factor_needed = Decimal('1')
    if _is_positive(total_base_fee) and _is_positive(target_amount):
        factor_needed = min(Decimal('1'), max(ZERO, target_amount / total_base_fee))

    return max(ZERO, (1 - factor_needed) * HUNDRED)
