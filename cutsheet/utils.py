"""
Utilitários de resumo e agrupamento dos planos de corte
"""

from typing import List, Optional, Sequence

from .models import (
    Bar, BarCuttingSummary, BarGroup, Orientation, Placement, PlacementGroup,
    SheetNestingSummary, SourceType
)


def summarize_bars(
    bars: Sequence[Bar],
    need_total: int,
    kerf_mm: int,
    stacking_mode: bool,
    optimize_mode: str,
) -> BarCuttingSummary:
    """
    Calcula os totais de um plano de barras

    Todos os totais são ponderados por repeat_count. O comprimento usado
    inclui a espessura de corte; o rendimento é usado / bruto x 100.
    """
    by_purchased_stock = {}
    used_remnants = []
    purchased = 0
    total_stock = total_used = total_remainder = total_kerf = made_total = 0

    for bar in bars:
        rep = bar.repeat_count
        total_stock += bar.stock_length * rep
        total_used += bar.used_length * rep
        total_remainder += bar.remainder * rep
        total_kerf += bar.kerf_total * rep
        made_total += len(bar.cuts) * rep

        if bar.source_type == SourceType.STOCK:
            purchased += rep
            by_purchased_stock[bar.stock_length] = by_purchased_stock.get(bar.stock_length, 0) + rep
        else:
            used_remnants.extend([bar.stock_length] * rep)

    return BarCuttingSummary(
        need_total=need_total,
        kerf_mm=kerf_mm,
        stacking_mode=stacking_mode,
        optimize_mode=optimize_mode,
        purchased_bars_count=purchased,
        by_purchased_stock=by_purchased_stock,
        used_remnants_count=len(used_remnants),
        used_remnants=used_remnants,
        total_stock=total_stock,
        total_used=total_used,
        total_remainder=total_remainder,
        total_kerf=total_kerf,
        yield_pct=(total_used / total_stock) * 100 if total_stock > 0 else 0.0,
        made_total=made_total,
    )


def summarize_placements(
    placements: Sequence[Placement],
    need_total: int,
    mixed_mode: bool,
    ignore_direction: bool,
    force_direction: Optional[Orientation],
) -> SheetNestingSummary:
    """Calcula os totais de um plano de chapas"""
    by_purchased_stock = {}
    used_remnants = []

    for placement in placements:
        if placement.source_type == SourceType.STOCK:
            key = placement.sheet.id
            by_purchased_stock[key] = by_purchased_stock.get(key, 0) + 1
        else:
            used_remnants.append(placement.sheet)

    return SheetNestingSummary(
        need_total=need_total,
        made_total=sum(p.made for p in placements),
        used_remnants_count=len(used_remnants),
        used_remnants=used_remnants,
        purchased_sheets_count=sum(by_purchased_stock.values()),
        by_purchased_stock=by_purchased_stock,
        mixed_mode=mixed_mode,
        ignore_direction=ignore_direction,
        force_direction=force_direction,
    )


def _bar_key(bar: Bar) -> tuple:
    return (bar.source_type, bar.stock_length, bar.remainder, bar.kerf_total, tuple(bar.cuts))


def group_consecutive_bars(bars: Sequence[Bar]) -> List[BarGroup]:
    """
    Agrupa barras consecutivas com o mesmo padrão de corte

    A numeração segue as barras físicas: uma barra com repeat_count=3
    ocupa três números.
    """
    groups = []
    number = 1

    for bar in bars:
        rep = bar.repeat_count
        if groups and _bar_key(groups[-1].bar) == _bar_key(bar):
            groups[-1].end_no += rep
            groups[-1].count += rep
        else:
            groups.append(BarGroup(bar=bar, start_no=number, end_no=number + rep - 1, count=rep))
        number += rep

    return groups


def _placement_key(placement: Placement) -> tuple:
    rects = tuple((r.x, r.y, r.w, r.h, r.label) for r in placement.rects or [])
    return (
        placement.kind,
        placement.source_type,
        placement.sheet.id,
        placement.sheet.name,
        placement.sheet.width,
        placement.sheet.height,
        placement.orientation,
        placement.nx,
        placement.ny,
        placement.part_width,
        placement.part_height,
        placement.made,
        rects,
    )


def group_consecutive_placements(placements: Sequence[Placement]) -> List[PlacementGroup]:
    """Agrupa chapas consecutivas idênticas para a folha de corte"""
    groups = []

    for number, placement in enumerate(placements, 1):
        if groups and _placement_key(groups[-1].placement) == _placement_key(placement):
            groups[-1].end_no = number
            groups[-1].count += 1
        else:
            groups.append(PlacementGroup(placement=placement, start_no=number, end_no=number, count=1))

    return groups
