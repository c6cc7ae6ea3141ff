"""
Otimizador de aninhamento de chapas (2D)

Modo homogêneo: cada chapa recebe um único tipo de peça em grade.
Modo misto: tipos diferentes dividem a chapa em prateleiras.
"""

import logging
import math
from collections import Counter
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .catalog import default_sheet_stocks
from .errors import CuttingError, InfeasibleError, InputValidationError, InternalInconsistencyError
from .models import (
    MeshDirection, Orientation, PartCount, Placement, PlacementKind, PlateEstimate,
    PlacedRect, Rectangle, SheetNestingOptions, SheetNestingRequest, SheetNestingResult,
    SheetRef, SourceType, StockSheet
)
from .primitives import (
    Grid, Score, ShelfPiece, expand_sheet_remnants, fit_grid, is_better, oriented,
    pack_shelf, remove_picked
)
from .utils import summarize_placements

logger = logging.getLogger(__name__)

REMNANT_NAME = "remnant"


def allowed_orientations(mesh_direction: MeshDirection, options: SheetNestingOptions) -> Tuple[Orientation, ...]:
    """
    Orientações permitidas para uma linha de demanda

    Com ignore_direction qualquer rotação vale. Caso contrário
    force_direction limita a uma orientação e a direção da malha da linha
    restringe ainda mais; a interseção pode ficar vazia.
    """
    if options.ignore_direction:
        return (Orientation.A, Orientation.B)

    allowed = (options.force_direction,) if options.force_direction else (Orientation.A, Orientation.B)
    if mesh_direction == MeshDirection.A:
        allowed = tuple(o for o in allowed if o == Orientation.A)
    elif mesh_direction == MeshDirection.B:
        allowed = tuple(o for o in allowed if o == Orientation.B)
    return allowed


class GridFit(NamedTuple):
    orientation: Orientation
    grid: Grid
    part_width: int
    part_height: int


def best_grid(sheet_width: int, sheet_height: int, rect: Rectangle,
              allowed: Sequence[Orientation]) -> Optional[GridFit]:
    """Orientação com mais células; B só vence se for estritamente melhor"""
    best = None
    for orientation in allowed:
        part_width, part_height = oriented(rect.width, rect.height, orientation)
        grid = fit_grid(sheet_width, sheet_height, part_width, part_height)
        if best is None or grid.cells > best.grid.cells:
            best = GridFit(orientation, grid, part_width, part_height)
    return best


class _Demand:
    """Linha de demanda com a quantidade ainda não produzida"""

    def __init__(self, rect: Rectangle, allowed: Tuple[Orientation, ...]):
        self.rect = rect
        self.allowed = allowed
        self.remaining = rect.quantity


class _RowChoice(NamedTuple):
    demand: _Demand
    fit: GridFit
    made: int
    score: Score


def parts_summary(rects: Sequence[PlacedRect]) -> List[PartCount]:
    """Quantidade por rótulo, da maior para a menor"""
    counts = Counter(r.label for r in rects)
    return [
        PartCount(label=label, quantity=qty)
        for label, qty in sorted(counts.items(), key=lambda item: -item[1])
    ]


class SheetNestingOptimizer:
    """
    Planeja quais chapas comprar e como cortá-las

    Retalhos são visitados primeiro, cada um uma única vez, do maior para
    o menor. Depois as chapas padrão são compradas uma a uma, sempre a que
    produz mais peças naquele momento.
    """

    def __init__(self):
        self.modes = {
            False: self._solve_homogeneous,
            True: self._solve_mixed,
        }

    def solve(self, request: SheetNestingRequest) -> SheetNestingResult:
        """
        Gera o plano de chapas

        Args:
            request: Demanda, chapas padrão, retalhos e opções

        Returns:
            Resultado com as chapas em ordem, ou ok=False com a mensagem
            de erro
        """
        options = request.options
        logger.info(
            "Aninhamento de chapas: %d linhas, %d chapas padrão, %d retalhos, misto=%s",
            len(request.rectangles), len(request.stocks), len(request.remnants), options.mixed_mode
        )

        try:
            demands = self._validate(request)
            placements = self.modes[options.mixed_mode](request, demands)
        except CuttingError as e:
            logger.warning("Aninhamento de chapas falhou (%s): %s", e.error_type, e)
            return SheetNestingResult(ok=False, error=str(e), error_type=e.error_type)

        summary = summarize_placements(
            placements,
            need_total=sum(r.quantity for r in request.rectangles),
            mixed_mode=options.mixed_mode,
            ignore_direction=options.ignore_direction,
            force_direction=options.force_direction,
        )
        logger.info(
            "Plano com %d chapas compradas e %d retalhos",
            summary.purchased_sheets_count, summary.used_remnants_count
        )
        return SheetNestingResult(ok=True, placements=placements, summary=summary)

    def _validate(self, request: SheetNestingRequest) -> List[_Demand]:
        """Rejeita entradas vazias e peças que não cabem em nenhuma chapa"""
        if not request.rectangles:
            raise InputValidationError("Informe as dimensões (largura, altura e quantidade) das peças.")
        if not request.stocks:
            raise InputValidationError("Nenhuma chapa padrão cadastrada.")

        sheets = [(s.width, s.height) for s in request.stocks]
        sheets += [(r.width, r.height) for r in request.remnants]

        demands = []
        for rect in sorted(request.rectangles, key=lambda r: r.area, reverse=True):
            allowed = allowed_orientations(rect.mesh_direction, request.options)
            if not any(self._fits_any(w, h, rect, allowed) for w, h in sheets):
                raise _infeasible(rect.width, rect.height)
            demands.append(_Demand(rect, allowed))
        return demands

    @staticmethod
    def _fits_any(sheet_width: int, sheet_height: int, rect: Rectangle, allowed: Sequence[Orientation]) -> bool:
        fit = best_grid(sheet_width, sheet_height, rect, allowed)
        return fit is not None and fit.grid.cells > 0

    # --- Modo homogêneo ---

    def _best_row(self, sheet_width: int, sheet_height: int, demands: Sequence[_Demand]) -> Optional[_RowChoice]:
        """Linha que mais produz numa chapa: (peças, área usada, área da peça)"""
        best = None
        for demand in demands:
            if demand.remaining <= 0:
                continue
            fit = best_grid(sheet_width, sheet_height, demand.rect, demand.allowed)
            if fit is None or fit.grid.cells <= 0:
                continue

            made = min(demand.remaining, fit.grid.cells)
            part_area = fit.part_width * fit.part_height
            score = (made, made * part_area, part_area)
            if is_better(score, best.score if best else None):
                best = _RowChoice(demand, fit, made, score)
        return best

    def _grid_placement(self, choice: _RowChoice, source: SourceType, sheet: SheetRef) -> Placement:
        choice.demand.remaining -= choice.made
        return Placement(
            kind=PlacementKind.GRID,
            source_type=source,
            sheet=sheet,
            orientation=choice.fit.orientation,
            nx=choice.fit.grid.nx,
            ny=choice.fit.grid.ny,
            part_width=choice.fit.part_width,
            part_height=choice.fit.part_height,
            made=choice.made,
            parts_summary=[PartCount(label=choice.demand.rect.display_label, quantity=choice.made)],
        )

    def _solve_homogeneous(self, request: SheetNestingRequest, demands: List[_Demand]) -> List[Placement]:
        placements = []

        for width, height in expand_sheet_remnants(request.remnants):
            if _total_need(demands) <= 0:
                break
            choice = self._best_row(width, height, demands)
            if choice is None:
                continue
            sheet = SheetRef(id=None, name=REMNANT_NAME, width=width, height=height)
            placements.append(self._grid_placement(choice, SourceType.REMNANT, sheet))

        while _total_need(demands) > 0:
            best = None
            best_score = None
            for stock in request.stocks:
                choice = self._best_row(stock.width, stock.height, demands)
                if choice is None:
                    continue
                score = (choice.made, choice.score[1], -stock.area)
                if is_better(score, best_score):
                    best, best_score = (stock, choice), score

            if best is None:
                largest = next(d.rect for d in demands if d.remaining > 0)
                raise _infeasible(largest.width, largest.height)

            stock, choice = best
            if choice.made <= 0:
                raise InternalInconsistencyError(f"A chapa {stock.name} não recebeu peças.")
            logger.debug("Chapa %s: %s %dx%d", stock.name, choice.fit.orientation.value,
                         choice.fit.grid.nx, choice.fit.grid.ny)
            placements.append(self._grid_placement(choice, SourceType.STOCK, _sheet_ref(stock)))

        return placements

    # --- Modo misto ---

    def _solve_mixed(self, request: SheetNestingRequest, demands: List[_Demand]) -> List[Placement]:
        pieces = []
        for demand in demands:
            rect = demand.rect
            pieces.extend(
                [ShelfPiece(rect.width, rect.height, rect.display_label, demand.allowed)] * rect.quantity
            )
        pieces.sort(key=lambda p: p.area, reverse=True)

        placements = []

        for width, height in expand_sheet_remnants(request.remnants):
            if not pieces:
                break
            fill = pack_shelf(width, height, pieces)
            if not fill.picked:
                continue
            sheet = SheetRef(id=None, name=REMNANT_NAME, width=width, height=height)
            placements.append(_mixed_placement(fill.placed, SourceType.REMNANT, sheet))
            pieces = remove_picked(pieces, fill.picked)

        while pieces:
            best = None
            best_score = None
            for stock in request.stocks:
                fill = pack_shelf(stock.width, stock.height, pieces)
                if not fill.picked:
                    continue
                score = (len(fill.picked), fill.used_area, -stock.area)
                if is_better(score, best_score):
                    best, best_score = (stock, fill), score

            if best is None:
                raise _infeasible(pieces[0].width, pieces[0].height)

            stock, fill = best
            logger.debug("Chapa %s: %d peças em prateleiras", stock.name, len(fill.placed))
            placements.append(_mixed_placement(fill.placed, SourceType.STOCK, _sheet_ref(stock)))
            pieces = remove_picked(pieces, fill.picked)

        return placements


def _total_need(demands: Sequence[_Demand]) -> int:
    return sum(d.remaining for d in demands)


def _sheet_ref(stock: StockSheet) -> SheetRef:
    return SheetRef(id=stock.id, name=stock.name, width=stock.width, height=stock.height)


def _mixed_placement(rects: List[PlacedRect], source: SourceType, sheet: SheetRef) -> Placement:
    return Placement(
        kind=PlacementKind.MIXED,
        source_type=source,
        sheet=sheet,
        made=len(rects),
        rects=rects,
        parts_summary=parts_summary(rects),
    )


def _infeasible(width: int, height: int) -> InfeasibleError:
    return InfeasibleError(
        f"A peça {width}×{height}mm não cabe em nenhuma chapa nas orientações permitidas."
    )


def estimate_plates(width: int, height: int, quantity: int,
                    stocks: Optional[Sequence[StockSheet]] = None,
                    ignore_direction: bool = False) -> List[PlateEstimate]:
    """
    Estimativa rápida de chapas para um único tipo de peça

    Para cada chapa padrão calcula quantas peças cabem por chapa e
    quantas chapas seriam necessárias. Chapas onde a peça não cabe são
    omitidas; o resultado sai ordenado pelo número de chapas.

    Args:
        width: Largura da peça (mm)
        height: Altura da peça (mm)
        quantity: Quantidade necessária
        stocks: Chapas padrão (padrão: 3x6, 4x8 e 5x10)
        ignore_direction: Permitir girar a peça livremente
    """
    if width <= 0 or height <= 0 or quantity <= 0:
        raise InputValidationError("Largura, altura e quantidade devem ser positivas.")
    if stocks is None:
        stocks = default_sheet_stocks()

    estimates = []
    for stock in stocks:
        normal = fit_grid(stock.width, stock.height, width, height).cells
        rotated = fit_grid(stock.width, stock.height, height, width).cells

        per_sheet, orientation = normal, Orientation.A.value
        if rotated > per_sheet:
            per_sheet, orientation = rotated, Orientation.B.value
        if ignore_direction:
            per_sheet, orientation = max(normal, rotated), MeshDirection.FREE.value

        if per_sheet == 0:
            continue

        estimates.append(PlateEstimate(
            stock_id=stock.id,
            stock_name=stock.name,
            stock_size=f"{stock.width}×{stock.height}",
            per_sheet=per_sheet,
            need_sheets=math.ceil(quantity / per_sheet),
            orientation=orientation,
        ))

    estimates.sort(key=lambda e: e.need_sheets)
    return estimates
