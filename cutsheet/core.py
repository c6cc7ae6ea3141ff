"""
Ponto de entrada do sistema cutsheet
"""

import logging
import time
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from .bars import BarCuttingOptimizer
from .errors import InputValidationError
from .models import (
    BarCuttingOptions, BarCuttingRequest, BarCuttingResult, SheetNestingOptions,
    SheetNestingRequest, SheetNestingResult
)
from .sheets import SheetNestingOptimizer

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else item.get("msg", ""))
    return "Entrada inválida: " + "; ".join(parts)


class CutPlanner:
    """
    Fachada dos otimizadores de barras e de chapas

    As opções passadas ao construtor servem de padrão para as requisições
    montadas por build_bar_request / build_sheet_request; requisições já
    montadas são usadas como vieram.
    """

    def __init__(
        self,
        kerf_mm: int = 0,
        optimize_mode: str = "global",
        ignore_direction: bool = False,
    ):
        """
        Inicializa o planejador de cortes

        Args:
            kerf_mm: Espessura do corte em mm
            optimize_mode: 'global' ou 'greedy' para o modo aproveitamento
            ignore_direction: Permitir qualquer rotação nas chapas
        """
        self.defaults = {
            "bars": {"kerf_mm": kerf_mm, "optimize_mode": optimize_mode},
            "sheets": {"ignore_direction": ignore_direction},
        }
        self.bar_optimizer = BarCuttingOptimizer()
        self.sheet_optimizer = SheetNestingOptimizer()

    def optimize_bars(self, request: BarCuttingRequest) -> BarCuttingResult:
        """Corte de barras (1D)"""
        start_time = time.perf_counter()
        result = self.bar_optimizer.solve(request)
        logger.debug("Corte de barras em %.1fms", (time.perf_counter() - start_time) * 1000)
        return result

    def optimize_sheets(self, request: SheetNestingRequest) -> SheetNestingResult:
        """Aninhamento de chapas (2D)"""
        start_time = time.perf_counter()
        result = self.sheet_optimizer.solve(request)
        logger.debug("Aninhamento de chapas em %.1fms", (time.perf_counter() - start_time) * 1000)
        return result

    def build_bar_request(
        self,
        stock: Iterable[Any],
        pieces: Iterable[Any],
        options: Optional[Dict[str, Any]] = None,
        remnants: Optional[Iterable[Any]] = None,
    ) -> BarCuttingRequest:
        """Monta a requisição 1D a partir de dicts/números; pode lançar ValidationError ou TypeError"""
        merged = {**self.defaults["bars"], **(options or {})}
        return BarCuttingRequest(
            stock=list(stock or []),
            pieces=list(pieces or []),
            remnants=list(remnants or []),
            options=BarCuttingOptions(**merged),
        )

    def build_sheet_request(
        self,
        stocks: Iterable[Any],
        rectangles: Iterable[Any],
        options: Optional[Dict[str, Any]] = None,
        remnants: Optional[Iterable[Any]] = None,
    ) -> SheetNestingRequest:
        """Monta a requisição 2D a partir de dicts; pode lançar ValidationError ou TypeError"""
        merged = {**self.defaults["sheets"], **(options or {})}
        return SheetNestingRequest(
            stocks=list(stocks or []),
            rectangles=list(rectangles or []),
            remnants=list(remnants or []),
            options=SheetNestingOptions(**merged),
        )

    def solve_cutting(self, stock, pieces, options=None, remnants=None) -> BarCuttingResult:
        """
        Corte de barras a partir de dados crus

        Args:
            stock: Comprimentos padrão (números ou dicts)
            pieces: Linhas {length, quantity}
            options: {kerf_mm, stacking_mode, optimize_mode}
            remnants: Retalhos (números ou dicts {length, quantity})

        Returns:
            Resultado; entradas inválidas viram ok=False, nunca exceção
        """
        try:
            request = self.build_bar_request(stock, pieces, options, remnants)
        except ValidationError as e:
            return _failed(BarCuttingResult, InputValidationError(_validation_message(e)))
        except TypeError as e:
            return _failed(BarCuttingResult, InputValidationError(f"Entrada inválida: {e}"))
        return self.optimize_bars(request)

    def solve_sheet_cutting(self, stocks, rectangles, options=None, remnants=None) -> SheetNestingResult:
        """
        Aninhamento de chapas a partir de dados crus

        Args:
            stocks: Chapas {id, name, width, height}
            rectangles: Linhas {width, height, quantity, mesh_direction, label}
            options: {ignore_direction, force_direction, mixed_mode}
            remnants: Retalhos {width, height, quantity}
        """
        try:
            request = self.build_sheet_request(stocks, rectangles, options, remnants)
        except ValidationError as e:
            return _failed(SheetNestingResult, InputValidationError(_validation_message(e)))
        except TypeError as e:
            return _failed(SheetNestingResult, InputValidationError(f"Entrada inválida: {e}"))
        return self.optimize_sheets(request)


def _failed(result_cls, error: InputValidationError):
    logger.warning("Requisição rejeitada: %s", error)
    return result_cls(ok=False, error=str(error), error_type=error.error_type)


_default_planner = CutPlanner()


def solve_cutting(stock, pieces, options=None, remnants=None) -> BarCuttingResult:
    """Atalho para CutPlanner().solve_cutting"""
    return _default_planner.solve_cutting(stock, pieces, options, remnants)


def solve_sheet_cutting(stocks, rectangles, options=None, remnants=None) -> SheetNestingResult:
    """Atalho para CutPlanner().solve_sheet_cutting"""
    return _default_planner.solve_sheet_cutting(stocks, rectangles, options, remnants)
