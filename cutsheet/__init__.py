"""
cutsheet - Planejamento de compra e corte de barras e chapas

Converte uma lista de peças em um plano de corte de baixo desperdício
sobre comprimentos/chapas padrão e retalhos em estoque, considerando a
espessura de corte da serra e, nas chapas, a direção da malha.
"""

from .core import CutPlanner, solve_cutting, solve_sheet_cutting
from .bars import BarCuttingOptimizer
from .sheets import SheetNestingOptimizer, estimate_plates
from .errors import CuttingError, InputValidationError, InfeasibleError, InternalInconsistencyError
from .models import (
    Piece, Rectangle, StockLength, StockSheet, BarRemnant, SheetRemnant, Bar, Placement,
    BarCuttingRequest, BarCuttingResult, SheetNestingRequest, SheetNestingResult
)

__version__ = "1.0.0"

__all__ = [
    "CutPlanner",
    "solve_cutting",
    "solve_sheet_cutting",
    "BarCuttingOptimizer",
    "SheetNestingOptimizer",
    "estimate_plates",
    "CuttingError",
    "InputValidationError",
    "InfeasibleError",
    "InternalInconsistencyError",
    "Piece",
    "Rectangle",
    "StockLength",
    "StockSheet",
    "BarRemnant",
    "SheetRemnant",
    "Bar",
    "Placement",
    "BarCuttingRequest",
    "BarCuttingResult",
    "SheetNestingRequest",
    "SheetNestingResult",
]
