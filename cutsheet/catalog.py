"""
Tabelas de materiais padrão (barras e chapas)

Os otimizadores não guardam catálogo: quem chama passa as listas
explicitamente em cada requisição. Este módulo só oferece os valores
padrão e a normalização das linhas digitadas.
"""

import logging
import math
from typing import Any, Dict, Iterable, List

from .models import StockLength, StockSheet

logger = logging.getLogger(__name__)


# Comprimentos comerciais por tipo de perfil (mm)
DEFAULT_STOCK_TABLE: Dict[str, List[int]] = {
    "FB": [5500, 6000],
    "L": [5500, 6000, 7000, 8000, 9000, 10000],
    "U": [5500, 6000, 7000, 8000, 9000, 10000],
    "H": [6000, 7000, 8000, 9000, 10000],
    "SGP": [5500, 6000, 7000, 8000, 9000, 10000],
    "I": [5500, 6000, 7000, 8000, 9000, 10000],
    "SQUARE_PIPE": [6000, 7000, 8000, 9000, 10000],
}

# Chapas comerciais (aço e metal expandido)
DEFAULT_SHEET_STOCKS: List[Dict[str, Any]] = [
    {"id": "3x6", "name": "3x6", "width": 914, "height": 1829},
    {"id": "4x8", "name": "4x8", "width": 1219, "height": 2438},
    {"id": "5x10", "name": "5x10", "width": 1524, "height": 3048},
]


def _to_int(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(round(number))


def normalize_stock_lengths(values: Iterable[Any]) -> List[int]:
    """
    Limpa uma lista de comprimentos digitada pelo usuário

    Descarta valores inválidos ou não positivos, arredonda para mm,
    remove duplicados e ordena do menor para o maior.
    """
    lengths = {_to_int(v) for v in (values or [])}
    return sorted(n for n in lengths if n > 0)


def stock_lengths_for(section_type: str) -> List[StockLength]:
    """Comprimentos padrão de um tipo de perfil"""
    if section_type not in DEFAULT_STOCK_TABLE:
        raise KeyError(f"Tipo de perfil desconhecido: {section_type}")
    return [StockLength(length=n) for n in normalize_stock_lengths(DEFAULT_STOCK_TABLE[section_type])]


def default_stock_table() -> Dict[str, List[int]]:
    return {k: normalize_stock_lengths(v) for k, v in DEFAULT_STOCK_TABLE.items()}


def normalize_sheet_stocks(rows: Iterable[Dict[str, Any]]) -> List[StockSheet]:
    """
    Limpa as chapas digitadas pelo usuário

    Linhas sem nome ou com dimensões não positivas são descartadas; o id
    padrão é o nome; ids repetidos ficam só com a primeira ocorrência.
    O resultado sai ordenado por área crescente.
    """
    sheets = []
    seen = set()

    for row in rows or []:
        name = str(row.get("name") or "").strip()
        width = _to_int(row.get("width"))
        height = _to_int(row.get("height"))
        sheet_id = str(row.get("id") or name or f"{width}x{height}").strip()

        if not name or width <= 0 or height <= 0:
            logger.debug("Chapa descartada: %r", row)
            continue
        if sheet_id in seen:
            continue
        seen.add(sheet_id)

        sheets.append(StockSheet(id=sheet_id, name=name, width=width, height=height))

    sheets.sort(key=lambda s: s.area)
    return sheets


def default_sheet_stocks() -> List[StockSheet]:
    return normalize_sheet_stocks(DEFAULT_SHEET_STOCKS)
