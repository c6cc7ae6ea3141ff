"""
Rotinas compartilhadas pelos otimizadores de barras e de chapas
"""

from collections import Counter
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from .models import BarRemnant, Orientation, Piece, PlacedRect, SheetRemnant

# Pontuação lexicográfica: maior é melhor, comparada posição a posição
Score = Tuple[float, ...]


def is_better(candidate: Score, incumbent: Optional[Score]) -> bool:
    """
    Compara duas pontuações lexicograficamente

    Só uma pontuação estritamente maior substitui a atual, de modo que em
    empate total vence o candidato avaliado primeiro.
    """
    if incumbent is None:
        return True
    for new, old in zip(candidate, incumbent):
        if new > old:
            return True
        if new < old:
            return False
    return False


# --- Contagem de demanda 1D ---

def expand_pieces(pieces: Iterable[Piece]) -> List[int]:
    """Expande as linhas de demanda em peças individuais, da maior para a menor"""
    lengths = []
    for piece in pieces:
        lengths.extend([piece.length] * piece.quantity)
    lengths.sort(reverse=True)
    return lengths


def build_counts(lengths: Iterable[int]) -> Counter:
    """Comprimento -> quantidade"""
    return Counter(lengths)


def lengths_desc(counts: Counter) -> List[int]:
    return sorted((n for n, qty in counts.items() if qty > 0), reverse=True)


def total_pieces(counts: Counter) -> int:
    return sum(qty for qty in counts.values() if qty > 0)


def expand_bar_remnants(remnants: Iterable[BarRemnant]) -> List[int]:
    """Um item por retalho físico, do maior para o menor"""
    pool = []
    for remnant in remnants:
        pool.extend([remnant.length] * remnant.quantity)
    pool.sort(reverse=True)
    return pool


def expand_sheet_remnants(remnants: Iterable[SheetRemnant]) -> List[Tuple[int, int]]:
    """Um item (largura, altura) por retalho físico, da maior área para a menor"""
    pool = []
    for remnant in remnants:
        pool.extend([(remnant.width, remnant.height)] * remnant.quantity)
    pool.sort(key=lambda wh: wh[0] * wh[1], reverse=True)
    return pool


def remove_picked(items: Sequence, picked: Iterable[int]) -> list:
    """Copia a lista sem os índices consumidos"""
    used = set(picked)
    if not used:
        return list(items)
    return [item for i, item in enumerate(items) if i not in used]


# --- Preenchimento de uma barra ---

def fits(remaining: int, length: int, kerf: int) -> bool:
    """Cada peça consome seu comprimento mais uma espessura de corte"""
    return length + kerf <= remaining


class BarFill(NamedTuple):
    stock_length: int
    cuts: List[int]
    remainder: int
    kerf_total: int
    picked: List[int]


def fill_one_bar(stock_length: int, pieces_desc: Sequence[int], kerf: int) -> BarFill:
    """
    Enche uma barra percorrendo as peças da maior para a menor

    Cada peça que ainda cabe é cortada; as que não cabem são puladas e as
    menores seguintes ainda são tentadas.
    """
    remaining = stock_length
    cuts = []
    picked = []
    kerf_total = 0

    for i, length in enumerate(pieces_desc):
        if not fits(remaining, length, kerf):
            continue
        cuts.append(length)
        picked.append(i)
        remaining -= length + kerf
        kerf_total += kerf
        if remaining <= 0:
            break

    return BarFill(stock_length, cuts, remaining, kerf_total, picked)


# --- Geometria de chapas ---

class Grid(NamedTuple):
    nx: int
    ny: int

    @property
    def cells(self) -> int:
        return self.nx * self.ny


def fit_grid(sheet_width: int, sheet_height: int, part_width: int, part_height: int) -> Grid:
    """Quantas peças iguais cabem em grade sem girar"""
    return Grid(sheet_width // part_width, sheet_height // part_height)


def oriented(width: int, height: int, orientation: Orientation) -> Tuple[int, int]:
    """Dimensões ocupadas na orientação A (como informada) ou B (girada)"""
    if orientation == Orientation.B:
        return height, width
    return width, height


class ShelfPiece(NamedTuple):
    width: int
    height: int
    label: str
    allowed: Tuple[Orientation, ...]

    @property
    def area(self) -> int:
        return self.width * self.height


class ShelfFill(NamedTuple):
    placed: List[PlacedRect]
    picked: List[int]

    @property
    def used_area(self) -> int:
        return sum(r.w * r.h for r in self.placed)


def pack_shelf(sheet_width: int, sheet_height: int, pieces: Sequence[ShelfPiece]) -> ShelfFill:
    """
    Empacota peças em prateleiras numa única chapa

    As peças entram da esquerda para a direita; a altura da prateleira é a
    da maior peça nela. Quando uma peça não cabe no cursor, a prateleira é
    fechada e a peça tenta uma única vez no início da próxima. Cada
    orientação permitida é tentada em ordem (A antes de B), e a tentativa
    de uma orientação pode já ter aberto a prateleira nova. Peças que não
    cabem ficam para a próxima chapa; não há retorno a prateleiras antigas.
    """
    placed = []
    picked = []
    x = y = shelf_height = 0

    for i, piece in enumerate(pieces):
        for orientation in piece.allowed:
            w, h = oriented(piece.width, piece.height, orientation)

            if x + w > sheet_width or y + h > sheet_height:
                if y + shelf_height >= sheet_height:
                    continue
                y += shelf_height
                x = 0
                shelf_height = 0
                if x + w > sheet_width or y + h > sheet_height:
                    continue

            placed.append(PlacedRect(x=x, y=y, w=w, h=h, label=piece.label))
            picked.append(i)
            x += w
            shelf_height = max(shelf_height, h)
            break

    return ShelfFill(placed, picked)
