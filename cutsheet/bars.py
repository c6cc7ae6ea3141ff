"""
Otimizador de corte de barras (1D)

Dois modos:

* aproveitamento (padrão): escolhe barra a barra o material que melhor
  aproveita as peças restantes;
* empilhado: repete o mesmo padrão de corte em várias barras para que
  possam ser cortadas juntas, trocando rendimento por repetição.
"""

import logging
import math
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .errors import CuttingError, InfeasibleError, InputValidationError, InternalInconsistencyError
from .models import (
    Bar, BarCuttingRequest, BarCuttingResult, OptimizeMode, SourceType
)
from .primitives import (
    BarFill, Score, build_counts, expand_bar_remnants, expand_pieces, fill_one_bar,
    fits, is_better, lengths_desc, remove_picked, total_pieces
)
from .utils import summarize_bars

logger = logging.getLogger(__name__)


class BarCuttingOptimizer:
    """
    Planeja o corte de barras a partir de comprimentos padrão e retalhos

    Não guarda estado entre chamadas: cada solve() trabalha com cópias
    locais da demanda e dos retalhos.
    """

    def __init__(self):
        self.scorers = {
            OptimizeMode.GLOBAL: self._score_global,
            OptimizeMode.GREEDY: self._score_greedy,
        }

    def solve(self, request: BarCuttingRequest) -> BarCuttingResult:
        """
        Gera o plano de corte

        Args:
            request: Demanda, comprimentos padrão, retalhos e opções

        Returns:
            Resultado com as barras em ordem de corte, ou ok=False com a
            mensagem de erro. Nunca devolve plano parcial.
        """
        options = request.options
        mode = "stacking" if options.stacking_mode else options.optimize_mode.value

        logger.info(
            "Corte de barras: %d linhas, %d comprimentos padrão, %d retalhos, modo %s",
            len(request.pieces), len(request.stock), len(request.remnants), mode
        )

        try:
            stock = self._validate(request)
            if options.stacking_mode:
                bars = self._solve_stacking(request, stock)
            else:
                bars = self._solve_yield(request, stock)
        except CuttingError as e:
            logger.warning("Corte de barras falhou (%s): %s", e.error_type, e)
            return BarCuttingResult(ok=False, error=str(e), error_type=e.error_type)

        summary = summarize_bars(
            bars,
            need_total=sum(p.quantity for p in request.pieces),
            kerf_mm=options.kerf_mm,
            stacking_mode=options.stacking_mode,
            optimize_mode=mode,
        )
        logger.info(
            "Plano com %d barras compradas e %d retalhos, rendimento %.1f%%",
            summary.purchased_bars_count, summary.used_remnants_count, summary.yield_pct
        )
        return BarCuttingResult(ok=True, bars=bars, summary=summary)

    def _validate(self, request: BarCuttingRequest) -> List[int]:
        """Rejeita a requisição antes de qualquer cálculo; devolve os comprimentos em ordem crescente"""
        if not request.pieces:
            raise InputValidationError("Informe os comprimentos e quantidades necessários.")
        if not request.stock:
            raise InputValidationError("Nenhum comprimento padrão cadastrado.")

        kerf = request.options.kerf_mm
        stock = sorted({s.length for s in request.stock})
        max_remnant = max((r.length for r in request.remnants), default=0)
        max_available = max(stock[-1], max_remnant)

        longest = max(p.length for p in request.pieces)
        if longest + kerf > max_available:
            raise InfeasibleError(
                f"A peça de {longest}mm com corte de {kerf}mm precisa de {longest + kerf}mm, "
                f"mas o maior material (padrão ou retalho) tem {max_available}mm."
            )
        return stock

    # --- Modo aproveitamento ---

    def _solve_yield(self, request: BarCuttingRequest, stock: List[int]) -> List[Bar]:
        kerf = request.options.kerf_mm
        scorer = self.scorers[request.options.optimize_mode]

        pieces = expand_pieces(request.pieces)
        remnants = expand_bar_remnants(request.remnants)
        bars = []

        while pieces:
            longest = pieces[0]
            candidates = [(n, SourceType.REMNANT) for n in remnants if fits(n, longest, kerf)]
            candidates += [(n, SourceType.STOCK) for n in stock if fits(n, longest, kerf)]

            if not candidates:
                raise InfeasibleError(f"Nenhum material restante comporta a peça de {longest}mm.")

            best = None
            best_score = None
            for length, source in candidates:
                fill = fill_one_bar(length, pieces, kerf)
                if not fill.cuts:
                    continue
                score = scorer(fill, source, stock, pieces, kerf)
                if is_better(score, best_score):
                    best, best_score = (fill, source), score

            if best is None:
                raise InternalInconsistencyError(
                    f"Nenhum candidato recebeu peças (maior peça {longest}mm)."
                )

            fill, source = best
            logger.debug("Barra %dmm (%s) com cortes %s", fill.stock_length, source.value, fill.cuts)

            if source == SourceType.REMNANT:
                remnants.remove(fill.stock_length)

            bars.append(Bar(
                stock_length=fill.stock_length,
                source_type=source,
                cuts=fill.cuts,
                remainder=fill.remainder,
                kerf_total=fill.kerf_total,
            ))
            pieces = remove_picked(pieces, fill.picked)

        return bars

    def _score_global(self, fill: BarFill, source: SourceType, stock: List[int],
                      pieces: Sequence[int], kerf: int) -> Score:
        """Total comprado estimado, sobra, nº de cortes, comprimento, retalho"""
        first_cost = 0 if source == SourceType.REMNANT else fill.stock_length
        rest = remove_picked(pieces, fill.picked)
        estimate = first_cost + estimate_purchased_length(stock, rest, kerf)
        return (
            -estimate,
            -fill.remainder,
            len(fill.cuts),
            -fill.stock_length,
            1 if source == SourceType.REMNANT else 0,
        )

    def _score_greedy(self, fill: BarFill, source: SourceType, stock: List[int],
                      pieces: Sequence[int], kerf: int) -> Score:
        """Sobra, nº de cortes, comprimento, retalho"""
        return (
            -fill.remainder,
            len(fill.cuts),
            -fill.stock_length,
            1 if source == SourceType.REMNANT else 0,
        )

    # --- Modo empilhado ---

    def _solve_stacking(self, request: BarCuttingRequest, stock: List[int]) -> List[Bar]:
        kerf = request.options.kerf_mm
        pieces = expand_pieces(request.pieces)
        bars = []

        # Retalhos são todos diferentes: cada um é enchido uma vez
        for remnant_length in expand_bar_remnants(request.remnants):
            if not pieces:
                break
            fill = fill_one_bar(remnant_length, pieces, kerf)
            if not fill.cuts:
                continue
            bars.append(Bar(
                stock_length=remnant_length,
                source_type=SourceType.REMNANT,
                cuts=fill.cuts,
                remainder=fill.remainder,
                kerf_total=fill.kerf_total,
            ))
            pieces = remove_picked(pieces, fill.picked)

        counts = build_counts(pieces)
        fixed_length = stock[-1]

        while total_pieces(counts) > 0:
            cuts, need, remainder, kerf_total = build_pattern(fixed_length, counts, kerf)

            # Se nada cabe na maior barra, nenhuma barra menor comporta a maior peça
            if not cuts:
                largest = lengths_desc(counts)[0]
                raise InfeasibleError(f"Nenhum comprimento padrão comporta a peça de {largest}mm.")

            repeat = max_repeat_count(counts, need)
            if repeat <= 0:
                raise InternalInconsistencyError(f"Padrão {cuts} não pode ser repetido.")

            logger.debug("Padrão %s em %dmm x%d", cuts, fixed_length, repeat)
            subtract_pattern(counts, need, repeat)
            bars.append(Bar(
                stock_length=fixed_length,
                source_type=SourceType.STOCK,
                cuts=cuts,
                remainder=remainder,
                kerf_total=kerf_total,
                repeat_count=repeat,
            ))

        return bars


def estimate_purchased_length(stock_asc: Sequence[int], pieces_desc: Sequence[int], kerf: int) -> float:
    """
    Estima o comprimento total comprado para terminar as peças restantes

    Cada barra seguinte é o menor comprimento padrão que comporta a maior
    peça restante, enchida pelo mesmo preenchimento guloso. Retalhos não
    entram na estimativa. Devolve infinito quando alguma peça não cabe.
    """
    pieces = list(pieces_desc)
    total = 0

    while pieces:
        candidate = next((n for n in stock_asc if fits(n, pieces[0], kerf)), None)
        if candidate is None:
            return math.inf
        fill = fill_one_bar(candidate, pieces, kerf)
        if not fill.cuts:
            return math.inf
        total += candidate
        pieces = remove_picked(pieces, fill.picked)

    return total


def build_pattern(stock_length: int, counts: Counter, kerf: int) -> Tuple[List[int], Counter, int, int]:
    """
    Monta um padrão de corte para uma barra

    Varre os comprimentos do maior para o menor acrescentando uma peça de
    cada comprimento que ainda cabe e ainda tem demanda, e repete a
    varredura até nenhuma peça entrar.

    Returns:
        (cortes, uso por comprimento, sobra, total de serra)
    """
    lengths = lengths_desc(counts)
    remaining = stock_length
    cuts = []
    need = Counter()
    kerf_total = 0

    progressed = True
    while progressed and remaining > 0:
        progressed = False
        for length in lengths:
            if need[length] >= counts[length]:
                continue
            if not fits(remaining, length, kerf):
                continue
            cuts.append(length)
            need[length] += 1
            remaining -= length + kerf
            kerf_total += kerf
            progressed = True
            if remaining <= 0:
                break

    return cuts, need, remaining, kerf_total


def max_repeat_count(counts: Counter, need: Counter) -> int:
    """Quantas vezes o padrão pode ser repetido sem produzir peças a mais"""
    repeat: Optional[int] = None
    for length, used in need.items():
        times = counts[length] // used
        repeat = times if repeat is None else min(repeat, times)
    return repeat or 0


def subtract_pattern(counts: Counter, need: Counter, times: int) -> None:
    for length, used in need.items():
        counts[length] -= used * times
        if counts[length] <= 0:
            del counts[length]
