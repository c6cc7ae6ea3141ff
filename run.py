#!/usr/bin/env python3
"""
Script principal para executar o cutsheet
"""

import argparse
import logging
import sys
import unittest
from pathlib import Path

from cutsheet import CutPlanner
from cutsheet.catalog import DEFAULT_SHEET_STOCKS, stock_lengths_for
from cutsheet.utils import group_consecutive_bars, group_consecutive_placements


def create_sample_data():
    """Cria dados de exemplo para demonstração"""

    stock = stock_lengths_for("L")
    pieces = [
        {"length": 1500, "quantity": 2},
        {"length": 1800, "quantity": 2},
        {"length": 2000, "quantity": 2},
    ]
    remnants = [{"length": 2500, "quantity": 1}]

    rectangles = [
        {"width": 500, "height": 300, "quantity": 10, "label": "Painel"},
        {"width": 400, "height": 200, "quantity": 6, "label": "Tampa"},
    ]

    return stock, pieces, remnants, rectangles


def run_demo(kerf_mm: int, stacking: bool, mixed: bool):
    """Executa demonstração do sistema"""

    print("🔧 cutsheet - Demonstração")
    print("=" * 60)

    stock, pieces, remnants, rectangles = create_sample_data()
    planner = CutPlanner(kerf_mm=kerf_mm)

    print(f"✓ Espessura de corte: {kerf_mm}mm")
    print(f"✓ {len(stock)} comprimentos padrão, {len(pieces)} tipos de peças")

    bars = planner.solve_cutting(stock, pieces, {"stacking_mode": stacking}, remnants)
    if not bars.ok:
        print(f"❌ Falha no corte de barras: {bars.error}")
        return False

    summary = bars.summary
    print(f"\n📋 Barras ({summary.optimize_mode}):")
    for group in group_consecutive_bars(bars.bars):
        bar = group.bar
        numbers = f"{group.start_no}" if group.count == 1 else f"{group.start_no}-{group.end_no}"
        source = "retalho" if bar.source_type.value == "remnant" else "comprada"
        cuts = " + ".join(str(c) for c in bar.cuts)
        print(f"  {numbers}. {bar.stock_length}mm ({source}): {cuts} | sobra {bar.remainder}mm")
    print(f"📊 Rendimento: {summary.yield_pct:.1f}%")
    print(f"📦 Barras compradas: {summary.purchased_bars_count} {dict(summary.by_purchased_stock)}")
    print(f"♻️  Retalhos usados: {summary.used_remnants_count}")

    sheets = planner.solve_sheet_cutting(DEFAULT_SHEET_STOCKS, rectangles, {"mixed_mode": mixed})
    if not sheets.ok:
        print(f"❌ Falha no aninhamento: {sheets.error}")
        return False

    print("\n📋 Chapas:")
    for group in group_consecutive_placements(sheets.placements):
        placement = group.placement
        numbers = f"{group.start_no}" if group.count == 1 else f"{group.start_no}-{group.end_no}"
        parts = ", ".join(f"{p.label} x{p.quantity}" for p in placement.parts_summary)
        layout = (
            f"{placement.orientation.value} {placement.nx}x{placement.ny}"
            if placement.orientation else "prateleiras"
        )
        print(f"  {numbers}. {placement.sheet.name} ({layout}): {parts}")
    print(f"📦 Chapas compradas: {sheets.summary.purchased_sheets_count}")

    return True


def run_api_server():
    """Inicia o servidor da API"""

    print("🚀 Iniciando servidor da API cutsheet...")

    try:
        import uvicorn
    except ImportError as e:
        print(f"❌ Erro: {e}")
        print("Instale as dependências com: pip install -e .")
        return

    print("✓ Servidor iniciado em http://localhost:8000")
    print("✓ Documentação da API: http://localhost:8000/docs")
    print("\nPressione Ctrl+C para parar o servidor")

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )


def run_tests():
    """Executa os testes do sistema"""

    print("🧪 Executando testes do cutsheet...")

    loader = unittest.TestLoader()
    start_dir = Path(__file__).parent / 'tests'
    suite = loader.discover(str(start_dir), pattern='test_*.py')

    result = unittest.TextTestRunner(verbosity=2).run(suite)

    if result.wasSuccessful():
        print("\n✅ Todos os testes passaram!")
        return True
    print(f"\n❌ {len(result.failures) + len(result.errors)} testes falharam")
    return False


def main():
    """Função principal"""

    parser = argparse.ArgumentParser(
        description="cutsheet - Planejamento de corte de barras e chapas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  python run.py demo                    # Executa demonstração
  python run.py demo --kerf 3 --stacking
  python run.py api                     # Inicia servidor da API
  python run.py test                    # Executa testes
        """
    )

    parser.add_argument(
        'command',
        choices=['demo', 'api', 'test'],
        help='Comando a executar'
    )

    parser.add_argument('--kerf', type=int, default=3, help='Espessura do corte (mm)')
    parser.add_argument('--stacking', action='store_true', help='Modo empilhado para barras')
    parser.add_argument('--mixed', action='store_true', help='Misturar peças na mesma chapa')
    parser.add_argument('--verbose', action='store_true', help='Mostrar logs de depuração')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        if args.command == 'demo':
            success = run_demo(args.kerf, args.stacking, args.mixed)
            sys.exit(0 if success else 1)

        elif args.command == 'api':
            run_api_server()

        elif args.command == 'test':
            success = run_tests()
            sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        print("\n\n👋 Sistema interrompido pelo usuário")


if __name__ == "__main__":
    main()
