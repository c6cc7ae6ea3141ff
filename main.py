"""
Servidor FastAPI do cutsheet
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from cutsheet import CutPlanner, __version__, estimate_plates
from cutsheet.catalog import default_sheet_stocks, default_stock_table, normalize_sheet_stocks
from cutsheet.errors import InputValidationError
from cutsheet.models import (
    BarCuttingRequest, BarCuttingResult, PlateEstimate, SheetNestingRequest, SheetNestingResult,
    StockSheet
)

# Configuração do FastAPI
app = FastAPI(
    title="cutsheet API",
    description="API para planejamento de compra e corte de barras e chapas",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configuração de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Os otimizadores não guardam estado entre chamadas
cut_planner = CutPlanner()


class PlateEstimateRequest(BaseModel):
    """Requisição da estimativa rápida de chapas"""
    width: int = Field(..., description="Largura da peça (mm)")
    height: int = Field(..., description="Altura da peça (mm)")
    quantity: int = Field(..., description="Quantidade necessária")
    ignore_direction: bool = Field(False, description="Permitir qualquer rotação")
    stocks: Optional[List[StockSheet]] = Field(None, description="Chapas padrão (padrão: 3x6, 4x8, 5x10)")


@app.get("/")
async def root():
    """Página inicial da API"""
    return {
        "message": "cutsheet API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """Verificação de saúde da API"""
    return {
        "status": "healthy",
        "service": "cutsheet API",
        "version": __version__
    }


@app.post("/optimize/bars", response_model=BarCuttingResult)
async def optimize_bars(request: BarCuttingRequest):
    """
    Corte de barras e perfis (1D)

    Args:
        request: Requisição de corte

    Returns:
        Plano de corte; falhas de cálculo respondem 422
    """
    result = cut_planner.optimize_bars(request)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return result


@app.post("/optimize/sheets", response_model=SheetNestingResult)
async def optimize_sheets(request: SheetNestingRequest):
    """
    Aninhamento de chapas (2D)

    Args:
        request: Requisição de aninhamento

    Returns:
        Plano de chapas; falhas de cálculo respondem 422
    """
    result = cut_planner.optimize_sheets(request)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return result


@app.post("/estimate/plate", response_model=List[PlateEstimate])
async def estimate_plate(request: PlateEstimateRequest):
    """Quantas chapas de cada tamanho padrão seriam necessárias para uma peça"""
    try:
        return estimate_plates(
            request.width,
            request.height,
            request.quantity,
            stocks=request.stocks,
            ignore_direction=request.ignore_direction,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/catalog/bars")
async def get_bar_catalog():
    """Comprimentos padrão por tipo de perfil"""
    return default_stock_table()


@app.get("/catalog/sheets", response_model=List[StockSheet])
async def get_sheet_catalog():
    """Chapas padrão"""
    return default_sheet_stocks()


@app.post("/catalog/sheets/normalize", response_model=List[StockSheet])
async def normalize_sheet_catalog(rows: List[dict]):
    """Limpa uma tabela de chapas digitada pelo usuário"""
    return normalize_sheet_stocks(rows)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
