"""
Modelos de dados para o sistema cutsheet
"""

from typing import List, Optional, Dict
from pydantic import BaseModel, Field, model_validator
from enum import Enum


class SourceType(str, Enum):
    """Origem do material de uma barra ou chapa"""
    STOCK = "stock"       # Material comprado (tamanho padrão)
    REMNANT = "remnant"   # Retalho em estoque


class OptimizeMode(str, Enum):
    """Critério do modo de aproveitamento 1D"""
    GLOBAL = "global"     # Estima o total comprado até o fim
    GREEDY = "greedy"     # Minimiza a sobra barra a barra


class Orientation(str, Enum):
    """Orientação de uma peça na chapa"""
    A = "A"               # largura x altura
    B = "B"               # altura x largura (girada)


class MeshDirection(str, Enum):
    """Direção da malha/veio exigida por uma linha de demanda"""
    FREE = "free"
    A = "A"
    B = "B"


class PlacementKind(str, Enum):
    """Formato de uma chapa planejada"""
    GRID = "grid"         # Um único tipo de peça em grade
    MIXED = "mixed"       # Vários tipos em prateleiras


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Piece(BaseModel):
    """Linha de demanda 1D: comprimento e quantidade"""
    length: int = Field(..., gt=0, description="Comprimento da peça (mm)")
    quantity: int = Field(..., gt=0, description="Quantidade necessária")


class Rectangle(BaseModel):
    """Linha de demanda 2D"""
    width: int = Field(..., gt=0, description="Largura (mm)")
    height: int = Field(..., gt=0, description="Altura (mm)")
    quantity: int = Field(..., gt=0, description="Quantidade necessária")
    mesh_direction: MeshDirection = Field(MeshDirection.FREE, description="Direção da malha permitida")
    label: str = Field("", description="Rótulo exibido no relatório")

    @property
    def display_label(self) -> str:
        """Rótulo informado ou, na falta dele, as dimensões"""
        return self.label.strip() or f"{self.width}×{self.height}"

    @property
    def area(self) -> int:
        return self.width * self.height


class StockLength(BaseModel):
    """Comprimento padrão de barra disponível para compra"""
    id: str = Field("", description="Identificador do comprimento")
    name: str = Field("", description="Nome exibido")
    length: int = Field(..., gt=0, description="Comprimento (mm)")

    @model_validator(mode="before")
    @classmethod
    def from_number(cls, data):
        # Aceita apenas o comprimento, como vem das tabelas de estoque
        if _is_number(data):
            return {"length": data}
        return data

    @model_validator(mode="after")
    def fill_names(self):
        if not self.id:
            self.id = str(self.length)
        if not self.name:
            self.name = f"{self.length}mm"
        return self


class StockSheet(BaseModel):
    """Chapa padrão disponível para compra"""
    id: str = Field("", description="Identificador da chapa")
    name: str = Field("", description="Nome exibido")
    width: int = Field(..., gt=0, description="Largura (mm)")
    height: int = Field(..., gt=0, description="Altura (mm)")

    @model_validator(mode="after")
    def fill_names(self):
        if not self.name:
            self.name = f"{self.width}x{self.height}"
        if not self.id:
            self.id = self.name
        return self

    @property
    def area(self) -> int:
        return self.width * self.height


class BarRemnant(BaseModel):
    """Retalho de barra em estoque"""
    length: int = Field(..., gt=0, description="Comprimento (mm)")
    quantity: int = Field(1, gt=0, description="Quantidade de retalhos iguais")

    @model_validator(mode="before")
    @classmethod
    def from_number(cls, data):
        if _is_number(data):
            return {"length": data}
        return data


class SheetRemnant(BaseModel):
    """Retalho de chapa em estoque"""
    width: int = Field(..., gt=0, description="Largura (mm)")
    height: int = Field(..., gt=0, description="Altura (mm)")
    quantity: int = Field(1, gt=0, description="Quantidade de retalhos iguais")


class Bar(BaseModel):
    """Uma barra cortada (resultado 1D)"""
    stock_length: int = Field(..., description="Comprimento da barra (mm)")
    source_type: SourceType = Field(..., description="Comprada ou retalho")
    cuts: List[int] = Field(..., description="Comprimentos cortados, em ordem")
    remainder: int = Field(..., description="Sobra ao final da barra (mm)")
    kerf_total: int = Field(0, description="Material perdido na serra (mm)")
    repeat_count: int = Field(1, ge=1, description="Barras idênticas cortadas juntas")

    @property
    def used_length(self) -> int:
        """Comprimento consumido (peças + serra)"""
        return self.stock_length - self.remainder


class SheetRef(BaseModel):
    """Chapa utilizada em um plano"""
    id: Optional[str] = Field(None, description="ID da chapa padrão (None para retalho)")
    name: str = Field(..., description="Nome exibido")
    width: int = Field(..., description="Largura (mm)")
    height: int = Field(..., description="Altura (mm)")


class PlacedRect(BaseModel):
    """Peça posicionada no modo misto"""
    x: int = Field(..., description="Posição X (mm)")
    y: int = Field(..., description="Posição Y (mm)")
    w: int = Field(..., description="Largura ocupada (mm)")
    h: int = Field(..., description="Altura ocupada (mm)")
    label: str = Field(..., description="Rótulo da peça")


class PartCount(BaseModel):
    label: str
    quantity: int


class Placement(BaseModel):
    """Uma chapa planejada (resultado 2D)"""
    kind: PlacementKind = Field(..., description="Grade de um tipo ou misto")
    source_type: SourceType = Field(..., description="Comprada ou retalho")
    sheet: SheetRef = Field(..., description="Chapa utilizada")
    orientation: Optional[Orientation] = Field(None, description="Orientação da grade")
    nx: Optional[int] = Field(None, description="Colunas da grade")
    ny: Optional[int] = Field(None, description="Linhas da grade")
    part_width: Optional[int] = Field(None, description="Largura da peça como posicionada")
    part_height: Optional[int] = Field(None, description="Altura da peça como posicionada")
    made: int = Field(..., description="Peças produzidas nesta chapa")
    rects: Optional[List[PlacedRect]] = Field(None, description="Peças posicionadas (modo misto)")
    parts_summary: List[PartCount] = Field(default_factory=list, description="Peças por rótulo")


class BarCuttingOptions(BaseModel):
    """Opções do otimizador de barras"""
    kerf_mm: int = Field(0, ge=0, description="Espessura do corte (mm)")
    stacking_mode: bool = Field(False, description="Padrões repetidos para corte empilhado")
    optimize_mode: OptimizeMode = Field(OptimizeMode.GLOBAL, description="Critério do modo de aproveitamento")


class SheetNestingOptions(BaseModel):
    """Opções do otimizador de chapas"""
    ignore_direction: bool = Field(False, description="Permitir qualquer rotação")
    force_direction: Optional[Orientation] = Field(None, description="Fixar orientação A ou B")
    mixed_mode: bool = Field(False, description="Misturar tipos de peça na mesma chapa")


class BarCuttingRequest(BaseModel):
    """Requisição de corte de barras"""
    stock: List[StockLength] = Field(..., description="Comprimentos padrão disponíveis")
    pieces: List[Piece] = Field(..., description="Peças a cortar")
    remnants: List[BarRemnant] = Field(default_factory=list, description="Retalhos em estoque")
    options: BarCuttingOptions = Field(default_factory=BarCuttingOptions, description="Opções")


class SheetNestingRequest(BaseModel):
    """Requisição de aninhamento de chapas"""
    stocks: List[StockSheet] = Field(..., description="Chapas padrão disponíveis")
    rectangles: List[Rectangle] = Field(..., description="Peças a cortar")
    remnants: List[SheetRemnant] = Field(default_factory=list, description="Retalhos em estoque")
    options: SheetNestingOptions = Field(default_factory=SheetNestingOptions, description="Opções")


class BarCuttingSummary(BaseModel):
    """Totais de um plano de barras, recalculáveis a partir das barras"""
    need_total: int
    kerf_mm: int
    stacking_mode: bool
    optimize_mode: str
    purchased_bars_count: int
    by_purchased_stock: Dict[int, int]
    used_remnants_count: int
    used_remnants: List[int]
    total_stock: int
    total_used: int
    total_remainder: int
    total_kerf: int
    yield_pct: float
    made_total: int


class SheetNestingSummary(BaseModel):
    """Totais de um plano de chapas, recalculáveis a partir das chapas"""
    need_total: int
    made_total: int
    used_remnants_count: int
    used_remnants: List[SheetRef]
    purchased_sheets_count: int
    by_purchased_stock: Dict[str, int]
    mixed_mode: bool
    ignore_direction: bool
    force_direction: Optional[Orientation] = None


class BarCuttingResult(BaseModel):
    """Resultado do corte de barras"""
    ok: bool = Field(..., description="Se o plano foi gerado")
    bars: List[Bar] = Field(default_factory=list, description="Barras em ordem de corte")
    summary: Optional[BarCuttingSummary] = Field(None, description="Totais do plano")
    error: Optional[str] = Field(None, description="Mensagem de erro")
    error_type: Optional[str] = Field(None, description="Categoria do erro")


class SheetNestingResult(BaseModel):
    """Resultado do aninhamento de chapas"""
    ok: bool = Field(..., description="Se o plano foi gerado")
    placements: List[Placement] = Field(default_factory=list, description="Chapas em ordem")
    summary: Optional[SheetNestingSummary] = Field(None, description="Totais do plano")
    error: Optional[str] = Field(None, description="Mensagem de erro")
    error_type: Optional[str] = Field(None, description="Categoria do erro")


class PlateEstimate(BaseModel):
    """Estimativa rápida de chapas para um único tipo de peça"""
    stock_id: str
    stock_name: str
    stock_size: str
    per_sheet: int = Field(..., description="Peças por chapa")
    need_sheets: int = Field(..., description="Chapas necessárias")
    orientation: str = Field(..., description="A, B ou free")


class BarGroup(BaseModel):
    """Barras consecutivas idênticas agrupadas para exibição"""
    bar: Bar
    start_no: int
    end_no: int
    count: int


class PlacementGroup(BaseModel):
    """Chapas consecutivas idênticas agrupadas para exibição"""
    placement: Placement
    start_no: int
    end_no: int
    count: int
