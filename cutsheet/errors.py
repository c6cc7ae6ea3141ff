"""
Erros dos otimizadores de corte
"""


class CuttingError(Exception):
    """Erro base dos otimizadores; vira um resultado com ok=False no CutPlanner"""

    error_type = "cutting_error"


class InputValidationError(CuttingError):
    """Entrada vazia ou com dimensões/quantidades não positivas"""

    error_type = "input_validation"


class InfeasibleError(CuttingError):
    """Alguma peça não cabe em nenhum material (padrão ou retalho)"""

    error_type = "infeasible"


class InternalInconsistencyError(CuttingError):
    """Um encaixe calculado não colocou nenhuma peça"""

    error_type = "internal_inconsistency"
