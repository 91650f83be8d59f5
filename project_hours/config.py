"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    if Path("./public/documents").exists():
        return Path("./public/documents")
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    log_dir: Path = field(default_factory=lambda: Path(os.getenv("LOG_DIR", "logs")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600")))

    # Source workbooks
    plan_file: str = field(default_factory=lambda: os.getenv("PLAN_FILE", "Projetos_em_Horas.xlsx"))
    time_file: str = field(default_factory=lambda: os.getenv("TIME_FILE", "Horas_Detalhadas.xlsx"))
    cause_file: str = field(default_factory=lambda: os.getenv("CAUSE_FILE", "Causas_Improdutivas.xlsx"))
    plan_sheet: str = field(default_factory=lambda: os.getenv("PLAN_SHEET", "Extração de Dados"))
    cause_sheet: str = "Causas"
    cause_detail_sheet: str = "Detalhamento"

    @property
    def plan_path(self) -> Path:
        return self.data_dir / self.plan_file

    @property
    def time_path(self) -> Path:
        return self.data_dir / self.time_file

    @property
    def cause_path(self) -> Path:
        return self.data_dir / self.cause_file


# Global config instance
config = AppConfig()


# Logical table → workbook path attribute, sheet (None = first sheet) and the
# suffix of its CSV fallback (<workbook stem><suffix>.csv).
SOURCE_FILES = {
    "plan": {"path": "plan_path", "sheet": config.plan_sheet, "csv_suffix": ""},
    "time_entries": {"path": "time_path", "sheet": None, "csv_suffix": ""},
    "causes": {"path": "cause_path", "sheet": config.cause_sheet, "csv_suffix": "_causas"},
    "cause_details": {"path": "cause_path", "sheet": config.cause_detail_sheet, "csv_suffix": "_detalhamento"},
}

REQUIRED_TABLES = ["plan", "time_entries"]


# =============================================================================
# SOURCE COLUMN MAPS (spreadsheet header → canonical column)
# =============================================================================

PLAN_COLUMN_MAP = {
    "Cod Projeto": "project_code",
    "Descrição do Item": "item_description",
    "Hs Orçadas": "sold_hours",
    "Hs Programadas": "planned_hours",
    "Hs Executadas": "executed_hours",
    "Hs Saldo": "balance_hours",
}

TIME_ENTRY_COLUMN_MAP = {
    "Código do Projeto": "project_code",
    "Descrição da Atividade": "activity_description",
    "Descrição Tipo Atividade": "activity_type",
    "Data Apontamento": "entry_date",
    "Horas Decimal": "hours",
}

CAUSE_COLUMN_MAP = {
    "Cod Projeto": "project_code",
    "Etapa": "stage",
    "Causa": "cause",
    "Horas": "hours",
}

CAUSE_DETAIL_COLUMN_MAP = {
    "Cod Projeto": "project_code",
    "Etapa": "stage",
    "Causa": "cause",
    "Detalhamento": "detail",
    "Horas": "hours",
}

COLUMN_MAPS = {
    "plan": PLAN_COLUMN_MAP,
    "time_entries": TIME_ENTRY_COLUMN_MAP,
    "causes": CAUSE_COLUMN_MAP,
    "cause_details": CAUSE_DETAIL_COLUMN_MAP,
}

# Required columns (hard fail if missing, source headers)
REQUIRED_COLUMNS = {
    "plan": ["Cod Projeto", "Descrição do Item", "Hs Orçadas", "Hs Programadas", "Hs Executadas"],
    "time_entries": ["Código do Projeto", "Descrição da Atividade", "Descrição Tipo Atividade",
                     "Data Apontamento", "Horas Decimal"],
    "causes": ["Cod Projeto", "Etapa", "Horas"],
    "cause_details": ["Cod Projeto", "Etapa"],
}

# Optional columns (soft warn if missing, coerced to defaults)
OPTIONAL_COLUMNS = {
    "plan": ["Hs Saldo"],
    "causes": ["Causa"],
    "cause_details": ["Causa", "Detalhamento", "Horas"],
}

NUMERIC_COLUMNS = {"sold_hours", "planned_hours", "executed_hours", "balance_hours", "hours"}


# =============================================================================
# BUSINESS VOCABULARY
# =============================================================================

CANONICAL_STAGES = ["Parametrização", "PTAF", "TAF", "Técnico Campo", "TAC"]
UNMAPPED_STAGE = "Outras"

CATEGORY_PRODUCTIVE = "Produtivas"
CATEGORY_UNPRODUCTIVE = "Improdutivas"
CATEGORY_OUT_OF_SCOPE = "Fora do escopo"
CATEGORY_TRANSFER = "Translado"
CATEGORY_OTHER = "Outras"

ACTIVITY_CATEGORIES = [
    CATEGORY_PRODUCTIVE,
    CATEGORY_UNPRODUCTIVE,
    CATEGORY_OUT_OF_SCOPE,
    CATEGORY_TRANSFER,
    CATEGORY_OTHER,
]

# Wildcard selectors
ALL_STAGES = "todas"
ALL_ACTIVITIES = "todas"
ALL_TYPES = "Todos os Tipos"
ALL_CAUSES = ""

ACTIVITY_TYPE_OPTIONS = [
    ALL_TYPES,
    CATEGORY_PRODUCTIVE,
    CATEGORY_UNPRODUCTIVE,
    CATEGORY_OUT_OF_SCOPE,
    CATEGORY_TRANSFER,
]

# Chart labels for stage groups (canonical column → display label)
STAGE_CHART_LABELS = {
    "sold_hours": "Vendido",
    "planned_hours": "Planejado",
    "consumed_hours": "Consumido",
    "unproductive_hours": "Improdutivo",
    "consumption_ratio": "Variação PlanXCons",
}
