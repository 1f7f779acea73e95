from dataclasses import dataclass
from pathlib import Path
from typing import Union

# raiz do projeto = pasta 2 níveis acima de src/boatrace
PROJECT_ROOT = Path(__file__).resolve().parents[2]

BOATRACE_DATA_DIR = PROJECT_ROOT / "data" / "boatrace"

# Categorias de aposta: valor canonico -> rotulo exibido na planilha/UI
TYPE_LABELS: dict[str, str] = {
    "free": "無料",
    "paid": "有料",
}
TYPE_LABELS_INV: dict[str, str] = {v: k for k, v in TYPE_LABELS.items()}

ACTIONS: tuple[str, ...] = ("create", "update", "delete")
KINDS: tuple[str, ...] = ("records", "users")
DEFAULT_KIND = "records"


def ensure_data_dir(*subdirs: Union[Path, str]) -> Path:
    """Cria (se preciso) o diretorio de dados dos exports e devolve o caminho."""
    target = BOATRACE_DATA_DIR.joinpath(*[str(part) for part in subdirs])
    target.mkdir(parents=True, exist_ok=True)
    return target


@dataclass(frozen=True)
class Settings:
    DATA_DIR: Path = BOATRACE_DATA_DIR
    API_BASE_URL: str = (
        "https://script.google.com/macros/s/"
        "AKfycbwEkhEDAMFvPTHClIJNrijs49xhqRf6RvzyU7oR2ZbfJWy9KySPljH-36OUr7AmXkNsPw/exec"
    )
    HTTP_TIMEOUT_SEC: float = 20.0
    WRITE_CONTENT_TYPE: str = "text/plain;charset=utf-8"
    DEFAULT_RECENT_DAYS: int = 14
    CSV_ENCODING: str = "utf-8-sig"
    LOG_LEVEL: str = "INFO"


settings = Settings()

__all__ = [
    "TYPE_LABELS",
    "TYPE_LABELS_INV",
    "ACTIONS",
    "KINDS",
    "DEFAULT_KIND",
    "PROJECT_ROOT",
    "BOATRACE_DATA_DIR",
    "ensure_data_dir",
    "Settings",
    "settings",
]
