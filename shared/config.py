# shared/config.py
from __future__ import annotations
import os, json
import re
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Mapping
from dotenv import load_dotenv
import logging
from logging.handlers import TimedRotatingFileHandler

logger = logging.getLogger(__name__)

# Raíz del proyecto (donde están .env, config.json, etc.)
BASE_DIR = Path(__file__).resolve().parents[1]

# Cargar variables del .env en la raíz (y fallback al cwd por si acaso)
load_dotenv(BASE_DIR / ".env")
load_dotenv()

DEFAULT_LOG_RETENTION_DAYS = 7
DEFAULT_FX_CACHE_TTL = 5 * 60


def _load_cfg() -> Dict[str, Any]:
    """
    Carga (opcional) config.json desde la raíz del proyecto (o cwd). Si no existe, {}.
    """
    candidates = [BASE_DIR / "config.json", Path.cwd() / "config.json"]
    for p in candidates:
        try:
            if p.exists():
                data = json.loads(p.read_text(encoding="utf-8"))
                return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.exception("No se pudo cargar configuración %s: %s", p, e)
    return {}


def _as_bool(raw: Any) -> bool:
    return str(raw).strip().lower() in {"1", "true", "yes"}


class Settings:
    def __init__(self) -> None:
        cfg = _load_cfg()

        # --- Identidad / headers ---
        self.USER_AGENT: str = os.getenv(
            "USER_AGENT", cfg.get("USER_AGENT", "Portafolio-Dashboard/1.0 (+api)")
        )
        raw_app_env = os.getenv("APP_ENV", cfg.get("APP_ENV", "dev"))
        app_env_text = str(raw_app_env or "dev").strip()
        self.app_env: str = app_env_text.lower() or "dev"

        # --- Tipos de cambio ---
        self.FX_CACHE_TTL: float = self._coerce_positive_float(
            os.getenv("FX_CACHE_TTL", cfg.get("FX_CACHE_TTL", DEFAULT_FX_CACHE_TTL)),
            default=DEFAULT_FX_CACHE_TTL,
        )
        self.FX_LOOKUP_TIMEOUT: float = self._coerce_positive_float(
            os.getenv("FX_LOOKUP_TIMEOUT", cfg.get("FX_LOOKUP_TIMEOUT", 5.0)),
            default=5.0,
        )
        # Derivados CCL/Blue a partir del oficial cuando la consulta sólo trae ese valor
        self.fx_ccl_multiplier: float = float(
            os.getenv("FX_CCL_MULTIPLIER", cfg.get("FX_CCL_MULTIPLIER", 1.95))
        )
        self.fx_blue_multiplier: float = float(
            os.getenv("FX_BLUE_MULTIPLIER", cfg.get("FX_BLUE_MULTIPLIER", 2.00))
        )

        # --- API de completions (análisis IA y consulta de cotizaciones) ---
        raw_ai_key = os.getenv("AI_API_KEY", cfg.get("AI_API_KEY"))
        ai_key_text = str(raw_ai_key).strip() if raw_ai_key else ""
        self.AI_API_KEY: str | None = ai_key_text or None
        self.AI_BASE_URL: str = str(
            os.getenv("AI_BASE_URL", cfg.get("AI_BASE_URL", "https://api.openai.com/v1"))
        ).rstrip("/")
        self.AI_MODEL: str = os.getenv("AI_MODEL", cfg.get("AI_MODEL", "gpt-4o-mini"))
        self.AI_TIMEOUT: float = self._coerce_positive_float(
            os.getenv("AI_TIMEOUT", cfg.get("AI_TIMEOUT", 20.0)), default=20.0
        )
        self.AI_TEMPERATURE: float = float(
            os.getenv("AI_TEMPERATURE", cfg.get("AI_TEMPERATURE", 0.7))
        )
        self.AI_MAX_TOKENS: int = int(
            os.getenv("AI_MAX_TOKENS", cfg.get("AI_MAX_TOKENS", 2000))
        )

        # --- Logging ---
        self.LOG_LEVEL: str = str(os.getenv("LOG_LEVEL", cfg.get("LOG_LEVEL", "INFO"))).upper()
        self.LOG_FORMAT: str = str(os.getenv("LOG_FORMAT", cfg.get("LOG_FORMAT", "plain"))).lower()
        raw_log_dir = os.getenv("LOG_DIR", cfg.get("LOG_DIR"))
        self.LOG_DIR: str | None = str(raw_log_dir).strip() if raw_log_dir else None
        retention_candidate = os.getenv(
            "LOG_RETENTION_DAYS", cfg.get("LOG_RETENTION_DAYS", DEFAULT_LOG_RETENTION_DAYS)
        )
        self.LOG_RETENTION_DAYS: int = self._coerce_positive_int(retention_candidate)
        self.ENABLE_PROMETHEUS: bool = _as_bool(
            os.getenv("ENABLE_PROMETHEUS", cfg.get("ENABLE_PROMETHEUS", "1"))
        )

    def _coerce_positive_int(self, candidate: Any) -> int:
        try:
            value = int(candidate)
        except (TypeError, ValueError):
            return DEFAULT_LOG_RETENTION_DAYS
        return max(value, 1)

    @staticmethod
    def _coerce_positive_float(candidate: Any, *, default: float) -> float:
        try:
            value = float(candidate)
        except (TypeError, ValueError):
            logger.warning("Valor inválido en configuración: %s", candidate)
            return default
        if value <= 0:
            return default
        return value


settings = Settings()


class JsonFormatter(logging.Formatter):
    """Formato JSON simple para registros de log."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


LOG_FILENAME_PATTERN = re.compile(r"dashboard_(\d{4}-\d{2}-\d{2})\.log$")


def prune_old_logs(directory: Path, retention_days: int, current_file: str | None = None) -> None:
    """Remove ``dashboard_YYYY-MM-DD.log`` files older than the retention window."""

    try:
        retention_value = int(retention_days)
    except (TypeError, ValueError):
        retention_value = DEFAULT_LOG_RETENTION_DAYS

    retention_value = max(retention_value, 1)
    cutoff = datetime.now().date() - timedelta(days=retention_value - 1)

    current_path = Path(current_file) if current_file else None
    current_resolved = current_path.resolve() if current_path else None

    for candidate in directory.glob("dashboard_*.log"):
        if current_resolved is not None and candidate.resolve() == current_resolved:
            continue

        match = LOG_FILENAME_PATTERN.match(candidate.name)
        if not match:
            continue

        try:
            file_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            continue

        if file_date < cutoff:
            try:
                candidate.unlink()
            except OSError as exc:
                logger.warning("No se pudo borrar log antiguo %s: %s", candidate, exc)


class DailyTimedRotatingFileHandler(TimedRotatingFileHandler):
    """Time-based file handler that writes daily log files with a date suffix."""

    def __init__(self, directory: Path, retention_days: int, encoding: str = "utf-8") -> None:
        self.log_directory = Path(directory)
        self.log_directory.mkdir(parents=True, exist_ok=True)
        try:
            retention_value = int(retention_days)
        except (TypeError, ValueError):
            retention_value = DEFAULT_LOG_RETENTION_DAYS
        self.retention_days = max(retention_value, 1)

        filename = self._filename_for(datetime.now())

        super().__init__(
            filename=str(filename),
            when="midnight",
            interval=1,
            backupCount=0,
            encoding=encoding,
            delay=False,
        )

        # The first rollover happens at the upcoming midnight, not relative to
        # the file's modification time.
        self.rolloverAt = self.computeRollover(time.time())

        prune_old_logs(self.log_directory, self.retention_days, current_file=self.baseFilename)

    def _filename_for(self, moment: datetime) -> Path:
        return self.log_directory / f"dashboard_{moment.strftime('%Y-%m-%d')}.log"

    def doRollover(self) -> None:  # pragma: no cover - exercised indirectly
        if self.stream:
            self.stream.close()
            self.stream = None  # type: ignore[assignment]

        rollover_time = self.rolloverAt or time.time()
        next_moment = datetime.fromtimestamp(rollover_time)
        self.baseFilename = str(self._filename_for(next_moment))

        if not self.delay:
            self.stream = self._open()

        self.rolloverAt = self.computeRollover(rollover_time)
        prune_old_logs(self.log_directory, self.retention_days, current_file=self.baseFilename)


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Configura el logging global.

    Por defecto usa nivel ``INFO`` y formato ``"plain"``. Los valores
    configurados se normalizan y, si son inválidos, se revierte a estos
    predeterminados. El archivo diario sólo se habilita cuando ``LOG_DIR``
    está configurado.
    """

    level_name = (level or getattr(settings, "LOG_LEVEL", "INFO")).upper()
    level_value = getattr(logging, level_name, None)
    if not isinstance(level_value, int):
        level_name = "INFO"
        level_value = logging.INFO

    if json_format is None:
        fmt = str(getattr(settings, "LOG_FORMAT", "plain")).lower()
        if fmt not in {"json", "plain"}:
            fmt = "plain"
        json_format = fmt == "json"

    if json_format:
        formatter: logging.Formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root = logging.getLogger()
    root.setLevel(level_value)
    root.handlers = []

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    log_dir = getattr(settings, "LOG_DIR", None)
    if log_dir:
        file_handler = DailyTimedRotatingFileHandler(
            directory=Path(log_dir),
            retention_days=getattr(settings, "LOG_RETENTION_DAYS", DEFAULT_LOG_RETENTION_DAYS),
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    noisy_levels: Mapping[str, int] = {
        "urllib3": logging.WARNING,
        "urllib3.connectionpool": logging.WARNING,
    }
    for logger_name, forced_level in noisy_levels.items():
        logging.getLogger(logger_name).setLevel(forced_level)


__all__ = [
    "BASE_DIR",
    "DEFAULT_FX_CACHE_TTL",
    "DEFAULT_LOG_RETENTION_DAYS",
    "DailyTimedRotatingFileHandler",
    "JsonFormatter",
    "Settings",
    "configure_logging",
    "prune_old_logs",
    "settings",
]
