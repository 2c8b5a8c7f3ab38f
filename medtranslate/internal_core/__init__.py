from .config import TranslatorConfig, load_config, require_api_key
from .health import HealthProbe
from .session_ledger import InMemorySessionLedger

__all__ = ["TranslatorConfig", "load_config", "require_api_key", "HealthProbe", "InMemorySessionLedger"]
