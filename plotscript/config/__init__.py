from .config import EngineConfig, RESERVED_KEYWORDS

__all__ = ["EngineConfig", "RESERVED_KEYWORDS"]
