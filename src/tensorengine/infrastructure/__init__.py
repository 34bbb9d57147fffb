from ._config import EngineSettings

__all__ = [EngineSettings.__name__]
