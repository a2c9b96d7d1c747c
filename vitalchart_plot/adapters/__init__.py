from .normalize import coerce_metric, normalize_sessions

__all__ = ["coerce_metric", "normalize_sessions"]
