from .ransac import RansacResult, ransac

__all__ = ["RansacResult", "ransac"]
