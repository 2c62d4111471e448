__all__ = ["ttypes", "TSIService"]
