from taxengine.export.summary import build_export_summary

__all__ = ["build_export_summary"]
