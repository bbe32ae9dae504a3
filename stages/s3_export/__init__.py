from .formatter import ExportFormatter, export

__all__ = ["ExportFormatter", "export"]
