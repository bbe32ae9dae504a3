"""Custom exceptions for the bonus grid engine"""


class BonusGridError(Exception):
    """Base exception for all bonus grid errors"""
    pass


class PipelineError(BonusGridError):
    """Error in pipeline execution"""
    def __init__(self, message: str, stage: int = None):
        super().__init__(message)
        self.stage = stage


class StageError(BonusGridError):
    """Error in a specific stage"""
    def __init__(self, stage: int, message: str):
        super().__init__(f"Stage {stage}: {message}")
        self.stage = stage
        self.message = message


class SchemaViolation(BonusGridError):
    """Schema or catalog declaration is inconsistent"""
    def __init__(self, message: str, address: str = None):
        super().__init__(message)
        self.address = address


class CircularReferenceError(SchemaViolation):
    """Declared formulas depend on each other in a loop"""
    def __init__(self, cycle: list):
        super().__init__(f"Circular reference between cells: {', '.join(cycle)}")
        self.cycle = cycle


class CatalogLoadError(BonusGridError):
    """Error reading a catalog asset"""
    def __init__(self, message: str, file_path: str = None):
        super().__init__(message)
        self.file_path = file_path


class UnknownAddressError(BonusGridError):
    """Requested address has no input or formula (strict mode only)"""
    def __init__(self, address: str):
        super().__init__(f"No input or formula is declared for {address}")
        self.address = address
