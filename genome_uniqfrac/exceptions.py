class GenomeUniqFracError(Exception):
    """Base exception for the package"""
    pass

class ConfigurationError(GenomeUniqFracError):
    """Raised when run parameters are missing or invalid"""
    pass

class InputError(GenomeUniqFracError):
    """Raised when the input sequence cannot be read"""
    pass

class InvalidSymbolError(GenomeUniqFracError):
    """Raised when a symbol outside the nucleotide alphabet is complemented"""

    def __init__(self, symbol: str, position: int = None):
        self.symbol = symbol
        self.position = position
        if position is None:
            message = f"Invalid base {symbol!r}"
        else:
            message = f"Invalid base {symbol!r} at position {position:,}"
        super().__init__(message)

class IndexFrozenError(GenomeUniqFracError):
    """Raised when a frozen k-mer index builder is written to"""
    pass

class SinkError(GenomeUniqFracError):
    """Raised when writing or flushing the output fails"""
    pass
