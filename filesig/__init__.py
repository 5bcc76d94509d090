"""filesig – cálculo concorrente de checksums de todos os ficheiros de uma pasta."""

__version__ = "0.3.0"
