"""Coletor das planilhas de contracheques e indenizações do MPPA."""

__version__ = "0.1.0"
