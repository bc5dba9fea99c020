"""Data loader package exports."""
from .redshift_loader import ParameterTable, RedshiftBatch

__all__ = [
    'ParameterTable',
    'RedshiftBatch',
]
