"""Analysis components for Mercury CI."""

from .csv_profiler import CSVProfiler, confidence_for_rows, data_quality_for_rows
from .assembler import (
    SUPPORTED_EXTENSIONS,
    AnalysisAssembler,
    get_extension,
    is_extraction_error,
)
from .data_analysis import DataAnalyser, DataAnalysisToolResult, analyse_data

__all__ = [
    "CSVProfiler",
    "confidence_for_rows",
    "data_quality_for_rows",
    "SUPPORTED_EXTENSIONS",
    "AnalysisAssembler",
    "get_extension",
    "is_extraction_error",
    "DataAnalyser",
    "DataAnalysisToolResult",
    "analyse_data",
]
