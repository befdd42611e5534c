"""Result and coverage parsing."""

from .assembler import ENGINE_RECORD_NAME, ResultAssembler
from .coverage_parser import parse_llvm_cov_show
from .result_parser import ResultParser, XcodeTestResultParser, normalize_test_name

__all__ = [
    'ENGINE_RECORD_NAME',
    'ResultAssembler',
    'ResultParser',
    'XcodeTestResultParser',
    'normalize_test_name',
    'parse_llvm_cov_show',
]
