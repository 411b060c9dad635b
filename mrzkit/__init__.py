from mrzkit.checkdigit import calculate_check_digit, fast_validate_td3_check_digits, validate_check_digit
from mrzkit.correction import CorrectionConfig, parse_with_error_correction
from mrzkit.create import create_mrz
from mrzkit.models import CorrectionMetrics, FieldDetail, MRZDate, MRZInput, ParseResult, Range
from mrzkit.parse import parse_mrz
from mrzkit.td3 import MRZFormatError, parse_td3

ENGINE_VERSION = "0.1.0"

__all__ = [
    "ENGINE_VERSION",
    "CorrectionConfig",
    "CorrectionMetrics",
    "FieldDetail",
    "MRZDate",
    "MRZFormatError",
    "MRZInput",
    "ParseResult",
    "Range",
    "calculate_check_digit",
    "create_mrz",
    "fast_validate_td3_check_digits",
    "parse_mrz",
    "parse_td3",
    "parse_with_error_correction",
    "validate_check_digit",
]
