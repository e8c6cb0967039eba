"""
Deterministic conversion rules.

This file exists to make the canonical schema and its defaults explicit and enforceable.
"""

H_NAME = "Name"
H_ADDRESS = "Address"
H_POSTCODE = "Postcode"
H_PHONE = "Phone"
H_CREDIT_LIMIT = "Credit Limit"
H_BIRTHDAY = "Birthday"

# Order matters: table headers and fixed-width layout inference follow it.
CANONICAL_FIELDS = (
    H_NAME,
    H_ADDRESS,
    H_POSTCODE,
    H_PHONE,
    H_CREDIT_LIMIT,
    H_BIRTHDAY,
)

DEFAULT_VALUES = {
    H_CREDIT_LIMIT: "0.00",
    H_BIRTHDAY: "",
}
DEFAULT_TEXT_VALUE = ""

ALLOWED_INPUT_TYPES = ("csv", "prn")
ALLOWED_OUTPUT_TYPES = ("json", "html")

DEFAULT_DELIMITER = ","
# Fixed-width credit limits are integer cents.
MINOR_UNITS_PER_UNIT = 100

AUTO_ENCODING = "auto"
FALLBACK_ENCODING = "utf-8"
# Non-UTF-8 input is read the way the legacy exports were written.
SINGLE_BYTE_ENCODING = "latin-1"
OUTPUT_ENCODING = "utf-8"
DETECTION_SAMPLE_SIZE = 4096
DEFAULT_CHUNK_SIZE = 64 * 1024
