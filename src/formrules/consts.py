"""Constants for formrules"""

# ==================== Logging ====================
LOG_FILE_DEFAULT = "data/formrules.log"

# ==================== Languages ====================
LANGUAGE_DEFAULT = "en"
ALT_LANGUAGE_DEFAULT = "fr"

# ==================== Rules ====================
DEFAULT_RULE_PRIORITY = 100
INACTIVE_RULE_MESSAGE = "Rule is inactive"

# ==================== Option Set Resolution ====================
RESOLVER_TIMEOUT_DEFAULT = 10.0  # seconds per option-set lookup
RESOLVER_CONCURRENCY_DEFAULT = 8

# ==================== Hierarchy Metrics Weights ====================
WEIGHT_FIELDS = 1.0
WEIGHT_LINKS = 2.0
WEIGHT_CONDITIONAL_FIELDS = 3.0
WEIGHT_DEPTH_SQUARED = 1.5

# ==================== Validation ====================
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
EMAIL_FIELD_TYPES = ("email", "emailaddress")

# ==================== Validation Error Codes ====================
CODE_REQUIRED = "REQUIRED"
CODE_MIN_LENGTH = "MIN_LENGTH"
CODE_MAX_LENGTH = "MAX_LENGTH"
CODE_PATTERN_MISMATCH = "PATTERN_MISMATCH"
CODE_INVALID_EMAIL = "INVALID_EMAIL"
CODE_MIN_VALUE = "MIN_VALUE"
CODE_MAX_VALUE = "MAX_VALUE"
CODE_NOT_A_NUMBER = "NOT_A_NUMBER"
CODE_CROSS_FIELD_REQUIRED = "CROSS_FIELD_REQUIRED"
CODE_CROSS_FIELD_ALL_OR_NONE = "CROSS_FIELD_ALL_OR_NONE"
CODE_CROSS_FIELD_EXCLUSIVE = "CROSS_FIELD_EXCLUSIVE"
CODE_INVALID_DATE = "INVALID_DATE"
CODE_DATE_TOO_EARLY = "DATE_TOO_EARLY"
CODE_DATE_TOO_LATE = "DATE_TOO_LATE"
CODE_INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
CODE_FILE_TOO_LARGE = "FILE_TOO_LARGE"
CODE_TOO_MANY_FILES = "TOO_MANY_FILES"
CODE_TOO_MANY_ROWS = "TOO_MANY_ROWS"

# ==================== Built-in Rule Ids ====================
RULE_REQUIRED = "required"
RULE_LENGTH = "length"
RULE_PATTERN = "pattern"
RULE_EMAIL = "email"
RULE_RANGE = "range"
RULE_TYPE_CONFIG = "typeconfig"

# ==================== Relative Dates ====================
# Days per unit of "Now+30d" style offsets
DATE_OFFSET_UNITS = {"d": 1, "w": 7, "m": 30, "y": 365}
