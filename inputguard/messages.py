"""
User-facing texts (Danish).

Security messages are generic on purpose: they never repeat any part of the
rejected input.
"""

# ============================================================================
# GENERIC
# ============================================================================
REQUIRED = "Dette felt er påkrævet"
SECURITY_PATTERN_DETECTED = "Potentielt angreb detekteret"
CUSTOM_PATTERN_MISMATCH = "Værdien har ikke det forventede format"
CUSTOM_VALIDATOR_FAILED = "Værdien kunne ikke valideres"
MIN_LENGTH = "Værdien skal være mindst {min_length} tegn"
MAX_LENGTH = "Værdien må maksimalt være {max_length} tegn"
INVALID_FIELD_SCHEMA = "Ugyldig feltdefinition"

# ============================================================================
# EMAIL
# ============================================================================
EMAIL_TOO_SHORT = "Email skal være mindst {min_length} tegn"
EMAIL_TOO_LONG = "Email må maksimalt være {max_length} tegn"
EMAIL_INVALID_FORMAT = "Ugyldig email format"
EMAIL_DISPOSABLE = "Disposable email domæne detekteret"

# ============================================================================
# PASSWORD
# ============================================================================
PASSWORD_TOO_SHORT = "Password skal være mindst {min_length} tegn"
PASSWORD_TOO_LONG = "Password må maksimalt være {max_length} tegn"
PASSWORD_NEEDS_UPPERCASE = "Password skal indeholde store bogstaver"
PASSWORD_NEEDS_LOWERCASE = "Password skal indeholde små bogstaver"
PASSWORD_NEEDS_DIGIT = "Password skal indeholde tal"
PASSWORD_NEEDS_SPECIAL = "Password skal indeholde specialtegn"
PASSWORD_FORBIDDEN_PATTERN = "Password indeholder forbudte mønstre"

# ============================================================================
# NAME / ADDRESS
# ============================================================================
NAME_TOO_SHORT = "Navn skal være mindst {min_length} tegn"
NAME_TOO_LONG = "Navn må maksimalt være {max_length} tegn"
NAME_INVALID_CHARS = "Navn indeholder ugyldige tegn"
NAME_FORBIDDEN_WORD = "Navn indeholder forbudte ord"
ADDRESS_TOO_SHORT = "Adresse skal være mindst {min_length} tegn"
ADDRESS_TOO_LONG = "Adresse må maksimalt være {max_length} tegn"
ADDRESS_INVALID_CHARS = "Adresse indeholder ugyldige tegn"

# ============================================================================
# PHONE / CPR
# ============================================================================
PHONE_INVALID_FORMAT = "Ugyldigt telefonnummer format"
CPR_INVALID_FORMAT = "Ugyldigt CPR nummer format"
CPR_INVALID_DAY = "Ugyldig dag i CPR nummer"
CPR_INVALID_MONTH = "Ugyldig måned i CPR nummer"

# ============================================================================
# AMOUNT / URL
# ============================================================================
AMOUNT_DIGITS_ONLY = "Beløb må kun indeholde tal"
AMOUNT_TOO_SMALL = "Beløb skal være mindst {minimum}"
AMOUNT_TOO_LARGE = "Beløb må maksimalt være {maximum}"
URL_TOO_LONG = "URL må maksimalt være {max_length} tegn"
URL_INVALID_FORMAT = "Ugyldig URL format"
URL_NOT_HTTPS = "URL bør bruge HTTPS"

# ============================================================================
# PASSWORD STRENGTH FEEDBACK
# ============================================================================
STRENGTH_USE_MIN_LENGTH = "Brug mindst {min_length} tegn"
STRENGTH_ADD_UPPERCASE = "Tilføj store bogstaver"
STRENGTH_ADD_LOWERCASE = "Tilføj små bogstaver"
STRENGTH_ADD_DIGIT = "Tilføj tal"
STRENGTH_ADD_SPECIAL = "Tilføj specialtegn"

# ============================================================================
# RATE LIMITING / ERRORS
# ============================================================================
TOO_MANY_MESSAGES = "Du har sendt for mange beskeder. Prøv igen om en time."
TOO_MANY_INVITATIONS = "Du kan maksimalt sende {limit} invitationer per dag. Prøv igen i morgen."
TOO_MANY_REQUESTS = "For mange forsøg. Prøv igen senere"
INVALID_INPUT = "Ugyldig input. Kontroller dine oplysninger"
REQUIRED_FIELDS_MISSING = "Påkrævede felter mangler"
DATA_VALIDATION_FAILED = "Data validering mislykkedes"
INTERNAL_ERROR = "Der opstod en fejl. Prøv igen senere"
