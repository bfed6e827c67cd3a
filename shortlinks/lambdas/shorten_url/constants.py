# Logging event codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_EXPIRES_AT = 'INVALID_EXPIRES_AT'
INVALID_TARGET_URL = 'INVALID_TARGET_URL'
SHORTEN_FAILED = 'SHORTEN_FAILED'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
