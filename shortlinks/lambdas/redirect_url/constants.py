# Logging event codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
REDIRECT_FAILED = 'REDIRECT_FAILED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
