# Logging event codes
ANALYTICS_SUCCESS = 'ANALYTICS_SUCCESS'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
INVALID_SHORTCODE = 'INVALID_SHORTCODE'
ANALYTICS_FAILED = 'ANALYTICS_FAILED'
