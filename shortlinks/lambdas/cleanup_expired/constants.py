# Logging event codes
UNAUTHORIZED = 'UNAUTHORIZED'
CLEANUP_SUCCESS = 'CLEANUP_SUCCESS'
CLEANUP_FAILED = 'CLEANUP_FAILED'
