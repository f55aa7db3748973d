# Log event codes
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
