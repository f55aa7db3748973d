# Log event codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
