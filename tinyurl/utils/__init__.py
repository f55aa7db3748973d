from tinyurl.utils.config import AppConfig, app_env, app_name, app_prefix, load_config
from tinyurl.utils.helpers import get_short_url, utcnow, require_environment, guarantee_500_response
from tinyurl.utils.shortener import generate_shortcode
from tinyurl.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'AppConfig',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'get_short_url',
    'utcnow',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
