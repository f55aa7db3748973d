import logging

from tinyurl.constants import MISSING_SHORTCODE, SHORT_URL_NOT_FOUND, BACKEND_UNAVAILABLE
from tinyurl.dao.exceptions import DataStoreError, ShortURLNotFoundError
from tinyurl.lambdas.responses import response_302, response_400, response_404, response_503
from tinyurl.lambdas.redirect_url.constants import REDIRECT_SUCCESS
from tinyurl.types import LambdaContext, LambdaEvent, LambdaResponse
from tinyurl.utils import load_config, get_short_url, guarantee_500_response
from tinyurl.utils.factory import build_shortener


logger = logging.getLogger(__name__)


def extract_shortcode(event: LambdaEvent) -> str | None:
    """Read the short code from path parameters (API Gateway) or the raw path (ALB)"""
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode:
        return shortcode

    path = event.get('path') or ''
    if len(path) < 2:
        return None
    return path[1:]


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway / ALB requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Load configuration and the process-wide shortener
    - Step 2: Extract shortcode from request path
    - Step 3: Decode shortcode into the long URL
    - Step 4: Redirect client to the long URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: long URL
        400: Bad client request
            message: missing shortcode in path
        404: Not found
            message: no short URL registered for the shortcode
        503: Service unavailable
            message: the record store could not be reached

    Args:
        event (LambdaEvent):
            API Gateway / ALB event payload containing the shortcode.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            Lambda Proxy compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': '2e3lqf3'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Load configuration and shortener
    app_config = load_config()
    try:
        shortener = build_shortener(app_config)
    except DataStoreError as e:
        logger.error('Record store unreachable at startup. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'reason': str(e)})
        return response_503(error_code=BACKEND_UNAVAILABLE)

    # 2- Extract shortcode from request's path
    shortcode = extract_shortcode(event)
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, app_config.base_url))

    # 3- Decode shortcode
    try:
        target_url = shortener.decode(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(
            message=f"short url {get_short_url(shortcode, app_config.base_url)} doesn't exist",
            error_code=SHORT_URL_NOT_FOUND,
        )
    except DataStoreError as e:
        logger.error(
            'Record store unavailable. Responding with 503.',
            extra={'shortcode': shortcode, 'event': BACKEND_UNAVAILABLE, 'reason': str(e)},
        )
        return response_503(error_code=BACKEND_UNAVAILABLE)

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
