import json
import base64
import binascii
import logging

from tinyurl.constants import (
    INVALID_REQUEST,
    BACKEND_REJECTED,
    BACKEND_UNAVAILABLE,
    COLLISION_LIMIT_EXCEEDED,
)
from tinyurl.dao.exceptions import DataStoreError
from tinyurl.exceptions import BackendRejectedError, CollisionLimitExceededError
from tinyurl.lambdas.responses import response_200, response_400, response_500, response_503
from tinyurl.lambdas.shorten_url.constants import SHORTEN_SUCCESS
from tinyurl.types import LambdaContext, LambdaEvent, LambdaResponse
from tinyurl.utils import load_config, get_short_url, guarantee_500_response
from tinyurl.utils.factory import build_shortener


logger = logging.getLogger(__name__)


def _request_body(event: LambdaEvent) -> str:
    body = event.get('body') or ''
    # ALB base64-encodes bodies it doesn't recognise as text
    if event.get('isBase64Encoded') and body:
        body = base64.b64decode(body, validate=True).decode('utf-8')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway / ALB requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Load configuration and the process-wide shortener
    - Step 2: Extract the long URL from the request body
    - Step 3: Encode the long URL (idempotent, collision-safe)
    - Step 4: Respond with the short link

    HTTP responses:
        200: Successful URL shortening
            shortlink: <BASE_URL>/<shortcode>
        400: Bad client request
            message: invalid JSON or missing/empty 'url'
        500: Internal server error
            message: collision limit exceeded, store rejected the record,
                     or an unexpected failure
        503: Service unavailable
            message: the record store could not be reached

    Args:
        event (LambdaEvent):
            API Gateway / ALB event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object (not used directly).

    Returns:
        LambdaResponse:
            JSON-serializable response following the Lambda Proxy output format.

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['shortlink']
        'https://tiny.example.com/...'
    """
    # 1- Load configuration and shortener
    # NOTE: configuration errors surface as 500s via guarantee_500_response
    app_config = load_config()
    try:
        shortener = build_shortener(app_config)
    except DataStoreError as e:
        logger.error('Record store unreachable at startup. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'reason': str(e)})
        return response_503(error_code=BACKEND_UNAVAILABLE)

    # 2- Extract long URL from request body
    try:
        request_body = json.loads(_request_body(event) or '{}')
    except (json.JSONDecodeError, UnicodeDecodeError, binascii.Error):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_REQUEST})
        return response_400(message='invalid JSON body', error_code=INVALID_REQUEST)

    target_url = request_body.get('url') if isinstance(request_body, dict) else None
    if not isinstance(target_url, str) or not target_url:
        logger.info("Missing 'url' in JSON body. Responding with 400.", extra={'event': INVALID_REQUEST})
        return response_400(message="missing 'url' in JSON body", error_code=INVALID_REQUEST)

    # 3- Encode long URL
    try:
        short_url = shortener.encode(target_url)
    except CollisionLimitExceededError:
        logger.error(
            'Ran out of short code attempts. Responding with 500.',
            extra={'event': COLLISION_LIMIT_EXCEEDED},
        )
        return response_500(message='could not allocate a short code', error_code=COLLISION_LIMIT_EXCEEDED)
    except BackendRejectedError as e:
        logger.error('Record store rejected short URL. Responding with 500.', extra={'event': BACKEND_REJECTED})
        return response_500(message=str(e), error_code=BACKEND_REJECTED)
    except DataStoreError as e:
        logger.error('Record store unavailable. Responding with 503.', extra={'event': BACKEND_UNAVAILABLE, 'reason': str(e)})
        return response_503(error_code=BACKEND_UNAVAILABLE)

    # 4- Respond with short link
    shortlink = get_short_url(short_url.shortcode, app_config.base_url)
    logger.info(
        'Shortened URL. Responding with 200.',
        extra={'shortcode': short_url.shortcode, 'event': SHORTEN_SUCCESS},
    )
    return response_200({'shortlink': shortlink})
