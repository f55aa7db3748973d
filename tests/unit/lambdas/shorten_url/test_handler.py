import json
import base64
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from tinyurl.types import LambdaEvent, LambdaContext
from tinyurl.lambdas.shorten_url import app
from tinyurl.models import ShortURLModel
from tinyurl.shortener import URLShortener
from tinyurl.utils.config import AppConfig
from tinyurl.dao.exceptions import DataStoreError
from tinyurl.exceptions import BackendRejectedError, CollisionLimitExceededError


def post_event(body, is_base64_encoded: bool = False) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/v1/shorten',
        'httpMethod': 'POST',
        'path': '/v1/shorten',
        'body': body,
        'isBase64Encoded': is_base64_encoded,
        'requestContext': {'domainName': 'testhost:1000', 'stage': 'test', 'resourcePath': '/v1/shorten'},
    })


@pytest.fixture
def successful_event_200() -> LambdaEvent:
    return post_event(json.dumps({'url': 'https://example.com/blog/chuck-norris-is-awesome'}))


class TestShortenUrlHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'shorten_url'})

    @pytest.fixture
    def config(self) -> AppConfig:
        return AppConfig(base_url='https://testhost:1000/', table_name='tinyurl-test', region_name='eu-west-1')

    @pytest.fixture
    def shortener(self, created_at) -> URLShortener:
        shortener = MagicMock(spec=URLShortener)
        shortener.encode.return_value = ShortURLModel(
            target='https://example.com/blog/chuck-norris-is-awesome',
            shortcode='2abc123',
            created_at=created_at,
        )
        return shortener

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: AppConfig,
        shortener: URLShortener,
    ) -> None:
        # Cloud runtime: unhandled errors become 500s instead of being re-raised
        monkeypatch.setenv('APP_ENV', 'test')
        monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)

        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'build_shortener', lambda *a, **kw: shortener)

        self.context = context
        self.config = config
        self.shortener = shortener

    def test_lambda_handler(self, successful_event_200: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert response['headers']['Content-Type'] == 'application/json'
        assert body == {'shortlink': 'https://testhost:1000/2abc123'}
        self.shortener.encode.assert_called_once_with('https://example.com/blog/chuck-norris-is-awesome')

    def test_lambda_handler_with_base64_body(self) -> None:
        payload = base64.b64encode(json.dumps({'url': 'https://example.com/blog/chuck-norris-is-awesome'}).encode()).decode()

        response = app.lambda_handler(post_event(payload, is_base64_encoded=True), self.context)

        assert response['statusCode'] == 200
        self.shortener.encode.assert_called_once_with('https://example.com/blog/chuck-norris-is-awesome')

    @pytest.mark.parametrize('body', ['{not json', '"\\ud800', 'null}'])
    def test_lambda_handler_with_invalid_json(self, body) -> None:
        response = app.lambda_handler(post_event(body), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'message': 'Bad Request (invalid JSON body)', 'errorCode': 'INVALID_REQUEST'}
        self.shortener.encode.assert_not_called()

    def test_lambda_handler_with_invalid_base64_body(self) -> None:
        response = app.lambda_handler(post_event('%%%not-base64%%%', is_base64_encoded=True), self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'INVALID_REQUEST'

    @pytest.mark.parametrize(
        'body',
        [
            None,
            '',
            '{}',
            '[]',
            '"https://example.com"',
            json.dumps({'url': ''}),
            json.dumps({'url': 42}),
            json.dumps({'link': 'https://example.com'}),
        ],
    )
    def test_lambda_handler_with_missing_url(self, body) -> None:
        response = app.lambda_handler(post_event(body), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'message': "Bad Request (missing 'url' in JSON body)", 'errorCode': 'INVALID_REQUEST'}
        self.shortener.encode.assert_not_called()

    def test_lambda_handler_with_collision_limit_exceeded(self, successful_event_200: LambdaEvent) -> None:
        self.shortener.encode.side_effect = CollisionLimitExceededError('Could not find a free short code after 10 attempts.')

        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error (could not allocate a short code)', 'errorCode': 'COLLISION_LIMIT_EXCEEDED'}

    def test_lambda_handler_with_rejected_record(self, successful_event_200: LambdaEvent) -> None:
        self.shortener.encode.side_effect = BackendRejectedError('Record store rejected the short URL: Item too large')

        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'BACKEND_REJECTED'
        assert 'Item too large' in body['message']

    def test_lambda_handler_with_unavailable_store(self, successful_event_200: LambdaEvent) -> None:
        self.shortener.encode.side_effect = DataStoreError("DynamoDB request on table 'tinyurl-test' failed (InternalServerError).")

        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 503
        assert body == {'message': 'Service Unavailable', 'errorCode': 'BACKEND_UNAVAILABLE'}

    def test_lambda_handler_with_unreachable_store_at_startup(
        self,
        monkeypatch: MonkeyPatch,
        successful_event_200: LambdaEvent,
    ) -> None:
        monkeypatch.setattr(app, 'build_shortener', MagicMock(side_effect=DataStoreError("Can't connect to Redis at redis:6379/0.")))

        response = app.lambda_handler(successful_event_200, self.context)

        assert response['statusCode'] == 503

    def test_lambda_handler_with_unexpected_error(self, successful_event_200: LambdaEvent) -> None:
        self.shortener.encode.side_effect = RuntimeError('Something goes wrong')

        response = app.lambda_handler(successful_event_200, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}

    def test_lambda_handler_reraises_locally(self, monkeypatch: MonkeyPatch, successful_event_200: LambdaEvent) -> None:
        monkeypatch.setenv('APP_ENV', 'local')
        self.shortener.encode.side_effect = RuntimeError('Something goes wrong')

        with pytest.raises(RuntimeError):
            app.lambda_handler(successful_event_200, self.context)
