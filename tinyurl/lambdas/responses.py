"""API Gateway / ALB proxy response builders shared by the lambda handlers."""

import json


JSON_HEADERS = {'Content-Type': 'application/json'}


def _error_body(base: str, message: str | None, error_code: str | None) -> str:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json.dumps(body)


def response_200(body: dict) -> dict:
    return {
        'statusCode': 200,
        'headers': JSON_HEADERS,
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': '',  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 400,
        'headers': JSON_HEADERS,
        'body': _error_body('Bad Request', message, error_code),
    }


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 404,
        'headers': JSON_HEADERS,
        'body': _error_body('Not Found', message, error_code),
    }


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 500,
        'headers': JSON_HEADERS,
        'body': _error_body('Internal Server Error', message, error_code),
    }


def response_503(message: str | None = None, error_code: str | None = None) -> dict:
    return {
        'statusCode': 503,
        'headers': JSON_HEADERS,
        'body': _error_body('Service Unavailable', message, error_code),
    }
