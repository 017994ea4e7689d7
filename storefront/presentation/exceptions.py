"""
Tratamento centralizado de exceções da API.

Converte exceções do Core, do DRF e de integridade do banco em um corpo
de erro uniforme:
{statusCode, error, message, errors?, path, method, timestamp}.
"""
import logging
from http import HTTPStatus

from django.db.models import ProtectedError, RestrictedError
from django.db.utils import IntegrityError
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from storefront.core.exceptions import BaseCoreError

logger = logging.getLogger(__name__)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return 'Error'


def _error_body(request, status_code, message, errors=None):
    body = {
        'statusCode': status_code,
        'error': _reason(status_code),
        'message': message,
    }
    if errors:
        body['errors'] = errors
    body['path'] = request.path if request is not None else None
    body['method'] = request.method if request is not None else None
    body['timestamp'] = timezone.now().isoformat()
    return body


def _flatten_detail(detail):
    """Extrai uma mensagem legível do 'detail' do DRF."""
    if isinstance(detail, dict) and 'detail' in detail:
        return str(detail['detail'])
    if isinstance(detail, (list, tuple)) and detail:
        return str(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    request = context.get('request')

    if isinstance(exc, BaseCoreError):
        logger.warning("%s %s -> %s: %s",
                       getattr(request, 'method', '-'), getattr(request, 'path', '-'),
                       exc.status_code, exc.message)
        return Response(
            _error_body(request, exc.status_code, exc.message, exc.errors),
            status=exc.status_code,
        )

    if isinstance(exc, (ProtectedError, RestrictedError)):
        logger.warning("Remoção bloqueada por registros dependentes em %s: %s", getattr(request, 'path', '-'), exc)
        return Response(
            _error_body(request, status.HTTP_409_CONFLICT, 'Resource is in use.'),
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        logger.warning("Violação de integridade em %s: %s", getattr(request, 'path', '-'), exc)
        return Response(
            _error_body(request, status.HTTP_409_CONFLICT, 'Resource already exists.'),
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Erro inesperado em %s %s",
                         getattr(request, 'method', '-'), getattr(request, 'path', '-'))
        return Response(
            _error_body(request, status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error'),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        errors = response.data if isinstance(response.data, dict) else {'non_field_errors': response.data}
        response.data = _error_body(request, response.status_code, 'Validation failed', errors)
    else:
        response.data = _error_body(request, response.status_code, _flatten_detail(response.data))
    return response
