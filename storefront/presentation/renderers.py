from rest_framework.renderers import JSONRenderer


class EnvelopeJSONRenderer(JSONRenderer):
    """
    Envolve respostas de sucesso em {"data", "message", "success"}.
    Erros, respostas sem corpo e requisições HEAD passam sem alteração.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        renderer_context = renderer_context or {}
        response = renderer_context.get('response')
        request = renderer_context.get('request')

        wrap = (
            response is not None
            and not getattr(response, 'exception', False)
            and 200 <= response.status_code < 300
            and response.status_code != 204
            and not (request is not None and request.method == 'HEAD')
        )
        if wrap:
            data = {'data': data, 'message': 'Success', 'success': True}

        return super().render(data, accepted_media_type, renderer_context)
