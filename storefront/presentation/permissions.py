"""
Decoradores e permissões da API.

Toda rota exige autenticação por padrão. Handlers (ou views inteiras)
marcados com @public dispensam o token; @roles(...) restringe o acesso
a determinados papéis.
"""
from rest_framework.permissions import BasePermission


def public(target):
    """Marca um handler (ou uma classe de view) como rota pública."""
    target.is_public = True
    return target


def roles(*allowed_roles):
    """Restringe um handler (ou uma classe de view) aos papéis informados."""
    def decorator(target):
        target.required_roles = frozenset(allowed_roles)
        return target
    return decorator


def _get_handler(request, view):
    action = getattr(view, 'action', None)
    if action:
        return getattr(view, action, None)
    return getattr(view, request.method.lower(), None)


def _marker(request, view, name, default=None):
    """Procura o marcador primeiro no handler e depois na classe da view."""
    handler = _get_handler(request, view)
    value = getattr(handler, name, None) if handler is not None else None
    if value is None:
        value = getattr(view, name, default)
    return value


class PublicOrAuthenticated(BasePermission):
    """Libera rotas @public; as demais exigem um usuário autenticado."""

    def has_permission(self, request, view):
        if _marker(request, view, 'is_public', False):
            return True
        return bool(request.user and request.user.is_authenticated)


class HasRequiredRole(BasePermission):
    """Confere o papel do usuário contra o @roles do handler, se houver."""
    message = 'You do not have the role required to perform this action.'

    def has_permission(self, request, view):
        required = _marker(request, view, 'required_roles')
        if not required:
            return True
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'role', None) in required)
