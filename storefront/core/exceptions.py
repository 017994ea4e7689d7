class BaseCoreError(Exception):
    """Classe base para todas as exceções da Camada Core."""
    status_code = 400
    default_message = "Erro de domínio."

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class InvalidDataError(BaseCoreError):
    """Erro levantado quando dados inválidos são fornecidos."""
    default_message = "The provided data is invalid."


# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class NotFoundError(BaseCoreError):
    """Erro levantado quando um item (genérico) não é encontrado."""
    status_code = 404
    default_message = "The requested resource was not found."


class UserNotFoundError(NotFoundError):
    default_message = "User not found."


class OrderNotFoundError(NotFoundError):
    default_message = "Order not found."


class CategoryNotFoundError(NotFoundError):
    default_message = "Category not found."


class ProductNotFoundError(NotFoundError):
    default_message = "Product not found."


class VariantNotFoundError(NotFoundError):
    default_message = "Variant not found."


class ColorNotFoundError(NotFoundError):
    default_message = "Color not found."


class PriceRuleNotFoundError(NotFoundError):
    default_message = "Price rule not found."


class ConflictError(BaseCoreError):
    """Erro levantado quando um valor único já está em uso."""
    status_code = 409
    default_message = "Resource already exists."


class EmailAlreadyInUseError(ConflictError):
    default_message = "Email already in use."


class SlugAlreadyExistsError(ConflictError):
    default_message = "Slug already exists."


# ===============================================
# ERROS DE ACESSO
# ===============================================

class InvalidCredentialsError(BaseCoreError):
    """Erro levantado quando e-mail ou senha não conferem."""
    status_code = 401
    default_message = "Invalid credentials."


class PermissionDeniedError(BaseCoreError):
    """Erro levantado quando o usuário não pode acessar o recurso."""
    status_code = 403
    default_message = "You do not have permission to access this resource."


# ===============================================
# ERROS DE FLUXO DE PEDIDO E PAGAMENTO
# ===============================================

class InvalidStatusError(BaseCoreError):
    """Erro levantado ao tentar definir um status de pedido inexistente."""
    default_message = "The provided status is not a valid order status."


class InvalidStatusTransitionError(InvalidStatusError):
    """Erro levantado quando a transição de status não é permitida."""

    def __init__(self, current: str, target: str, message=None):
        self.current = current
        self.target = target
        if message is None:
            message = f"Cannot change order status from {current} to {target}."
        super().__init__(message)


class PaymentFailedError(BaseCoreError):
    """Erro levantado quando o Gateway de Pagamento rejeita a transação."""
    status_code = 402
    default_message = "The payment transaction was rejected or failed."
