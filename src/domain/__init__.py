from src.domain.models import CategoryDefinition, User

__all__ = ["CategoryDefinition", "User"]
