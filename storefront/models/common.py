from enum import Enum
from typing import List, Type

from pydantic import BaseModel

class EntityKind(str, Enum):
    products = "products"
    carts = "carts"

    @property
    def singular(self) -> str:
        return self.value[:-1]


def required_fields(model: Type[BaseModel]) -> List[str]:
    """Fields the model declares without a default, in declaration order."""
    return [name for name, f in model.model_fields.items() if f.is_required()]
