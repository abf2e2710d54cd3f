from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from taskboard.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse(model: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """Validate a payload into ``model``, raising the core ``ValidationError``."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    role: str

    class Config:
        from_attributes = True
