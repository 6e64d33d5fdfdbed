from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for records exchanged with the frontend and the model.

    The wire form is camelCase. Explicit nulls fall back to field defaults, since
    model output routinely sends ``null`` for fields it has nothing to say about.
    Numbers sent for text fields (an id of 1, an amount of 2) keep their string form.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "coerce_numbers_to_str": True}

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
