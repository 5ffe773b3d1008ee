from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for models that travel over the API with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
