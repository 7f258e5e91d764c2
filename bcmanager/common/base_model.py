from pydantic import BaseModel, ConfigDict


def underscore_to_camel(field_name: str) -> str:
    """
    Alias generator that takes the field name and converts it into camelCase
    Args:
        field_name: string that contains the name of the field to be processed

    Returns: the alias name with no underscores

    """
    head, *tail = field_name.split('_')
    return head + ''.join(word.capitalize() for word in tail)


class BCBaseModel(BaseModel):
    """
    Base data structure for providing a common configuration for all data structures.
    """
    model_config = ConfigDict(populate_by_name=True,
                              use_enum_values=True,
                              arbitrary_types_allowed=True,
                              validate_assignment=True,
                              alias_generator=underscore_to_camel)

    def dict(self, exclude_none: bool = True, **kwargs):
        return super().model_dump(exclude_none=exclude_none, **kwargs)


class BCFrozenModel(BCBaseModel):
    """ Immutable variant, instances are hashable and can't be modified after construction """
    model_config = ConfigDict(frozen=True, validate_assignment=False)
