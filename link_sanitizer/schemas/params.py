from pydantic import BaseModel, Field


class ParameterCreate(BaseModel):
    name: str = Field(description="Query parameter name; stored lowercase")


class ParameterList(BaseModel):
    params: list[str]
    count: int

    @classmethod
    def from_names(cls, names: list[str]) -> "ParameterList":
        return cls(params=names, count=len(names))
