"""
Responses read back from the solver.
"""
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self):
        return type(self).__name__


class Sat(Response):
    pass


class Unsat(Response):
    pass


class Unknown(Response):
    pass


class Ok(Response):
    pass


class Values(Response):
    pairs: List[Tuple[str, str]]

    def __str__(self):
        return f"Values {self.pairs}"


class Error(Response):
    message: str

    def __str__(self):
        return f'Error "{self.message}"'
