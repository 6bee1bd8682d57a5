from pydantic import BaseModel


class SrcSpan(BaseModel):
    """
    Source location of the query that issued a command, used when reporting
    solver crashes.
    """

    file: str
    line: int = 0
    column: int = 0

    def __str__(self):
        return f"{self.file}:{self.line}:{self.column}"
