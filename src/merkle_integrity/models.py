# models.py
# Data contracts for records and the benchmark harness.
# No business logic lives here, only schema and validation.

from pydantic import BaseModel, Field, model_validator


class Record(BaseModel):
    """A named content record, one leaf of the tree."""

    name: str = Field(..., min_length=1, description="Record name, expected unique.")
    content: bytes = Field(default=b"", description="Raw record content.")

    @staticmethod
    def split(records: list["Record"]) -> tuple[list[str], list[bytes]]:
        """Parallel (names, contents) sequences in record order."""
        return [r.name for r in records], [r.content for r in records]


class BenchConfig(BaseModel):
    """Options for one benchmark invocation."""

    n: int = Field(..., ge=0, description="Records per generated dataset.")
    runs: int = Field(..., ge=1)
    seed: int = Field(..., ge=0, description="Base seed; run r uses seed + r.")
    csv_path: str = Field(..., min_length=1)
    build: bool = False
    verify_target: str | None = None
    tamper_target: str | None = None
    tamper_content: str | None = None

    @model_validator(mode="after")
    def _tamper_needs_content(self) -> "BenchConfig":
        if self.tamper_target is not None and self.tamper_content is None:
            raise ValueError("tamper_target requires tamper_content.")
        return self


class BenchRow(BaseModel):
    """One timed operation, written as a CSV row."""

    module: str = "merkle"
    run_id: int
    n: int
    seed: int
    op: str
    op_time_ms: float
    memory_bytes: int = 0
    result: str
    details: str = ""


CSV_FIELDS: list[str] = list(BenchRow.model_fields)
