"""Build-wide options.

BuilderOptions is fixed for the lifetime of a Builder; no option can be
changed while a build is running.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Highest permission value a tree entry may request.
MAX_PERM = 0o777


def parse_perm(value: object) -> int:
    """Parse a permission given as an int or an octal string.

    Args:
        value: Integer permission, or an octal string such as "0755" or "0o755".

    Returns:
        Permission bits as an int.

    Raises:
        ValueError: If the value is not a permission in the 0-0777 range.
    """
    if isinstance(value, bool):
        msg = f"permission must be an int or octal string, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, str):
        text = value.strip().lower().removeprefix("0o")
        if not text or not text.isdigit():
            msg = f"invalid octal permission {value!r}"
            raise ValueError(msg)
        try:
            value = int(text, 8)
        except ValueError:
            msg = f"invalid octal permission {value!r}"
            raise ValueError(msg) from None
    if not isinstance(value, int):
        msg = f"permission must be an int or octal string, got {type(value).__name__}"
        raise ValueError(msg)
    if not (0 <= value <= MAX_PERM):
        msg = f"permission {value:#o} out of range 0-0777"
        raise ValueError(msg)
    return value


class BuilderOptions(BaseModel):
    """Options shared by every operation of a Builder.

    Attributes:
        umask: Bits removed from every requested permission, both when
            creating an entry and when comparing against an existing one.
        verbose: Echo every mutation to stderr.
        dry_run: Resolve and report mutations without performing them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    umask: Annotated[int, Field(description="Permission bits masked on create and compare")] = 0
    verbose: Annotated[bool, Field(description="Echo every mutation")] = False
    dry_run: Annotated[bool, Field(description="Report mutations without performing them")] = (
        False
    )

    @field_validator("umask", mode="before")
    @classmethod
    def validate_umask(cls, v: object) -> int:
        """Accept the umask as an int or an octal string like "022"."""
        return parse_perm(v)

    def apply_umask(self, perm: int) -> int:
        """Return the effective permission for a requested one."""
        return perm & ~self.umask & MAX_PERM
