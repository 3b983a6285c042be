"""
BankRegistry model: the curated mapping of destination banks to their BIC codes.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BankEntry(BaseModel):
    """
    One registered bank.

    Attributes:
        name: Human-readable bank name (used as the export group key)
        bic_codes: BIC codes issued to the bank, 8-11 characters each
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    bic_codes: tuple[str, ...] = Field(..., min_length=1)

    @field_validator("bic_codes")
    @classmethod
    def check_bic_lengths(cls, v):
        """Registered BICs must be 8 to 11 characters."""
        for bic in v:
            if not 8 <= len(bic) <= 11:
                raise ValueError(f"BIC code '{bic}' must be 8 to 11 characters")
        return v


class BankRegistry(BaseModel):
    """
    Immutable, ordered bank registry injected into the bank grouper.

    Entry order is significant: it is the tie-break for partial BIC matches.
    """

    model_config = ConfigDict(frozen=True)

    banks: tuple[BankEntry, ...] = ()

    @field_validator("banks")
    @classmethod
    def check_unique_names(cls, v):
        """Bank names must be unique."""
        names = [entry.name for entry in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate bank names in registry: {', '.join(duplicates)}")
        return v

    @classmethod
    def from_mapping(cls, mapping: dict[str, list[str]]) -> "BankRegistry":
        """Build a registry from an ordered ``{bank name: [BIC, ...]}`` mapping."""
        return cls(banks=tuple(
            BankEntry(name=name, bic_codes=tuple(codes))
            for name, codes in mapping.items()
        ))

    def bank_names(self) -> list[str]:
        return [entry.name for entry in self.banks]

    def __len__(self) -> int:
        return len(self.banks)
