"""
Groups transaction records by destination bank.

Resolution order for a record's receiver BIC:
1. exact lookup in the reverse index (full BICs plus their 8-character prefixes)
2. first index entry whose key starts with the BIC, or whose 8-character
   prefix the BIC starts with (registry order breaks ties; an empty BIC
   matches the first entry)
3. the UNKNOWN_BANK bucket
"""

from collections.abc import Sequence

from bankbatch.core.models import BankRegistry, TransactionRecord

UNKNOWN_BANK = "Unknown Bank"
BIC_PREFIX_LENGTH = 8


def build_reverse_index(registry: BankRegistry) -> dict[str, str]:
    """
    Map every registered BIC, and the 8-character prefix of longer BICs, to its bank.

    Keys keep registry order; a key registered twice keeps its first position
    and takes the later bank name.

    Args:
        registry: Bank registry

    Returns:
        Ordered mapping of BIC (or BIC prefix) to bank name
    """
    index: dict[str, str] = {}
    for entry in registry.banks:
        for bic in entry.bic_codes:
            index[bic] = entry.name
            if len(bic) > BIC_PREFIX_LENGTH:
                index[bic[:BIC_PREFIX_LENGTH]] = entry.name
    return index


def resolve_bank(receiver_bic: str, index: dict[str, str]) -> str:
    """
    Resolve a receiver BIC to a bank name.

    Args:
        receiver_bic: BIC carried by the record
        index: Reverse index from build_reverse_index

    Returns:
        Bank name, or UNKNOWN_BANK
    """
    bank_name = index.get(receiver_bic)
    if bank_name:
        return bank_name

    for registered_bic, name in index.items():
        if (
            registered_bic.startswith(receiver_bic)
            or receiver_bic.startswith(registered_bic[:BIC_PREFIX_LENGTH])
        ):
            return name

    return UNKNOWN_BANK


def group_by_bank(
    records: Sequence[TransactionRecord],
    registry: BankRegistry,
) -> dict[str, list[TransactionRecord]]:
    """
    Partition records by resolved destination bank.

    Groups appear in order of first occurrence and keep the input order of
    their records. Every input record lands in exactly one group.

    Args:
        records: Records to group
        registry: Bank registry

    Returns:
        Mapping of bank name to records
    """
    index = build_reverse_index(registry)
    groups: dict[str, list[TransactionRecord]] = {}
    for record in records:
        bank_name = resolve_bank(record.receiver_bic, index)
        groups.setdefault(bank_name, []).append(record)
    return groups
