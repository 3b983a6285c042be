"""
Duplicate detection for transaction records.

Detection is two-phase: records are bucketed on the exact
(payer account, amount, beneficiary account) triple, then names are compared
pairwise inside each bucket only. Two records in a bucket are duplicates when
either their payer names or their beneficiary names fuzzy-match.

The ``is_duplicate`` flag is a snapshot of one pass over one record set; it is
recomputed from scratch on every call and goes stale as soon as the set changes.
"""

from collections.abc import Sequence

from bankbatch.core.models import TransactionRecord
from bankbatch.core.text import tokenize_name
from bankbatch.observability.logger import get_logger
from bankbatch.observability.metrics import duplicates_flagged_total, increment_counter

logger = get_logger(__name__)

BucketKey = tuple[str, str, str]


def fuzzy_match(name1: str, name2: str) -> bool:
    """
    Token-set fuzzy comparison of two names.

    Both names are normalized and split into lower-cased token sets; they match
    when the smaller set is contained in the larger one. Token order and case
    are ignored, partial tokens are not matched. Symmetric.

    Args:
        name1: First name
        name2: Second name

    Returns:
        True if the names match

    Examples:
        >>> fuzzy_match("Ahmed Ali", "ALI AHMED")
        True
        >>> fuzzy_match("Ahmed", "Ahmed Ali Hassan")
        True
        >>> fuzzy_match("Ahmed Ali", "Ahmed Omar")
        False
    """
    tokens1 = tokenize_name(name1)
    tokens2 = tokenize_name(name2)

    if not tokens1 or not tokens2:
        return False

    if len(tokens1) <= len(tokens2):
        return tokens1 <= tokens2
    return tokens2 <= tokens1


def _bucket_key(record: TransactionRecord) -> BucketKey:
    return (record.payer_account, record.amount, record.beneficiary_account)


def _bucket_records(records: Sequence[TransactionRecord]) -> dict[BucketKey, list[int]]:
    """Group record positions by the exact-match key."""
    buckets: dict[BucketKey, list[int]] = {}
    for index, record in enumerate(records):
        buckets.setdefault(_bucket_key(record), []).append(index)
    return buckets


def _is_duplicate_pair(first: TransactionRecord, second: TransactionRecord) -> bool:
    return (
        fuzzy_match(first.payer_name, second.payer_name)
        or fuzzy_match(first.beneficiary_name, second.beneficiary_name)
    )


def find_duplicate_positions(records: Sequence[TransactionRecord]) -> set[int]:
    """
    Positions of every record that belongs to at least one matching pair.

    Only records sharing a bucket key are compared with each other.
    """
    flagged: set[int] = set()
    for indices in _bucket_records(records).values():
        for pos, i in enumerate(indices):
            for j in indices[pos + 1:]:
                if _is_duplicate_pair(records[i], records[j]):
                    flagged.add(i)
                    flagged.add(j)
    return flagged


def detect_duplicates(records: Sequence[TransactionRecord]) -> list[TransactionRecord]:
    """
    Flag likely duplicate records.

    Every returned record has its ``is_duplicate`` flag rewritten: True when it
    belongs to at least one matching pair, False otherwise (stale flags from
    an earlier pass are cleared). Order and all other fields are preserved.

    Args:
        records: The full record set

    Returns:
        New list of records with fresh duplicate flags
    """
    flagged = find_duplicate_positions(records)
    if flagged:
        logger.info(f"Flagged {len(flagged)} duplicate records out of {len(records)}")
        increment_counter(duplicates_flagged_total, len(flagged))

    return [
        record.model_copy(update={"is_duplicate": index in flagged})
        for index, record in enumerate(records)
    ]


def remove_duplicates(records: Sequence[TransactionRecord]) -> list[TransactionRecord]:
    """Drop every record currently flagged as a duplicate."""
    return [record for record in records if not record.is_duplicate]


def duplicate_details(records: Sequence[TransactionRecord]) -> list[str]:
    """
    Describe flagged duplicates for the reviewer.

    Flagged records are grouped by payer name, payer account, amount and
    beneficiary account; each group yields one line listing the records'
    1-based positions in ``records``.

    Args:
        records: Record set after a detection pass

    Returns:
        One "Duplicate entry found in rows: ..." line per group
    """
    groups: dict[tuple[str, str, str, str], list[int]] = {}
    for position, record in enumerate(records, start=1):
        if record.is_duplicate:
            key = (record.payer_name, record.payer_account, record.amount, record.beneficiary_account)
            groups.setdefault(key, []).append(position)

    return [
        f"Duplicate entry found in rows: {', '.join(str(p) for p in positions)}"
        for positions in groups.values()
    ]
