"""
Progress tracking service.

Maintains per-(user, item) aggregate statistics and the next review time from a
stream of correct/incorrect observations. Both apply paths (single and batch)
share one update rule; they differ only in the scheduling policy they use.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from lectio.core.config import settings
from lectio.core.exceptions import NotFoundError, ValidationError
from lectio.models.enums import ItemType, ObservationResult, SchedulingPolicyName
from lectio.models.user_progress import EPOCH, ItemRef, UserProgress
from lectio.schemas.progress import ObservationEvent, ProgressRecordResponse, ProgressResponse
from lectio.services.progress_store import ProgressStore
from lectio.services.scheduling_service import calculate_next_review_at, resolve_policy

logger = logging.getLogger(__name__)

PolicyArg = Optional[Union[str, SchedulingPolicyName]]
T = TypeVar("T")


@dataclass(frozen=True)
class ProgressState:
    """Aggregate statistics of one (user, item) pair, detached from the store."""
    correct_count: int = 0
    wrong_count: int = 0
    success_streak: int = 0
    knowledge_score: float = 0.0
    last_reviewed: datetime = EPOCH
    next_review: datetime = EPOCH

    @classmethod
    def from_record(cls, record: Optional[UserProgress]) -> "ProgressState":
        """Zeroed baseline when there is no record yet."""
        if record is None:
            return cls()
        return cls(
            correct_count=record.correct_count,
            wrong_count=record.wrong_count,
            success_streak=record.success_streak,
            knowledge_score=record.knowledge_score,
            last_reviewed=record.last_reviewed,
            next_review=record.next_review,
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_knowledge_score(correct_count: int, wrong_count: int) -> float:
    """Percentage of correct observations rounded to 2 decimals, 0 when there are none."""
    total = correct_count + wrong_count
    if total == 0:
        return 0.0
    return round(correct_count / total * 100, 2)


def apply_result(
    state: ProgressState,
    correct: bool,
    now: datetime,
    policy: Union[str, SchedulingPolicyName]
) -> ProgressState:
    """
    Apply one observation to a progress state.

    Correct increments correct_count and extends the streak; incorrect increments
    wrong_count and resets the streak to 0. The next review is scheduled from the
    new streak.
    """
    correct_count = state.correct_count + (1 if correct else 0)
    wrong_count = state.wrong_count + (0 if correct else 1)
    success_streak = state.success_streak + 1 if correct else 0

    return ProgressState(
        correct_count=correct_count,
        wrong_count=wrong_count,
        success_streak=success_streak,
        knowledge_score=calculate_knowledge_score(correct_count, wrong_count),
        last_reviewed=now,
        next_review=calculate_next_review_at(policy, success_streak, correct, base_time=now),
    )


def parse_item_ref(item_type: Union[str, ItemType], item_id: str) -> ItemRef:
    """Validate an item type / item id pair."""
    try:
        parsed_type = ItemType(item_type)
    except ValueError:
        raise ValidationError(f"Invalid item type: {item_type}")
    item_id = str(item_id or "").strip()
    if not item_id:
        raise ValidationError("Item id is required")
    return ItemRef(item_type=parsed_type, item_id=item_id)


def _require_user(user_id: str) -> None:
    if not user_id or not user_id.strip():
        raise ValidationError("User id is required")


def apply_observation(
    store: ProgressStore,
    user_id: str,
    item_type: Union[str, ItemType],
    item_id: str,
    correct: bool,
    now: Optional[datetime] = None,
    policy: PolicyArg = None
) -> UserProgress:
    """
    Apply one observation for (user_id, item) and persist it.

    Reads the existing record (zeroed baseline if absent), applies the update
    rule and upserts the result inside one transaction. The item's existence in
    the catalog is not checked here.

    Args:
        store: Progress store bound to the current session
        user_id: Owning user
        item_type: PARAGRAPH_QUESTION or IMPORTANT_WORD
        item_id: Id of the question or word
        correct: Outcome of the observation
        now: Review time (defaults to now)
        policy: Scheduling policy (defaults to settings.single_apply_policy)

    Returns:
        The updated UserProgress record

    Raises:
        ValidationError: Empty user id or item id, or unknown item type
        StoreFailure: The write failed; nothing was applied
    """
    _require_user(user_id)
    item = parse_item_ref(item_type, item_id)
    policy = resolve_policy(policy or settings.single_apply_policy)
    if now is None:
        now = datetime.now(timezone.utc)

    def work(tx: ProgressStore) -> UserProgress:
        existing = tx.find_one(user_id, item)
        state = apply_result(ProgressState.from_record(existing), correct, now, policy)
        return tx.upsert(user_id, item, state.as_dict(), existing=existing, lookup=False)

    record = store.run_transaction(work)
    logger.info(
        f"Applied {'correct' if correct else 'incorrect'} observation for user {user_id}, "
        f"{item.item_type.value} {item.item_id}: correct={record.correct_count}, "
        f"wrong={record.wrong_count}, streak={record.success_streak}, next_review={record.next_review}"
    )
    return record


def validate_events(events: Sequence[Any]) -> List[ObservationEvent]:
    """
    Validate batch events one by one, dropping the malformed ones.

    Raises:
        ValidationError: No events at all, or none of them valid
    """
    if not events:
        raise ValidationError("No events provided")

    valid_events: List[ObservationEvent] = []
    for index, raw in enumerate(events):
        if isinstance(raw, ObservationEvent):
            valid_events.append(raw)
            continue
        try:
            valid_events.append(ObservationEvent.model_validate(raw))
        except PydanticValidationError as e:
            logger.warning(f"Dropping invalid progress event at index {index}: {e.errors()}")

    if not valid_events:
        raise ValidationError("No valid events provided")
    return valid_events


def apply_observations(
    store: ProgressStore,
    user_id: str,
    events: Sequence[Any],
    now: Optional[datetime] = None,
    policy: PolicyArg = None
) -> Dict[str, UserProgress]:
    """
    Apply an ordered batch of observations atomically.

    This function:
    - Validates each event independently and drops invalid ones
    - Fetches the existing records for every referenced item in one query
    - Folds the events in input order against that in-memory view, so several
      events for the same item accumulate (fresh items included)
    - Writes one create-or-update per distinct item, all in one transaction

    Args:
        store: Progress store bound to the current session
        user_id: Owning user
        events: ObservationEvent instances or raw mappings in camelCase or snake_case
        now: Review time for every event in the batch (defaults to now)
        policy: Scheduling policy (defaults to settings.batch_apply_policy)

    Returns:
        Mapping of item id to the resulting record for every item touched

    Raises:
        ValidationError: No events or no valid events
        StoreFailure: Any write failed; no event of the batch was applied
    """
    _require_user(user_id)
    valid_events = validate_events(events)
    policy = resolve_policy(policy or settings.batch_apply_policy)
    if now is None:
        now = datetime.now(timezone.utc)

    def work(tx: ProgressStore) -> Dict[str, UserProgress]:
        question_ids = {e.item_id for e in valid_events if e.item_type == ItemType.PARAGRAPH_QUESTION}
        word_ids = {e.item_id for e in valid_events if e.item_type == ItemType.IMPORTANT_WORD}
        existing = {record.item: record for record in tx.find_many(user_id, question_ids, word_ids)}

        # Insertion order follows the first event touching each item
        states: Dict[ItemRef, ProgressState] = {}
        for event in valid_events:
            item = ItemRef(item_type=event.item_type, item_id=event.item_id)
            current = states.get(item)
            if current is None:
                current = ProgressState.from_record(existing.get(item))
            states[item] = apply_result(current, event.result == ObservationResult.CORRECT, now, policy)

        results: Dict[str, UserProgress] = {}
        for item, state in states.items():
            results[item.item_id] = tx.upsert(
                user_id, item, state.as_dict(), existing=existing.get(item), lookup=False
            )
        return results

    results = store.run_transaction(work)
    logger.info(
        f"Applied batch of {len(valid_events)} event(s) for user {user_id} "
        f"({len(events) - len(valid_events)} dropped), {len(results)} item(s) updated"
    )
    return results


def get_progress(
    store: ProgressStore,
    user_id: str,
    item_type: Union[str, ItemType],
    item_id: str
) -> UserProgress:
    """Read-only lookup of one record; raises NotFoundError when it does not exist."""
    _require_user(user_id)
    item = parse_item_ref(item_type, item_id)
    record = store.find_one(user_id, item, for_update=False)
    if record is None:
        raise NotFoundError(f"No progress for {item.item_type.value} {item.item_id}")
    return record


def fetch_progress_map(
    store: ProgressStore,
    user_id: str,
    question_ids: Iterable[str],
    word_ids: Iterable[str]
) -> Dict[ItemRef, UserProgress]:
    """Bulk lookup of the user's records for a set of questions and words, keyed by item."""
    return {record.item: record for record in store.find_many(user_id, question_ids, word_ids)}


def default_progress() -> ProgressResponse:
    return ProgressResponse(
        correct_count=0,
        wrong_count=0,
        knowledge_score=0.0,
        success_streak=0,
        last_reviewed=EPOCH,
        next_review=EPOCH,
    )


def to_progress(record: Optional[UserProgress]) -> ProgressResponse:
    """Project a record to its served form, or the zeroed default when there is none."""
    if record is None:
        return default_progress()
    return ProgressResponse(
        correct_count=record.correct_count,
        wrong_count=record.wrong_count,
        knowledge_score=record.knowledge_score,
        success_streak=record.success_streak,
        last_reviewed=record.last_reviewed,
        next_review=record.next_review,
    )


def to_progress_record(record: UserProgress) -> ProgressRecordResponse:
    return ProgressRecordResponse(
        user_id=record.user_id,
        item_type=record.item_type,
        item_id=record.item_id,
        **to_progress(record).model_dump(),
    )


def is_due(record: Optional[UserProgress], now: datetime) -> bool:
    """An item is due when it was never reviewed or its next review time has passed."""
    return record is None or record.next_review <= now


def partition_due(
    items: Iterable[T],
    progress_map: Dict[ItemRef, UserProgress],
    key: Optional[Callable[[T], ItemRef]] = None,
    now: Optional[datetime] = None
) -> Tuple[List[T], List[T]]:
    """
    Split items into (due, later) keeping their order.

    Args:
        items: Items to split
        progress_map: Records keyed by ItemRef, as returned by fetch_progress_map
        key: Callable returning the ItemRef of an item (items are ItemRefs when omitted)
        now: Reference time (defaults to now)
    """
    if now is None:
        now = datetime.now(timezone.utc)
    due: List[T] = []
    later: List[T] = []
    for item in items:
        ref = key(item) if key is not None else item
        if is_due(progress_map.get(ref), now):
            due.append(item)
        else:
            later.append(item)
    return due, later


def list_due_progress(
    store: ProgressStore,
    user_id: str,
    item_type: Optional[Union[str, ItemType]] = None,
    now: Optional[datetime] = None
) -> List[UserProgress]:
    """Records of the user whose next review time has passed, soonest first."""
    _require_user(user_id)
    parsed_type = None
    if item_type is not None:
        try:
            parsed_type = ItemType(item_type)
        except ValueError:
            raise ValidationError(f"Invalid item type: {item_type}")
    if now is None:
        now = datetime.now(timezone.utc)
    return store.find_due(user_id, now, parsed_type)
