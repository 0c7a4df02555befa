"""
Deck persistence layer - routes project records across the three storage tiers.

Primary tier: the Supabase ``projects`` table, every call deadline-bounded.
Durable-local tier: device-local list used when the primary tier is
unavailable at create time. Ephemeral tier: session-scoped decks that were
never saved.
"""
import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Union

from pydantic import ValidationError

from promptdeck.agents.generation.config import PersistenceConfig, get_persistence_config
from promptdeck.agents.generation.deadlines import run_blocking_with_deadline
from promptdeck.agents.generation.exceptions import (
    InvalidProjectDataError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    PersistenceTimeoutError,
    UnavailableError,
    allows_local_fallback,
)
from promptdeck.agents.persistence.local_stores import DurableLocalStore, EphemeralStore
from promptdeck.agents.persistence.project_ref import ProjectRef
from promptdeck.models.deck import Deck
from promptdeck.models.project import DeckKind, OwnerStats, Project, StorageTier, UserProfile
from promptdeck.services.network_status import get_network_status
from promptdeck.setup_logging_optimized import get_logger
from promptdeck.utils.supabase import SupabaseProjectStore
from promptdeck.utils.timestamps import utc_now

logger = get_logger(__name__)

RefLike = Union[ProjectRef, str]

# Tier bookkeeping never written to the primary table
LOCAL_ONLY_FIELDS = {'storageTier', 'isLocal', 'isTemporary', 'pendingPrimaryId'}
# Fields a patch may not change
IMMUTABLE_FIELDS = {'id', 'userId', 'createdAt', 'storageTier'}

RECENT_PROJECTS_LIMIT = 5


def _primary_record(project: Project) -> Dict[str, Any]:
    return {key: value for key, value in project.to_record().items() if key not in LOCAL_ONLY_FIELDS}


def _clean_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Drop immutable fields and validate new slide data before any tier sees it."""
    cleaned = {key: value for key, value in patch.items() if key not in IMMUTABLE_FIELDS}
    if 'slideData' not in cleaned:
        return cleaned

    deck = cleaned['slideData']
    if not isinstance(deck, Deck):
        try:
            deck = Deck.model_validate(deck)
        except ValidationError as e:
            raise InvalidProjectDataError(
                "Updated slide data is not a valid deck",
                cause=e,
                context={'fields': sorted(cleaned)},
            )
    cleaned['slideData'] = deck.to_wire()
    cleaned['slideCount'] = deck.slide_count
    return cleaned


class DeckPersistence:
    """Project CRUD with tier routing, deadlines and local fallback."""

    def __init__(
        self,
        primary: Optional[SupabaseProjectStore] = None,
        durable_local: Optional[DurableLocalStore] = None,
        ephemeral: Optional[EphemeralStore] = None,
        is_online: Optional[Callable[[], bool]] = None,
        clock: Callable[[], datetime] = utc_now,
        config: Optional[PersistenceConfig] = None,
    ):
        self.config = config or get_persistence_config()
        self.primary = primary or SupabaseProjectStore()
        self.durable_local = durable_local or DurableLocalStore(self.config.local_store_dir)
        self.ephemeral = ephemeral or EphemeralStore()
        self.is_online = is_online or get_network_status()
        self.clock = clock
        self._background_tasks: Set[asyncio.Task] = set()

    async def _primary_call(self, fn: Callable, *args, seconds: float, description: str):
        if not self.is_online():
            raise UnavailableError(f"Offline: cannot {description}", context={'operation': description})
        return await run_blocking_with_deadline(
            fn, *args,
            seconds=seconds,
            timeout_error=PersistenceTimeoutError,
            description=f"Supabase {description}",
        )

    async def _adjust_counter(self, owner_id: str, delta: int) -> None:
        """Best-effort counter update; failures are logged only."""
        try:
            await self._primary_call(
                self.primary.adjust_project_count, owner_id, delta,
                seconds=self.config.counter_timeout_seconds,
                description=f"adjust project count for {owner_id}",
            )
        except Exception as e:
            logger.warning(f"Project counter update for {owner_id} failed (ignored): {e}")

    def _schedule_counter(self, owner_id: str, delta: int) -> None:
        """Run the counter update in the background; the caller never waits on it."""
        task = asyncio.create_task(self._adjust_counter(owner_id, delta))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def drain(self) -> None:
        """Wait for pending counter updates, e.g. before shutdown."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    def _new_project(self, ref: ProjectRef, deck: Deck, owner_id: str, prompt: str, kind: DeckKind) -> Project:
        now = self.clock()
        return Project(
            id=str(ref),
            userId=owner_id,
            title=deck.title,
            description=deck.description or "",
            prompt=prompt or "",
            slideData=deck,
            type=DeckKind(kind),
            createdAt=now,
            updatedAt=now,
            storageTier=ref.tier,
        )

    # --- create ---

    async def create(
        self,
        deck: Deck,
        owner_id: str,
        prompt: str = "",
        kind: Union[DeckKind, str] = DeckKind.PRESENTATION,
    ) -> ProjectRef:
        """Save a deck, degrading to the durable-local tier when the primary tier is unavailable.

        Raises:
            PermissionDeniedError, PersistenceError: primary refused the write
        """
        ref = ProjectRef.new_primary()
        project = self._new_project(ref, deck, owner_id, prompt, kind)

        try:
            await self._primary_call(
                self.primary.insert_project, _primary_record(project),
                seconds=self.config.write_timeout_seconds,
                description=f"insert project {ref}",
            )
        except PersistenceError as e:
            if not allows_local_fallback(e):
                raise
            logger.warning(f"Primary save failed ({type(e).__name__}); saving project locally")
            return self._create_local(project, pending_primary_id=str(ref))

        logger.info(f"Saved project {ref} for {owner_id} ({project.slideCount} slides)")
        self._schedule_counter(owner_id, 1)
        return ref

    def _create_local(self, project: Project, pending_primary_id: Optional[str] = None) -> ProjectRef:
        ref = ProjectRef.new_local()
        local = project.model_copy(update={
            'id': str(ref),
            'storageTier': StorageTier.DURABLE_LOCAL,
            'isLocal': True,
            'pendingPrimaryId': pending_primary_id,
        })
        records = self.durable_local.load()
        records.append(local.to_record())
        self.durable_local.save(records)
        logger.info(f"Saved project {ref} to durable local storage")
        return ref

    async def create_temporary(
        self,
        deck: Deck,
        owner_id: str,
        prompt: str = "",
        kind: Union[DeckKind, str] = DeckKind.PRESENTATION,
    ) -> ProjectRef:
        """Keep an unsaved deck for the current session only."""
        ref = ProjectRef.new_temporary()
        project = self._new_project(ref, deck, owner_id, prompt, kind).model_copy(update={'isTemporary': True})
        self.ephemeral.put(str(ref), project.to_record())
        logger.debug(f"Stored temporary project {ref}")
        return ref

    # --- read / update / delete ---

    def _find_local(self, ref: ProjectRef) -> Dict[str, Any]:
        key = str(ref)
        if ref.tier == StorageTier.EPHEMERAL:
            record = self.ephemeral.get(key)
        else:
            record = next((r for r in self.durable_local.load() if r.get('id') == key), None)
        if record is None:
            raise NotFoundError(f"Project {key} not found", context={'project_id': key, 'tier': ref.tier.value})
        return record

    async def read(self, ref: RefLike) -> Project:
        """
        Raises:
            NotFoundError: no such project in its tier
            UnavailableError: primary tier offline or timed out (PersistenceTimeoutError)
        """
        ref = ProjectRef.coerce(ref)
        if ref.tier != StorageTier.PRIMARY:
            return Project.model_validate(self._find_local(ref))

        record = await self._primary_call(
            self.primary.get_project, str(ref),
            seconds=self.config.read_timeout_seconds,
            description=f"get project {ref}",
        )
        return Project.model_validate({**record, 'storageTier': StorageTier.PRIMARY})

    async def update(self, ref: RefLike, patch: Dict[str, Any]) -> Project:
        ref = ProjectRef.coerce(ref)
        changes = _clean_patch(patch)

        if ref.tier == StorageTier.PRIMARY:
            primary_changes = {key: value for key, value in changes.items() if key not in LOCAL_ONLY_FIELDS}
            record = await self._primary_call(
                self.primary.update_project, str(ref), primary_changes,
                seconds=self.config.write_timeout_seconds,
                description=f"update project {ref}",
            )
            return Project.model_validate({**record, 'storageTier': StorageTier.PRIMARY})

        try:
            updated = Project.model_validate({**self._find_local(ref), **changes, 'updatedAt': self.clock()})
        except ValidationError as e:
            raise InvalidProjectDataError(
                f"Update would leave project {ref} invalid",
                cause=e,
                context={'project_id': str(ref), 'fields': sorted(changes)},
            )
        if ref.tier == StorageTier.EPHEMERAL:
            self.ephemeral.put(str(ref), updated.to_record())
        else:
            records = [
                updated.to_record() if r.get('id') == str(ref) else r
                for r in self.durable_local.load()
            ]
            self.durable_local.save(records)
        return updated

    async def delete(self, ref: RefLike, owner_id: str) -> None:
        ref = ProjectRef.coerce(ref)
        key = str(ref)

        if ref.tier == StorageTier.PRIMARY:
            await self._primary_call(
                self.primary.delete_project, key,
                seconds=self.config.write_timeout_seconds,
                description=f"delete project {key}",
            )
            self._schedule_counter(owner_id, -1)
        else:
            # Local tiers have no row-level security of their own
            record = self._find_local(ref)
            if record.get('userId') != owner_id:
                raise PermissionDeniedError(
                    f"Project {key} does not belong to {owner_id}",
                    context={'project_id': key, 'tier': ref.tier.value},
                )
            if ref.tier == StorageTier.EPHEMERAL:
                self.ephemeral.remove(key)
            else:
                self.durable_local.save([r for r in self.durable_local.load() if r.get('id') != key])
        logger.info(f"Deleted project {key}")

    # --- listing ---

    def _parse_records(self, records: List[Dict[str, Any]], tier: StorageTier) -> List[Project]:
        projects = []
        for record in records:
            try:
                projects.append(Project.model_validate({**record, 'storageTier': tier}))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable {tier.value} record {record.get('id')}: {e}")
        return projects

    async def _collect(self, owner_id: str, kind: Optional[DeckKind] = None) -> List[Project]:
        try:
            primary_records = await self._primary_call(
                self.primary.list_projects, owner_id, kind.value if kind else None,
                seconds=self.config.read_timeout_seconds,
                description=f"list projects for {owner_id}",
            )
        except PersistenceError as e:
            logger.warning(f"Primary listing for {owner_id} failed; using local tiers only: {e}")
            primary_records = []

        def owned(records):
            return [
                r for r in records
                if r.get('userId') == owner_id and (kind is None or r.get('type', DeckKind.PRESENTATION.value) == kind.value)
            ]

        primary = self._parse_records(primary_records, StorageTier.PRIMARY)
        durable = self._parse_records(owned(self.durable_local.load()), StorageTier.DURABLE_LOCAL)
        ephemeral = self._parse_records(owned(self.ephemeral.load()), StorageTier.EPHEMERAL)

        # A local copy whose primary write did land after all is shadowed by it
        primary_ids = {project.id for project in primary}
        durable = [p for p in durable if not p.pendingPrimaryId or p.pendingPrimaryId not in primary_ids]

        merged = primary + durable + ephemeral
        merged.sort(key=lambda project: project.createdAt, reverse=True)
        return merged

    async def list_for_owner(self, owner_id: str) -> List[Project]:
        """All of the owner's projects across tiers, newest first."""
        return await self._collect(owner_id)

    async def list_by_type(self, owner_id: str, kind: Union[DeckKind, str]) -> List[Project]:
        return await self._collect(owner_id, DeckKind(kind))

    async def search(self, owner_id: str, term: str) -> List[Project]:
        """Case-insensitive match on title, prompt and description."""
        projects = await self.list_for_owner(owner_id)
        needle = (term or "").strip().lower()
        if not needle:
            return projects
        return [
            project for project in projects
            if needle in project.title.lower()
            or needle in project.prompt.lower()
            or needle in project.description.lower()
        ]

    async def get_owner_stats(self, owner_id: str) -> OwnerStats:
        projects = await self.list_for_owner(owner_id)
        return OwnerStats(
            totalProjects=len(projects),
            totalSlides=sum(project.slideCount for project in projects),
            presentationCount=sum(1 for project in projects if project.type == DeckKind.PRESENTATION),
            plannerCount=sum(1 for project in projects if project.type == DeckKind.PLANNER),
            recentProjects=projects[:RECENT_PROJECTS_LIMIT],
        )

    # --- user profiles ---

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        record = await self._primary_call(
            self.primary.get_user, user_id,
            seconds=self.config.read_timeout_seconds,
            description=f"get user {user_id}",
        )
        return UserProfile.model_validate(record) if record else None

    async def update_user_profile(self, user_id: str, fields: Dict[str, Any]) -> UserProfile:
        changes = {key: value for key, value in fields.items() if key not in ('id', 'projectCount')}
        changes['lastLoginAt'] = self.clock().isoformat()
        record = await self._primary_call(
            self.primary.upsert_user, user_id, changes,
            seconds=self.config.write_timeout_seconds,
            description=f"update user {user_id}",
        )
        return UserProfile.model_validate(record)
